"""Subprocess-based executor for the Claude CLI in print mode."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import cast

from journey_ai.claude_cli.backend.base import ProcessCapture
from journey_ai.claude_cli.models import (
    ClaudeCliRequest,
    ClaudeCliResponse,
    FailureClass,
    ServiceConfig,
)
from journey_ai.claude_cli.parser import parse_claude_response

logger = logging.getLogger(__name__)

_READ_CHUNK_BYTES = 65_536


class CliProcessExecutor:
    """Run one request as an isolated ``claude --print`` process.

    The prompt goes to stdin in full, then stdin is closed. Stdout and stderr are
    accumulated for the life of the process. When the attempt outlives its
    timeout the process gets SIGTERM, then SIGKILL after ``terminate_grace_seconds``.
    """

    def __init__(self, config: ServiceConfig, *, terminate_grace_seconds: float = 2.0) -> None:
        self.config = config
        self.terminate_grace_seconds = terminate_grace_seconds

    async def run(self, request: ClaudeCliRequest) -> ClaudeCliResponse:
        timeout_ms = (
            request.timeout_ms if request.timeout_ms is not None else self.config.default_timeout_ms
        )
        start_monotonic = time.monotonic()
        try:
            payload = request.prompt.encode("utf-8")
        except UnicodeEncodeError as error:
            logger.warning("Claude CLI prompt cannot be encoded: %s", error)
            return ClaudeCliResponse(
                success=False,
                error=f"Prompt is not valid UTF-8: {error}",
                duration_ms=_elapsed_ms(start_monotonic),
                failure_class=FailureClass.SPAWN_ERROR,
            )

        try:
            capture = await _run_subprocess_with_timeout(
                argv=self.config.command,
                payload=payload,
                cwd=request.working_directory,
                timeout_seconds=timeout_ms / 1000,
                grace_seconds=self.terminate_grace_seconds,
            )
        except OSError as error:
            logger.warning("Claude CLI failed to start: %s", error)
            return ClaudeCliResponse(
                success=False,
                raw_output="",
                error=f"Failed to spawn Claude CLI: {error}",
                duration_ms=_elapsed_ms(start_monotonic),
                failure_class=FailureClass.SPAWN_ERROR,
            )

        return _classify_capture(
            capture=capture,
            timeout_ms=timeout_ms,
            expect_json=request.json_schema is not None,
            duration_ms=_elapsed_ms(start_monotonic),
        )


def _classify_capture(
    *,
    capture: ProcessCapture,
    timeout_ms: int,
    expect_json: bool,
    duration_ms: int,
) -> ClaudeCliResponse:
    if capture.timed_out:
        logger.warning("Claude CLI timed out after %dms", timeout_ms)
        return ClaudeCliResponse(
            success=False,
            raw_output=capture.stdout,
            error=f"Request timed out after {timeout_ms}ms",
            duration_ms=duration_ms,
            failure_class=FailureClass.TIMEOUT,
        )

    if capture.exit_code != 0:
        stderr = capture.stderr.strip()
        logger.warning("Claude CLI exited with code %s", capture.exit_code)
        return ClaudeCliResponse(
            success=False,
            raw_output=capture.stdout,
            error=stderr or f"Claude CLI exited with code {capture.exit_code}",
            duration_ms=duration_ms,
            failure_class=FailureClass.NON_ZERO_EXIT,
        )

    parsed = parse_claude_response(capture.stdout, expect_json)
    if not parsed.success:
        logger.warning("Claude CLI output is not valid JSON (%d chars)", len(capture.stdout))
        return ClaudeCliResponse(
            success=False,
            data=parsed.data,
            raw_output=capture.stdout,
            error=parsed.error,
            duration_ms=duration_ms,
            failure_class=FailureClass.PARSE_ERROR,
        )

    logger.info("Claude CLI attempt completed in %dms", duration_ms)
    return ClaudeCliResponse(
        success=True,
        data=parsed.data,
        raw_output=capture.stdout,
        duration_ms=duration_ms,
    )


async def _run_subprocess_with_timeout(
    *,
    argv: tuple[str, ...],
    payload: bytes,
    cwd: str | None,
    timeout_seconds: float,
    grace_seconds: float,
) -> ProcessCapture:
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        env=os.environ.copy(),
    )
    logger.debug("Spawned Claude CLI pid=%s cwd=%s", process.pid, cwd or os.getcwd())

    stdout_chunks: list[bytes] = []
    stderr_chunks: list[bytes] = []
    pumps = {
        asyncio.create_task(_pump(cast(asyncio.StreamReader, process.stdout), stdout_chunks)),
        asyncio.create_task(_pump(cast(asyncio.StreamReader, process.stderr), stderr_chunks)),
    }
    feeder = asyncio.create_task(_feed_stdin(cast(asyncio.StreamWriter, process.stdin), payload))

    timed_out = False
    try:
        await asyncio.wait_for(process.wait(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        timed_out = True
        await _terminate_process(process, grace_seconds=grace_seconds)
    except asyncio.CancelledError:
        logger.debug("Claude CLI attempt cancelled; stopping pid=%s", process.pid)
        await _terminate_process(process, grace_seconds=grace_seconds)
        for task in (feeder, *pumps):
            task.cancel()
        await asyncio.gather(feeder, *pumps, return_exceptions=True)
        raise
    finally:
        if not feeder.done():
            feeder.cancel()

    # Grandchildren may keep the pipes open after the direct child is gone.
    _, pending = await asyncio.wait(pumps, timeout=grace_seconds)
    for task in pending:
        task.cancel()
    await asyncio.gather(feeder, *pumps, return_exceptions=True)

    return ProcessCapture(
        exit_code=process.returncode,
        timed_out=timed_out,
        stdout=b"".join(stdout_chunks).decode("utf-8", errors="replace"),
        stderr=b"".join(stderr_chunks).decode("utf-8", errors="replace"),
    )


async def _pump(stream: asyncio.StreamReader, sink: list[bytes]) -> None:
    while True:
        chunk = await stream.read(_READ_CHUNK_BYTES)
        if not chunk:
            return
        sink.append(chunk)


async def _feed_stdin(stdin: asyncio.StreamWriter, payload: bytes) -> None:
    try:
        stdin.write(payload)
        await stdin.drain()
    except (BrokenPipeError, ConnectionResetError):
        logger.debug("Claude CLI closed stdin before the prompt was fully written")
    finally:
        stdin.close()


async def _terminate_process(process: asyncio.subprocess.Process, *, grace_seconds: float) -> None:
    try:
        process.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(process.wait(), timeout=grace_seconds)
    except asyncio.TimeoutError:
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()


def _elapsed_ms(start_monotonic: float) -> int:
    return int((time.monotonic() - start_monotonic) * 1000)
