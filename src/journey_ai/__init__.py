"""AI request/response core for the journey desktop shell."""

__version__ = "0.1.0"
