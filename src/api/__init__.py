"""JSON request handlers."""

from .handlers import ApiHandlers, ApiResponse

__all__ = ["ApiHandlers", "ApiResponse"]
