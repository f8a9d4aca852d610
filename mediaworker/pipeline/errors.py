"""
Error taxonomy for the generation and OCR endpoints.

Every error carries the HTTP status it maps to and the message the client
sees. Handlers raise these; the app-level exception handler renders them
as ``{"error": message}``.
"""

from typing import Optional


class MediaWorkerError(Exception):
    status_code = 500
    default_message = "An internal server error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MethodNotAllowed(MediaWorkerError):
    status_code = 405
    default_message = "Method not allowed."


class ServerMisconfigured(MediaWorkerError):
    """Required credentials are absent. ``detail`` is for the server log only."""

    status_code = 500

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message)
        self.detail = detail


class InvalidInput(MediaWorkerError):
    status_code = 400
    default_message = "Invalid request body."


class StageFailure(MediaWorkerError):
    """A pipeline stage produced no usable artifact, raised, or timed out."""

    status_code = 500

    def __init__(self, provider_id: str, reason: str):
        super().__init__(reason)
        self.provider_id = provider_id
        self.reason = reason

    def __repr__(self) -> str:
        return f"StageFailure(provider_id={self.provider_id!r}, reason={self.reason!r})"


class ProviderError(MediaWorkerError):
    """Unexpected exception from a provider call, wrapped for the client."""

    status_code = 500
