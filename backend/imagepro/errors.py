"""Error taxonomy. Every error carries the message shown to the user and the HTTP status it maps to."""
import json
from typing import Optional


class ImageProError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ImageProError):
    """Bad, missing or oversized input. Raised before any external call."""

    status_code = 400
    default_message = "Invalid request"


class ConfigurationError(ImageProError):
    """A required server-side credential is missing."""

    status_code = 500
    default_message = "Server is missing required configuration"


class TransportError(ImageProError):
    """Network or runtime failure while calling an external API."""

    status_code = 500


class DecodeError(ImageProError):
    status_code = 400
    default_message = "Failed to read image"


class SurfaceError(ImageProError):
    status_code = 500
    default_message = "Unable to create drawing surface"


class ExternalServiceError(ImageProError):
    """Non-success response from an external API. Status and body are kept for relaying."""

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        fallback: str = "External service call failed",
    ):
        self.body = body
        self.fallback = fallback
        super().__init__(describe_error_body(body, fallback), status_code)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


def describe_error_body(body: bytes, fallback: str) -> str:
    """Human-readable message for a failed external call.

    Prefers a JSON ``error`` string, then ``error.message``, then a remove.bg
    error title, then the raw text.
    """
    text = body.decode("utf-8", errors="replace").strip() if body else ""
    if not text:
        return fallback
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error:
            return error
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        # remove.bg: {"errors": [{"title": "..."}]}
        errors = payload.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("title"):
            return str(errors[0]["title"])
    return text
