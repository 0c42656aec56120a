# campus_market/core/errors.py
"""
Error taxonomy for the marketplace API.

Every error carries the HTTP status it maps to; `main.py` installs a single
handler that renders `{"error": <message>}` with that status.
"""
from typing import Optional


class MarketError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Forbidden(MarketError):
    """Bad or missing admin credential."""
    status_code = 403
    default_message = "Forbidden"


class ValidationError(MarketError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(MarketError):
    status_code = 404
    default_message = "Not found"


class PayloadTooLarge(MarketError):
    status_code = 413
    default_message = "Payload too large"


class UploadError(MarketError):
    """The media store rejected or failed to store a blob."""
    status_code = 500
    default_message = "Upload failed"


class PersistenceError(MarketError):
    """The table store failed to write (I/O, lock timeout, missing row on update)."""
    status_code = 500
    default_message = "Persistence failed"


class InternalError(MarketError):
    status_code = 500
