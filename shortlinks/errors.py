"""Error taxonomy for the link registry and redirect handler.

Every error carries a short machine-stable ``reason`` and the HTTP status the
web layer should answer with. Messages are safe to show to callers; store
driver errors are never copied into them.
"""

from typing import Optional


class LinkError(Exception):
    """Base class for all link errors."""

    reason = "link_error"
    status_code = 500
    default_message = "Link operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(LinkError):
    """Malformed request data (missing field, bad URL, bad custom code)."""

    reason = "invalid_input"
    status_code = 400
    default_message = "Invalid input"


class InvalidURL(InvalidInput):
    reason = "invalid_url"
    default_message = "Invalid URL format"


class InvalidCodeFormat(InvalidInput):
    reason = "invalid_code_format"
    default_message = "Custom code must be 6-12 uppercase letters/numbers only"


class InvalidCode(LinkError):
    """Code too short to be a real code; rejected before touching the store."""

    reason = "invalid_code"
    status_code = 404
    default_message = "Invalid code"


class CodeAlreadyTaken(LinkError):
    reason = "code_taken"
    status_code = 409
    default_message = "This code is already taken"


class ExhaustedAttempts(LinkError):
    """Every generated code collided with an existing one."""

    reason = "exhausted_attempts"
    status_code = 500
    default_message = "Failed to generate unique code"


class LinkNotFound(LinkError):
    reason = "not_found"
    status_code = 404
    default_message = "Link not found"


class StoreUnavailable(LinkError):
    """The store failed or did not answer within the timeout. Safe to retry."""

    reason = "store_unavailable"
    status_code = 500
    default_message = "Link store unavailable"
