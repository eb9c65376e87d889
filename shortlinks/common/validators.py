"""Validation utilities for links."""

import re
from urllib.parse import urlparse
from typing import Optional, Tuple


CUSTOM_CODE_PATTERN = re.compile(r"^[A-Z0-9]{6,12}$")

# Codes that would shadow HTTP routes served next to GET /{code}
RESERVED_CODES = frozenset({"HEALTHZ"})

MIN_LOOKUP_CODE_LENGTH = 3

MAX_URL_LENGTH = 2048


def normalize_code(code: Optional[str]) -> str:
    """Trim and uppercase a code. Codes are stored uppercase."""
    return (code or "").strip().upper()


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a target URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str) or not url.strip():
        return False, "Valid URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url.strip())
        # Accessing port validates it
        result.port
    except ValueError:
        return False, "Invalid URL format"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.hostname:
        return False, "URL must have a valid host"

    return True, ""


def is_valid_custom_code(code: str) -> Tuple[bool, str]:
    """Validate an already-normalized custom code.

    Args:
        code: Uppercased code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not CUSTOM_CODE_PATTERN.match(code):
        return False, "Custom code must be 6-12 uppercase letters/numbers only"

    if code in RESERVED_CODES:
        return False, f"'{code}' is reserved and cannot be used"

    return True, ""


def is_lookup_code_shape(code: str) -> bool:
    """Cheap shape check done before any lookup or redirect."""
    return len(code) >= MIN_LOOKUP_CODE_LENGTH
