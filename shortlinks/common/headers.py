"""Header parsing utilities for building public short URLs."""

from typing import Dict, Optional


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers dictionary

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_prefix
    """
    # Convert headers to lowercase for case-insensitive lookup
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_prefix": headers_lower.get("x-forwarded-prefix"),
    }


def build_base_url(headers: Dict[str, str], fallback_base_url: str) -> str:
    """Build the public base URL.

    X-Forwarded-Proto + X-Forwarded-Host win when a proxy sets both;
    otherwise the configured base URL is used.

    Args:
        headers: Request headers
        fallback_base_url: Base URL from configuration

    Returns:
        Base URL without trailing slash (e.g., https://sho.rt)
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"

    return fallback_base_url.rstrip("/")


def resolve_path_prefix(headers: Dict[str, str], configured_prefix: str = "") -> str:
    """Path prefix from X-Forwarded-Prefix, else from configuration.

    Returns normalized prefix with leading slash, no trailing (e.g. '/s'), or ''.
    """
    prefix = extract_forwarded_headers(headers)["forwarded_prefix"] or configured_prefix or ""
    p = prefix.strip().strip("/")
    return "/" + p if p else ""
