"""Core business logic for shortlinks."""

__version__ = "1.0.0"

from .shortcode import ShortCodeGenerator
from .registry import LinkRegistry
from .redirect import RedirectHandler

__all__ = ["ShortCodeGenerator", "LinkRegistry", "RedirectHandler"]
