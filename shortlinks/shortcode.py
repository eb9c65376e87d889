"""Short code generation utilities."""

import secrets
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for links."""

    # Uppercase letters and digits without the look-alikes 0/O and 1/I
    ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

    DEFAULT_LENGTH = 7

    def __init__(self, length: int = DEFAULT_LENGTH, alphabet: Optional[str] = None):
        """Initialize short code generator.

        Args:
            length: Length of generated codes
            alphabet: Optional alphabet override (mostly for tests)
        """
        if length < 1:
            raise ValueError("Code length must be positive")
        self.length = length
        self.alphabet = alphabet or self.ALPHABET

    def generate(self) -> str:
        """Generate a random short code.

        Characters are drawn uniformly from the alphabet. The code is not
        guaranteed to be unused; the registry checks that against the store.

        Returns:
            Random short code
        """
        return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))

    def is_valid_format(self, code: str) -> bool:
        """Check if code has this generator's length and alphabet.

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        return len(code) == self.length and all(c in self.alphabet for c in code)
