"""Exception classes for key pattern tables."""


class PatternError(Exception):
    """Base exception for key pattern errors."""

    pass


class InvalidPatternError(PatternError, ValueError):
    """Raised when a pattern argument is missing or not a string."""

    def __init__(self, pattern: object, message: str = "Pattern must be a string"):
        """Initialize with the offending pattern."""
        self.pattern = pattern
        super().__init__(f"{message}: {pattern!r}")


class PatternConfigurationError(PatternError):
    """Raised when a chain of pattern tables cannot terminate."""

    def __init__(self, chain: list[str], reason: str):
        """Initialize with the visited table names and the reason."""
        self.chain = list(chain)
        super().__init__(f"Key pattern chain {' -> '.join(chain)}: {reason}")
