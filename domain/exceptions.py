"""Exceptions raised by the tagging domain services."""

from typing import Optional


class TaggingError(Exception):
    """Base exception for tagging errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """Initialize tagging error.

        Args:
            message (str): Human-readable error message.
            original_error (Optional[Exception]): Original exception that caused this error.
        """
        super().__init__(message)
        self.original_error = original_error


class TaggingStoreError(TaggingError):
    """Exception raised when the tag store fails or a transaction is rolled back."""

    pass


class TaggingConfigurationError(TaggingError):
    """Exception raised when a configured normalizer or displayer fails."""

    pass


class TagNotFoundError(TaggingError):
    """Exception raised when a requested tag is not in the catalog."""

    pass
