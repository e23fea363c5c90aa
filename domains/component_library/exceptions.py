from typing import Optional


class LibraryLoaderError(Exception):
    """Base exception for all library loader errors."""


class ConfigurationError(LibraryLoaderError):
    """Raised when configuration values cannot be expanded or parsed."""


class SubscriptionError(LibraryLoaderError):
    """Raised when the filesystem watch cannot be registered."""


class DescriptorParseError(LibraryLoaderError):
    """Raised when a dropped file does not hold a usable descriptor."""


class FetchError(LibraryLoaderError):
    """Raised when the component package cannot be downloaded."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ArchiveError(LibraryLoaderError):
    """Raised when a downloaded package is not a readable zip archive."""


class ExtractionError(LibraryLoaderError):
    """Raised when an extractor cannot place an archive entry."""


class SaveError(LibraryLoaderError):
    """Raised when a file set cannot be written to disk."""


class HookError(LibraryLoaderError):
    """Raised when the refresh script cannot be run."""


class InternalError(LibraryLoaderError):
    """Raised when an internal invariant is violated."""
