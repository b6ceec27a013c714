"""Custom exceptions for the generator."""
from typing import Any, List, Optional


class UTGenException(Exception):
    """Base exception for the unit test generator."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class ConfigurationError(UTGenException):
    """Run cannot start or continue with the given configuration."""
    pass


class UnsupportedLanguageError(ConfigurationError):
    """No language handler exists for the requested language."""

    def __init__(self, language: str):
        super().__init__(f"unsupported language: {language}", details={"language": language})
        self.language = language


class ExternalServiceError(UTGenException):
    """External tool or service error exception."""
    pass


class AIServiceError(ExternalServiceError):
    """AI service error exception."""
    pass


class CoverageProcessingError(ExternalServiceError):
    """Coverage report could not be read or interpreted."""
    pass


class LibraryInstallError(ExternalServiceError):
    """Package manager command failed.

    ``installed`` holds the packages that were installed before the failure so
    the caller can roll them back.
    """

    def __init__(self, message: str, installed: Optional[List[str]] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.installed = list(installed or [])


class ResponseParseError(UTGenException):
    """Model response is not well-formed."""
    pass


class CursorResolutionError(UTGenException):
    """Insertion line or indentation could not be determined."""
    pass


class ImportMergeError(UTGenException):
    """New imports could not be merged into the test file."""
    pass


class GenerationCancelled(UTGenException):
    """Caller requested cancellation."""

    def __init__(self, message: str = "process cancelled by user"):
        super().__init__(message)
