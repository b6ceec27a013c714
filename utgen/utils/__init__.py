"""Utilities module."""

from .exceptions import (
    UTGenException,
    ConfigurationError,
    UnsupportedLanguageError,
    ExternalServiceError,
    AIServiceError,
    CoverageProcessingError,
    LibraryInstallError,
    ResponseParseError,
    CursorResolutionError,
    ImportMergeError,
    GenerationCancelled,
)

__all__ = [
    'UTGenException',
    'ConfigurationError',
    'UnsupportedLanguageError',
    'ExternalServiceError',
    'AIServiceError',
    'CoverageProcessingError',
    'LibraryInstallError',
    'ResponseParseError',
    'CursorResolutionError',
    'ImportMergeError',
    'GenerationCancelled',
]
