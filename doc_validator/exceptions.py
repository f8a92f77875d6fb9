"""
Custom exception hierarchy for document validation.

Each exception type maps to a specific category of failure around the
resolver: loading the registry, reading the catalog manifest, or parsing a
version string in strict mode. Lookup outcomes (no id, not found, outdated)
are NOT exceptions; they are resolution states.
"""

from __future__ import annotations


class DocumentValidationError(Exception):
    """Base exception for all document validation failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class RegistryLoadError(DocumentValidationError):
    """The registry (or manifest) could not be fetched."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("REGISTRY_LOAD_FAILED", message, details)


class SourceNotFoundError(RegistryLoadError):
    """The source does not exist (missing file or HTTP 404)."""

    def __init__(self, message: str, details: dict | None = None):
        DocumentValidationError.__init__(self, "SOURCE_NOT_FOUND", message, details)


class RegistryFormatError(DocumentValidationError):
    """The source was fetched but its content has the wrong shape."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("REGISTRY_FORMAT_INVALID", message, details)


class MalformedVersionError(DocumentValidationError):
    """A version string has a segment that is not a non-negative integer."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("VERSION_MALFORMED", message, details)


class NoValidationTypesError(DocumentValidationError):
    """Neither the manifest nor discovery produced any validation type."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("NO_VALIDATION_TYPES", message, details)


class SourceUnreachableError(RegistryLoadError):
    """The remote source could not be reached at all (network failure)."""

    def __init__(self, message: str, details: dict | None = None):
        DocumentValidationError.__init__(self, "SOURCE_UNREACHABLE", message, details)


class ConfigurationError(DocumentValidationError):
    """An environment setting has a value that cannot be used."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("CONFIG_INVALID", message, details)
