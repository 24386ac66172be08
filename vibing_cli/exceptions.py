"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class VibingCliError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(VibingCliError):
    """Raised for issues related to configuration loading or validation."""


class CatalogError(VibingCliError):
    """
    Base class for failures talking to the catalog service.

    None of these are fatal: the caller keeps its last good result set.
    """


class TransientNetworkError(CatalogError):
    """
    Raised when a request could not be completed (connectivity, timeout or a
    non-2xx status).
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class MalformedResponseError(CatalogError):
    """Raised when a response arrives but is not the expected track list shape."""
