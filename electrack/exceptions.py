"""
Domain exceptions for the Electrack service.
Provides clear, typed exceptions for business logic errors.
"""


class PriceAPIException(Exception):
    """Base exception for all Electrack errors."""
    pass


class FetchError(PriceAPIException):
    """Raised when the external price provider is unreachable or returns unusable data."""
    pass


class PersistError(PriceAPIException):
    """Raised when price points could not be written to the store."""
    pass


class DuplicateError(PersistError):
    """Raised when a batch contains a (provider, moment) pair that is already stored."""
    pass


class NotFoundError(PriceAPIException):
    """Raised when no price window exists for the requested range."""
    pass


class UnknownProviderError(PriceAPIException):
    """Raised when a provider name does not resolve to a stored provider."""
    pass


class ConfigurationError(PriceAPIException):
    """Raised when the service configuration cannot be used."""
    pass
