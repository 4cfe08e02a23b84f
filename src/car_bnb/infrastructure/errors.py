"""Error types raised by the Car BnB services.

Every failure the services surface to a caller derives from CarBnbError so the
CLI can catch one type, print the message and return to the prompt. None of
these are retried.
"""
from typing import Optional


class CarBnbError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(CarBnbError):
    """Missing or malformed required input."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=f"Invalid {field}: {message}",
            code="VALIDATION_ERROR",
        )
        self.field = field


class NotFoundError(CarBnbError):
    """A referenced record does not exist."""

    def __init__(self, collection: str, record_id):
        super().__init__(
            message=f"No {collection} record with id {record_id}.",
            code="NOT_FOUND",
        )
        self.collection = collection
        self.record_id = record_id


class GeocodeError(CarBnbError):
    """An address could not be resolved to coordinates."""

    def __init__(self, address: str, reason: str = 'no match'):
        super().__init__(
            message=f"Unable to locate '{address}' ({reason}). Try different input.",
            code="GEOCODE_FAILED",
        )
        self.address = address


class AuthError(CarBnbError):
    """Credentials were rejected by the identity provider."""

    def __init__(self, message: str = 'Authentication failed.'):
        super().__init__(message=message, code="AUTH_FAILED")


class ConfigError(CarBnbError):
    """One or more settings have invalid values."""

    def __init__(self, problems: str):
        super().__init__(
            message=f"Invalid configuration: {problems}",
            code="CONFIG_ERROR",
        )


class StoreError(CarBnbError):
    """The document store failed while serving a repository call."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Store failure during {operation}: {reason}",
            code="STORE_ERROR",
        )
        self.operation = operation
