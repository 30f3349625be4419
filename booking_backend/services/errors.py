class DataServiceError(Exception):
    """Base class for failures reported by the data service.

    ``message`` is always safe to show to an end user.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(DataServiceError):
    """The data service cannot be reached or is misconfigured."""


class AuthError(DataServiceError):
    """Credentials or an access token were rejected."""


class StorageError(DataServiceError):
    """A read or write was rejected by storage."""
