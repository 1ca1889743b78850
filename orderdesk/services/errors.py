# orderdesk/services/errors.py


class InvalidInputError(Exception):
    """Raised when a request value is outside its accepted domain."""
    pass


class NotFoundError(Exception):
    """Raised when no order matches the given id."""
    pass


class StorageUnavailableError(Exception):
    """Raised when a query against the storage engine fails."""
    pass
