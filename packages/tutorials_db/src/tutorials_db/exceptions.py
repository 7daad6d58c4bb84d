class TutorialsDBError(Exception):
    """Base class for all data layer exceptions."""


class DoesNotExistError(TutorialsDBError, ValueError):
    """Raised when a single object was expected but none was found."""


class MultipleObjectsReturnedError(TutorialsDBError, ValueError):
    """Raised when a single object was expected but multiple were found."""


class DatabaseOperationError(TutorialsDBError, RuntimeError):
    """Raised when the store rejects or fails a write."""
