from .db import close_db, create_all, get_db, init_db, ping
from .exceptions import (
    DatabaseOperationError,
    DoesNotExistError,
    MultipleObjectsReturnedError,
    TutorialsDBError,
)
from .models import Model, TimestampMixin

__all__ = [
    "DatabaseOperationError",
    "DoesNotExistError",
    "Model",
    "MultipleObjectsReturnedError",
    "TimestampMixin",
    "TutorialsDBError",
    "close_db",
    "create_all",
    "get_db",
    "init_db",
    "ping",
]
