from __future__ import annotations

import uuid
from datetime import datetime  # noqa: TC003
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .exceptions import DoesNotExistError, MultipleObjectsReturnedError

if TYPE_CHECKING:
    from .manager import ModelManager

try:
    from typing import Self
except ImportError:  # pragma: no cover
    from typing_extensions import Self


class Model(AsyncAttrs, DeclarativeBase):
    """
    Base class for all stored documents.
    Provides an automatic `objects` manager and an opaque, store-assigned
    UUID primary key.

    Example:
        >>> class Note(Model):
        ...     __tablename__ = "notes"
        ...     text: Mapped[str] = mapped_column()
    """

    __abstract__ = True
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    objects: ClassVar[ModelManager[Self]]  # type: ignore[invalid-type-arguments]

    # Model-specific exception aliases
    DoesNotExist = DoesNotExistError
    MultipleObjectsReturned = MultipleObjectsReturnedError

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        from .manager import ModelManager

        if not cls.__dict__.get("__abstract__"):
            cls.objects = ModelManager(cls)


class TimestampMixin:
    """
    Mixin that adds `created_at` and `updated_at` fields to a model.

    Example:
        >>> class Post(Model, TimestampMixin):
        ...     __tablename__ = "posts"
        ...     title: Mapped[str] = mapped_column()
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )
