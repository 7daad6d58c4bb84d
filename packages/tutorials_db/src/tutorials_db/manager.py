from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import (
    DatabaseOperationError,
    DoesNotExistError,
    MultipleObjectsReturnedError,
)
from .models import Model
from .queryset import QuerySet

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement

T = TypeVar("T", bound=Model)


class ModelManager(Generic[T]):
    """
    Entry point for model-level database operations.

    Responsible for creating QuerySets and handling single-record actions.
    Every write commits on success and rolls the session back on failure.
    """

    def __init__(self, model: type[T]):
        self._model = model

    def _get_queryset(self) -> QuerySet[T]:
        return QuerySet(self._model, select(self._model))

    def all(self) -> QuerySet[T]:
        """
        Return a QuerySet containing all records.
        """
        return self._get_queryset()

    def filter(self, *conditions: ColumnElement[bool], **kwargs: object) -> QuerySet[T]:
        """
        Return a filtered QuerySet based on provided conditions.
        """
        return self._get_queryset().filter(*conditions, **kwargs)

    async def get(
        self,
        db: AsyncSession,
        *conditions: ColumnElement[bool],
    ) -> T:
        """
        Retrieve a single object matching the given conditions.

        Raises:
            DoesNotExistError: If no object matches.
            MultipleObjectsReturnedError: If more than one object matches.
        """
        stmt = select(self._model).where(*conditions).limit(2)
        result = await db.execute(stmt)
        objs = cast("list[T]", result.scalars().all())

        if not objs:
            msg = f"{self._model.__name__} matching query does not exist"
            raise DoesNotExistError(msg)
        if len(objs) > 1:
            msg = f"get() returned more than one {self._model.__name__}"
            raise MultipleObjectsReturnedError(msg)

        return objs[0]

    async def get_by_pk(self, db: AsyncSession, pk: UUID) -> T:
        """
        Retrieve a single object by its primary key.

        Raises:
            DoesNotExistError: If the record with the given PK does not exist.
        """
        instance = await db.get(self._model, pk)
        if instance is None:
            msg = f"{self._model.__name__} with id={pk} was not found"
            raise DoesNotExistError(msg)
        return instance

    async def count(self, db: AsyncSession, *conditions: ColumnElement[bool]) -> int:
        return await self._get_queryset().filter(*conditions).count(db)

    async def exists(self, db: AsyncSession, *conditions: ColumnElement[bool]) -> bool:
        return await self._get_queryset().filter(*conditions).exists(db)

    async def create(self, db: AsyncSession, **fields: Any) -> T:
        """
        Create and persist a new model instance.

        Raises:
            DatabaseOperationError: If the insert fails.
        """
        try:
            instance: T = self._model(**fields)
            db.add(instance)
            await db.commit()
            await db.refresh(instance)
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while creating {self._model.__name__}"
            raise DatabaseOperationError(msg) from e
        else:
            return instance

    async def update(self, db: AsyncSession, pk: UUID, **fields: Any) -> T:
        """
        Update a single record by primary key and return the updated instance.

        Only the supplied fields change; the primary key cannot be updated.

        Raises:
            DoesNotExistError: If the record with the given PK does not exist.
            DatabaseOperationError: If a database integrity or connection error occurs.
        """
        if "id" in fields:
            msg = f"{self._model.__name__} id is immutable"
            raise ValueError(msg)

        try:
            stmt = (
                update(self._model)
                .where(self._model.id == pk)
                .values(**fields)
                .returning(self._model)
                .execution_options(populate_existing=True)
            )

            result = await db.execute(stmt)
            instance = result.scalar_one_or_none()

            if instance is not None:
                await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while updating {self._model.__name__}"
            raise DatabaseOperationError(msg) from e
        except Exception:
            await db.rollback()
            raise
        if instance is None:
            msg = f"{self._model.__name__} with id={pk} was not found"
            raise DoesNotExistError(msg)
        return cast("T", instance)

    async def delete_by_pk(
        self,
        db: AsyncSession,
        pk: UUID,
        *,
        raise_if_missing: bool = False,
    ) -> int:
        """
        Delete a single object by primary key and return the number of deleted rows.
        """
        stmt = delete(self._model).where(self._model.id == pk)

        try:
            result = await db.execute(stmt)
            await db.commit()
            count = getattr(result, "rowcount", 0)
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while deleting {self._model.__name__}"
            raise DatabaseOperationError(msg) from e
        except Exception:
            await db.rollback()
            raise

        if raise_if_missing and count == 0:
            msg = f"{self._model.__name__} with id={pk} was not found"
            raise DoesNotExistError(msg)

        return count

    async def delete_all(self, db: AsyncSession) -> int:
        """
        Delete every record of the model and return how many were removed.
        """
        try:
            result = await db.execute(delete(self._model))
            await db.commit()
            count = getattr(result, "rowcount", 0)
        except SQLAlchemyError as e:
            await db.rollback()
            msg = f"Database error while deleting all {self._model.__name__} records"
            raise DatabaseOperationError(msg) from e
        except Exception:
            await db.rollback()
            raise
        return count
