from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Sequence, Type, TypeVar

from sqlalchemy import func, select

from .lookups import apply_lookup, parse_lookup
from .models import Model

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql import ColumnElement, Select


T = TypeVar("T", bound=Model)


class QuerySet(Generic[T]):
    """
    Represents a lazy database query for a specific model type.

    A QuerySet stores a SQLAlchemy `Select` statement and allows query
    conditions to be composed without executing the query immediately.
    Queries are executed only when calling an execution method like `fetch()`,
    `first()`, or `count()`.

    Examples:
        >>> qs = Tutorial.objects.filter(title__icontains="python")

        >>> qs = Tutorial.objects.filter(published=True).order_by(
        ...     Tutorial.created_at.desc())
    """

    def __init__(self, model: Type[T], stmt: Select):
        self.model: Type[T] = model
        self._stmt: Select = stmt

    def _clone(self, stmt: Select) -> QuerySet[T]:
        # Each modification returns a new instance to ensure immutability.
        return QuerySet(self.model, stmt)

    # --- Chainable methods ---

    def filter(
        self, *conditions: ColumnElement[bool], **kwargs: object
    ) -> QuerySet[T]:
        """
        Add WHERE criteria to the query.

        Keyword lookups take the form ``field`` or ``field__lookup``.
        A value of ``None`` on an exact lookup matches NULL.

        Example:
            >>> Tutorial.objects.filter(title__icontains="js", published=True)
            # SELECT * FROM tutorials
            # WHERE lower(title) LIKE '%' || 'js' || '%' AND published = 1;
        """
        if not conditions and not kwargs:
            return self

        stmt = self._stmt
        for cond in conditions:
            stmt = stmt.where(cond)

        for key, value in kwargs.items():
            col, lookup = parse_lookup(self.model, key)
            stmt = stmt.where(apply_lookup(col, lookup, value))

        return self._clone(stmt)

    def order_by(self, *criterion: Any) -> QuerySet[T]:
        """
        Add ORDER BY criteria to the query.

        Example:
            >>> Tutorial.objects.order_by(Tutorial.created_at)
            # SELECT * FROM tutorials ORDER BY created_at ASC;
        """
        return self._clone(self._stmt.order_by(*criterion))

    def limit(self, count: int) -> QuerySet[T]:
        """
        Limit the number of records returned.

        Example:
            >>> await Tutorial.objects.limit(10).fetch(db)
            # SELECT * FROM tutorials LIMIT 10;
        """
        return self._clone(self._stmt.limit(count))

    # --- Execution ---

    async def fetch(self, db: AsyncSession) -> Sequence[T]:
        """
        Execute query and return results as model instances.

        Example:
            >>> tutorials = await Tutorial.objects.all().fetch(db)
            # SELECT * FROM tutorials;
        """
        result = await db.execute(self._stmt)
        return result.scalars().all()

    async def first(self, db: AsyncSession) -> T | None:
        """
        Execute query and return the first result or None.

        Example:
            >>> tutorial = await Tutorial.objects.all().first(db)
            # SELECT * FROM tutorials LIMIT 1;
        """
        result = await db.execute(self._stmt.limit(1))
        return result.scalars().one_or_none()

    async def count(self, db: AsyncSession) -> int:
        """
        Return total record count for the QuerySet.

        Example:
            >>> count = await Tutorial.objects.all().count(db)
            # SELECT count(*) FROM (SELECT * FROM tutorials) AS subquery;
        """
        count_stmt = select(func.count()).select_from(self._stmt.subquery())
        return await db.scalar(count_stmt) or 0

    async def exists(self, db: AsyncSession) -> bool:
        """
        Check if any records exist matching the query.
        """
        return await self.count(db) > 0
