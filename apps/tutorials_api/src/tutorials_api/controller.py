"""
Tutorial operations, one method per endpoint.

Each request gets its own controller bound to the request's database session.
"""

import uuid
from typing import Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tutorials_core.logging import get_logger
from tutorials_db import DoesNotExistError, get_db

from .models import Tutorial
from .schemas import TutorialCreate, TutorialUpdate

logger = get_logger(__name__)


def parse_tutorial_id(raw: str) -> uuid.UUID:
    """
    Ids are opaque to clients; anything that is not a valid id simply does
    not exist.

    Raises:
        DoesNotExistError: If ``raw`` is not a well-formed id.
    """
    try:
        return uuid.UUID(raw)
    except ValueError as e:
        msg = f"Tutorial with id={raw} was not found"
        raise DoesNotExistError(msg) from e


class TutorialController:
    model = Tutorial

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, payload: TutorialCreate) -> Tutorial:
        tutorial = await self.model.objects.create(
            self.db,
            title=payload.title,
            description=payload.description,
            published=False,
        )
        logger.info("Created tutorial %s", tutorial.id)
        return tutorial

    async def read(self, tutorial_id: str) -> Tutorial:
        return await self.model.objects.get_by_pk(
            self.db, parse_tutorial_id(tutorial_id)
        )

    async def list(
        self, title: str | None = None, published: bool | None = None
    ) -> Sequence[Tutorial]:
        """
        All tutorials, optionally narrowed to titles containing ``title``
        (case-insensitive) and/or a given ``published`` state.
        """
        lookups: dict[str, object] = {}
        if title:
            lookups["title__icontains"] = title
        if published is not None:
            lookups["published"] = published

        queryset = self.model.objects.filter(**lookups).order_by(
            self.model.created_at, self.model.id
        )
        return await queryset.fetch(self.db)

    async def list_published(self) -> Sequence[Tutorial]:
        return await self.list(published=True)

    async def update(self, tutorial_id: str, payload: TutorialUpdate) -> Tutorial:
        pk = parse_tutorial_id(tutorial_id)
        changes = payload.changes()
        tutorial = await self.model.objects.update(self.db, pk, **changes)
        logger.info("Updated tutorial %s (%s)", pk, ", ".join(sorted(changes)))
        return tutorial

    async def delete(self, tutorial_id: str) -> None:
        pk = parse_tutorial_id(tutorial_id)
        await self.model.objects.delete_by_pk(self.db, pk, raise_if_missing=True)
        logger.info("Deleted tutorial %s", pk)

    async def delete_all(self) -> int:
        count = await self.model.objects.delete_all(self.db)
        logger.info("Deleted all tutorials (%d removed)", count)
        return count


def get_controller(db: AsyncSession = Depends(get_db)) -> TutorialController:
    return TutorialController(db)
