"""
Request and response bodies for the tutorials API.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TutorialCreate(BaseModel):
    """
    Body of ``POST /api/tutorials``.

    New tutorials always start unpublished, so ``published`` is not accepted here.

    >>> TutorialCreate(title="Learn X", description="desc").title
    'Learn X'
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class TutorialUpdate(BaseModel):
    """
    Body of ``PUT /api/tutorials/{id}``. Every field is optional; only the
    fields present in the payload are merged into the stored record.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    published: bool | None = None

    @model_validator(mode="after")
    def _reject_empty(self) -> "TutorialUpdate":
        if not self.changes():
            raise ValueError("Data to update can not be empty!")
        return self

    def changes(self) -> dict[str, Any]:
        """
        Fields explicitly sent by the client. ``title`` and ``published`` may
        not be cleared, so a null for either is dropped.

        >>> TutorialUpdate(published=True).changes()
        {'published': True}
        """
        data = self.model_dump(exclude_unset=True)
        for field in ("title", "published"):
            if data.get(field, ...) is None:
                data.pop(field)
        return data


class TutorialRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None = None
    published: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageResponse(BaseModel):
    message: str


class DeleteAllResponse(MessageResponse):
    deleted_count: int = Field(..., ge=0)


class HealthResponse(BaseModel):
    status: str
