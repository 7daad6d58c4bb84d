"""
Persistent document for the tutorials collection.
"""

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from tutorials_db.models import Model, TimestampMixin


class Tutorial(Model, TimestampMixin):
    """A titled note with a published flag."""

    __tablename__ = "tutorials"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published: Mapped[bool] = mapped_column(default=False, index=True)

    def __repr__(self) -> str:
        return f"<Tutorial id={self.id} title={self.title!r}>"
