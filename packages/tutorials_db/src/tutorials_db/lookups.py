from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy import func

if TYPE_CHECKING:
    from sqlalchemy.sql import ColumnElement

    from .models import Model


OPERATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "exact": lambda c, v: c.is_(None) if v is None else c == v,
    "icontains": lambda c, v: func.lower(c).contains(v.lower(), autoescape=True),
    "in": lambda c, v: c.in_(v),
    "isnull": lambda c, v: c.is_(None) if v else c.isnot(None),
}


def parse_lookup(model: type[Model], key: str) -> tuple[ColumnElement[Any], str]:
    """
    Parse a lookup key into (column, operator).

    Supported format: 'field' or 'field__lookup' (e.g. 'title__icontains').

    Raises:
        ValueError: For nested lookups or unknown fields.
    """
    parts = key.split("__")
    if len(parts) > 2:
        msg = f"Unsupported lookup '{key}'. Nested lookups are not supported."
        raise ValueError(msg)

    field_name = parts[0]
    lookup = parts[1] if len(parts) > 1 else "exact"

    if field_name not in model.__table__.columns:
        msg = f"{model.__name__} has no field '{field_name}'"
        raise ValueError(msg)

    return getattr(model, field_name), lookup


def apply_lookup(col: Any, lookup: str, value: Any) -> ColumnElement[bool]:
    """Apply a lookup operator to a SQLAlchemy column."""
    if lookup not in OPERATORS:
        supported = ", ".join(OPERATORS.keys())
        msg = f"Unsupported lookup '{lookup}'. Supported: {supported}"
        raise ValueError(msg)

    return OPERATORS[lookup](col, value)
