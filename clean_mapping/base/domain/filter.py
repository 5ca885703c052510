# (c) Nelen & Schuurmans

from typing import Any

from .types import Id
from .value_object import ValueObject

__all__ = ["Filter"]


class Filter(ValueObject):
    """Selects documents of which the value at 'field' is one of 'values'."""

    field: str
    values: list[Any]

    @classmethod
    def for_id(cls, id: Id, identity_key: str = "_id") -> "Filter":
        return cls(field=identity_key, values=[id])
