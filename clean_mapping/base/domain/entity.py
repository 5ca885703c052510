# (c) Nelen & Schuurmans

from pydantic import BaseModel
from pydantic import ConfigDict

__all__ = ["Entity", "IdentifiableEntity"]


class Entity(BaseModel):
    """A typed object that can be mapped from and to a document.

    Each declared field is a persisted property; the field alias, if given,
    is the key in the document. Subclasses must be constructible without
    arguments, so every field needs a default.

    Entities are populated attribute by attribute by the ObjectMapper, which
    does its own type checks; pydantic validation only runs on construction.
    """

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, extra="ignore"
    )


class IdentifiableEntity(Entity):
    """An entity that has a primary key in the document store.

    The id is always an opaque string, whatever the stored representation is.
    """

    id: str | None = None
