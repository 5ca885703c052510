# (c) Nelen & Schuurmans

import logging
import threading
from typing import Any
from typing import Dict
from typing import Optional

from clean_mapping.base.domain import Entity
from clean_mapping.base.domain import EntityInstantiationError
from clean_mapping.base.domain import IdentifiableEntity
from clean_mapping.base.domain import UnsupportedType
from clean_mapping.base.domain import ValueObject

from .type_spec import resolve
from .type_spec import TypeSpec

__all__ = ["Property", "EntityDescriptor", "describe", "clear_descriptor_cache"]

logger = logging.getLogger(__name__)


class Property(ValueObject):
    name: str  # the key in the document
    attribute: str
    annotation: Any
    spec: TypeSpec

    def get(self, entity: Entity) -> Any:
        return getattr(entity, self.attribute)

    def set(self, entity: Entity, value: Any) -> None:
        setattr(entity, self.attribute, value)


class EntityDescriptor(ValueObject):
    entity: type
    properties: Dict[str, Property]
    identity: Optional[Property] = None

    def get_property_by_name(self, name: str) -> Optional[Property]:
        return self.properties.get(name)

    def instantiate(self) -> Entity:
        try:
            return self.entity()
        except Exception as e:
            raise EntityInstantiationError(self.entity, e)


def _build(cls: type) -> EntityDescriptor:
    if not cls.__pydantic_complete__:
        cls.model_rebuild()
    properties: Dict[str, Property] = {}
    identity = None
    for attribute, field in cls.model_fields.items():
        if field.exclude:
            continue
        prop = Property(
            name=field.alias or attribute,
            attribute=attribute,
            annotation=field.annotation,
            spec=resolve(field.annotation),
        )
        if attribute == "id" and issubclass(cls, IdentifiableEntity):
            identity = prop
            continue
        if prop.name in properties:
            raise UnsupportedType(cls, f"duplicate property name '{prop.name}'")
        properties[prop.name] = prop
    return EntityDescriptor(entity=cls, properties=properties, identity=identity)


_cache: Dict[type, EntityDescriptor] = {}
_lock = threading.Lock()


def describe(cls: Any) -> EntityDescriptor:
    """Return the (cached) descriptor of an Entity subclass.

    Descriptors are built outside of the lock and inserted under it; when two
    threads build the same descriptor the first one inserted is kept.
    """
    try:
        return _cache[cls]
    except (KeyError, TypeError):
        pass
    if not isinstance(cls, type) or not issubclass(cls, Entity):
        raise UnsupportedType(cls)
    descriptor = _build(cls)
    with _lock:
        descriptor = _cache.setdefault(cls, descriptor)
    logger.debug(f"described {cls.__qualname__}: {list(descriptor.properties)}")
    return descriptor


def clear_descriptor_cache() -> None:
    with _lock:
        _cache.clear()
