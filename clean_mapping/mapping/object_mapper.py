# (c) Nelen & Schuurmans

import logging
from typing import Any
from typing import Iterable
from typing import List
from typing import Mapping
from typing import Optional
from typing import Type
from typing import TypeVar

from clean_mapping.base.domain import Document
from clean_mapping.base.domain import Entity
from clean_mapping.base.domain import ValueObject

from .context import ConversionContext
from .converter import check_type
from .converter import Converter
from .converter import ConverterRegistry
from .converters import default_readers
from .converters import default_writers
from .descriptor import describe
from .descriptor import EntityDescriptor

__all__ = ["MapperConfig", "ObjectMapper"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Entity)


class MapperConfig(ValueObject):
    identity_key: str = "_id"
    exclude_none: bool = True
    warn_unknown_fields: bool = True


class ObjectMapper:
    """Maps documents to entities and back.

    Conversion of property values is delegated to two converter registries:
    'readers' (document to entity) and 'writers' (entity to document). Extra
    converters passed here are registered after the defaults and replace them
    for the same (source type, target type) pair. Both registries are frozen
    before the mapper is used, so one mapper can serve many threads.

    The identity field is handled by the mapper itself: it is always a string
    on the entity, whatever the document holds.

    Document fields that do not match a property are logged and skipped. This
    keeps documents written by older or newer versions of an entity readable.
    """

    def __init__(
        self,
        config: Optional[MapperConfig] = None,
        readers: Iterable[Converter] = (),
        writers: Iterable[Converter] = (),
    ):
        self.config = config or MapperConfig()
        self.readers = ConverterRegistry(default_readers(self))
        for converter in readers:
            self.readers.register(converter)
        self.readers.freeze()
        self.writers = ConverterRegistry(default_writers(self))
        for converter in writers:
            self.writers.register(converter)
        self.writers.freeze()

    def document_to_entity(
        self,
        document: Optional[Mapping[str, Any]],
        cls: Type[T],
        field: Optional[str] = None,
    ) -> Optional[T]:
        if document is None:
            return None
        descriptor = describe(cls)
        entity = descriptor.instantiate()
        prefix = field or cls.__qualname__
        for key, value in document.items():
            if key == self.config.identity_key:
                self._set_identity(descriptor, entity, value)
                continue
            prop = descriptor.get_property_by_name(key)
            if prop is None:
                self._skip_unknown(key, cls)
            elif value is None:
                prop.set(entity, None)
            else:
                context = ConversionContext(
                    value=value, target=prop.spec, field=f"{prefix}.{key}"
                )
                prop.set(entity, check_type(self.readers.convert(context), context))
        return entity  # type: ignore

    def documents_to_entities(
        self, documents: Iterable[Mapping[str, Any]], cls: Type[T]
    ) -> List[T]:
        return [self.document_to_entity(x, cls) for x in documents]  # type: ignore

    def entity_to_document(
        self, entity: Optional[Entity], field: Optional[str] = None
    ) -> Optional[Document]:
        if entity is None:
            return None
        cls = type(entity)
        descriptor = describe(cls)
        prefix = field or cls.__qualname__
        document: Document = {}
        if descriptor.identity is not None:
            id_ = descriptor.identity.get(entity)
            if id_ is not None:
                document[self.config.identity_key] = str(id_)
        for prop in descriptor.properties.values():
            value = prop.get(entity)
            if value is None:
                if not self.config.exclude_none:
                    document[prop.name] = None
                continue
            context = ConversionContext(
                value=value, target=prop.spec, field=f"{prefix}.{prop.name}"
            )
            document[prop.name] = self.writers.convert(context)
        return document

    def _set_identity(
        self, descriptor: EntityDescriptor, entity: Entity, value: Any
    ) -> None:
        if descriptor.identity is None:
            logger.debug(
                f"ignoring '{self.config.identity_key}' for "
                f"{descriptor.entity.__qualname__}, which has no identity"
            )
            return
        descriptor.identity.set(entity, None if value is None else str(value))

    def _skip_unknown(self, key: str, cls: type) -> None:
        msg = f"property with key '{key}' not known for type {cls.__qualname__}"
        if self.config.warn_unknown_fields:
            logger.warning(msg)
        else:
            logger.debug(msg)
