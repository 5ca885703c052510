# (c) Nelen & Schuurmans

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from typing import Callable
from typing import List
from typing import Optional
from typing import TYPE_CHECKING
from uuid import UUID

from clean_mapping.base.domain import Entity
from clean_mapping.base.domain import TypeMismatchError

from .context import ConversionContext
from .converter import check_type
from .converter import Converter
from .converter import ConverterRegistry
from .type_spec import Simple

if TYPE_CHECKING:
    from .object_mapper import ObjectMapper

__all__ = [
    "PassThrough",
    "Cast",
    "SequenceReader",
    "SequenceWriter",
    "DictConverter",
    "EntityReader",
    "EntityWriter",
    "default_readers",
    "default_writers",
]

# types that a document store holds as they are
PRIMITIVES = (str, int, float, bool, bytes, datetime)
SEQUENCES = (list, set, frozenset, tuple)


class PassThrough(Converter):
    def __init__(self, cls: type):
        self.source_type = cls
        self.target_type = cls

    def accepts_target(self, target: type) -> bool:
        # a str is not an instance of a str-based Enum
        return target is self.target_type

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        return context.value


class Cast(Converter):
    """Converts by calling 'func', or else the target class, on the value."""

    def __init__(
        self,
        source_type: type,
        target_type: type,
        func: Optional[Callable[[Any], Any]] = None,
    ):
        self.source_type = source_type
        self.target_type = target_type
        self.func = func

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        if self.func is not None:
            return self.func(context.value)
        return context.target.python_type(context.value)


class SequenceReader(Converter):
    """Converts a document array into a list, set, frozenset or tuple.

    Every item is converted with the item type of the target; None items are
    kept.
    """

    def __init__(self, source_type: type, target_type: type):
        self.source_type = source_type
        self.target_type = target_type

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        (item_spec,) = context.args
        items = []
        for i, item in enumerate(context.value):
            child = context.child(item, item_spec, i)
            items.append(check_type(registry.convert(child), child))
        return context.target.python_type(items)


class SequenceWriter(Converter):
    """Converts a list, set, frozenset or tuple into a document array."""

    def __init__(self, source_type: type, target_type: type):
        self.source_type = source_type
        self.target_type = target_type

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        (item_spec,) = context.args
        return [
            registry.convert(context.child(item, item_spec, i))
            for (i, item) in enumerate(context.value)
        ]


class DictConverter(Converter):
    """Converts a mapping value by value; keys are strings both ways."""

    source_type = Mapping
    target_type = dict

    def __init__(self, check: bool = True):
        self.check = check

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        _, value_spec = context.args
        result = {}
        for key, value in context.value.items():
            if not isinstance(key, str):
                raise TypeMismatchError(key, Simple(cls=str), context.field)
            child = context.child(value, value_spec, key)
            converted = registry.convert(child)
            result[key] = check_type(converted, child) if self.check else converted
        return result


class EntityReader(Converter):
    source_type = Mapping
    target_type = Entity

    def __init__(self, mapper: "ObjectMapper"):
        self.mapper = mapper

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        return self.mapper.document_to_entity(
            context.value, context.target.python_type, field=context.field
        )


class EntityWriter(Converter):
    source_type = Entity
    target_type = Entity

    def __init__(self, mapper: "ObjectMapper"):
        self.mapper = mapper

    def convert(self, context: ConversionContext, registry: ConverterRegistry) -> Any:
        return self.mapper.entity_to_document(context.value, field=context.field)


def _to_decimal(value: Any) -> Decimal:
    # via str, so that 0.1 does not become 0.1000000000000000055511151231257827
    return Decimal(str(value))


def default_readers(mapper: "ObjectMapper") -> List[Converter]:
    """Converters from document values to application values."""
    converters: List[Converter] = [PassThrough(x) for x in PRIMITIVES + (UUID,)]
    converters += [
        Cast(int, float),
        Cast(str, Enum),
        Cast(int, Enum),
        Cast(str, UUID),
        Cast(str, Decimal, func=_to_decimal),
        Cast(int, Decimal, func=_to_decimal),
        Cast(float, Decimal, func=_to_decimal),
    ]
    converters += [
        SequenceReader(source, target)
        for source in (list, tuple)
        for target in SEQUENCES
    ]
    converters += [DictConverter(), EntityReader(mapper)]
    return converters


def default_writers(mapper: "ObjectMapper") -> List[Converter]:
    """Converters from application values to document values."""
    converters: List[Converter] = [PassThrough(x) for x in PRIMITIVES]
    converters += [
        Cast(int, float),
        Cast(Enum, Enum, func=lambda x: x.value),
        Cast(UUID, UUID, func=str),
        Cast(Decimal, Decimal, func=str),
    ]
    converters += [
        SequenceWriter(source, target) for source in SEQUENCES for target in SEQUENCES
    ]
    converters += [DictConverter(check=False), EntityWriter(mapper)]
    return converters
