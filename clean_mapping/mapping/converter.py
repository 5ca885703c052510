# (c) Nelen & Schuurmans

import logging
from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple

from clean_mapping.base.domain import ConversionFailed
from clean_mapping.base.domain import MappingError
from clean_mapping.base.domain import NoConverterFound
from clean_mapping.base.domain import RegistryFrozen
from clean_mapping.base.domain import TypeMismatchError

from .context import ConversionContext

__all__ = ["Converter", "ConverterRegistry", "check_type"]

logger = logging.getLogger(__name__)


class Converter(ABC):
    """Converts values of 'source_type' into 'target_type'.

    Subclasses of both types are also handled, unless a more specific
    converter is registered for them.
    """

    source_type: type
    target_type: type

    def accepts_target(self, target: type) -> bool:
        return issubclass(target, self.target_type)

    @abstractmethod
    def convert(self, context: ConversionContext, registry: "ConverterRegistry") -> Any:
        raise NotImplementedError()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"({self.source_type.__qualname__} -> {self.target_type.__qualname__})"
        )


class ConverterRegistry:
    """Dispatches conversions to converters by (source type, target type).

    Registration happens up front; after freeze() the registry is read-only and
    may be shared between threads. Registering a second converter for the same
    pair replaces the first one, which is logged.
    """

    def __init__(self, converters: Iterable[Converter] = ()):
        self._converters: Dict[Tuple[type, type], Converter] = {}
        self._frozen = False
        for converter in converters:
            self.register(converter)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, converter: Converter) -> None:
        if self._frozen:
            raise RegistryFrozen()
        key = (converter.source_type, converter.target_type)
        existing = self._converters.get(key)
        if existing is not None:
            logger.warning(f"replacing converter {existing!r} by {converter!r}")
        self._converters[key] = converter

    def freeze(self) -> None:
        self._frozen = True

    def _sources(self, source: type) -> List[type]:
        # registered abstract base classes (e.g. Mapping) that 'source' is a
        # virtual subclass of come after its real bases, before object
        mro = list(source.__mro__)
        virtual = [
            x
            for x in dict.fromkeys(key[0] for key in self._converters)
            if x not in mro and issubclass(source, x)
        ]
        return mro[:-1] + virtual + mro[-1:]

    def find(self, source: type, target: type) -> Optional[Converter]:
        # most specific source first, then most specific target
        for source_cls in self._sources(source):
            for target_cls in target.__mro__:
                converter = self._converters.get((source_cls, target_cls))
                if converter is not None and converter.accepts_target(target):
                    return converter
        return None

    def convert(self, context: ConversionContext) -> Any:
        if context.value is None:
            return None
        source = type(context.value)
        converter = self.find(source, context.target.python_type)
        if converter is None:
            raise NoConverterFound(source, context.target, context.field)
        try:
            return converter.convert(context, self)
        except MappingError:
            raise
        except Exception as e:
            raise ConversionFailed(
                context.value, context.target, context.field, reason=e
            ) from e

    def __contains__(self, key: Tuple[type, type]) -> bool:
        return key in self._converters

    def __len__(self) -> int:
        return len(self._converters)


def check_type(value: Any, context: ConversionContext) -> Any:
    """Verify that a converted value can be assigned to the context's target.

    A bool is not accepted where an int is declared, although it is one.
    """
    if value is None:
        return value
    target = context.target.python_type
    if not isinstance(value, target) or (
        isinstance(value, bool) and not issubclass(target, bool)
    ):
        raise TypeMismatchError(value, context.target, context.field)
    return value
