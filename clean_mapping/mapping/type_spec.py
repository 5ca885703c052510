# (c) Nelen & Schuurmans

import collections.abc
import types
from typing import Annotated
from typing import Any
from typing import get_args
from typing import get_origin
from typing import Tuple
from typing import TypeVar
from typing import Union

from clean_mapping.base.domain import Entity
from clean_mapping.base.domain import UnresolvableType
from clean_mapping.base.domain import ValueObject

__all__ = ["TypeSpec", "Simple", "Parameterized", "Nested", "resolve"]


class TypeSpec(ValueObject):
    """What a declared annotation means to the mapper.

    Exactly one of Simple, Parameterized or Nested.
    """

    @property
    def python_type(self) -> type:
        """The class a converted value must be an instance of."""
        raise NotImplementedError()


class Simple(TypeSpec):
    cls: type

    @property
    def python_type(self) -> type:
        return self.cls

    def __str__(self) -> str:
        return self.cls.__qualname__


class Parameterized(TypeSpec):
    raw: type
    args: Tuple[TypeSpec, ...]

    @property
    def python_type(self) -> type:
        return self.raw

    def __str__(self) -> str:
        return f"{self.raw.__qualname__}[{', '.join(str(x) for x in self.args)}]"


class Nested(TypeSpec):
    entity: type

    @property
    def python_type(self) -> type:
        return self.entity

    def __str__(self) -> str:
        return self.entity.__qualname__


# container origins and the concrete class they are normalized to
CONTAINERS: dict[Any, type] = {
    list: list,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    set: set,
    collections.abc.Set: set,
    collections.abc.MutableSet: set,
    frozenset: frozenset,
    tuple: tuple,
    dict: dict,
    collections.abc.Mapping: dict,
    collections.abc.MutableMapping: dict,
}


def _resolve_optional(annotation: Any) -> TypeSpec:
    args = [x for x in get_args(annotation) if x is not type(None)]
    if len(args) != 1:
        raise UnresolvableType(annotation, "only Optional unions are supported")
    return resolve(args[0])


def _resolve_container(annotation: Any, raw: type) -> TypeSpec:
    args = get_args(annotation)
    if not args:
        raise UnresolvableType(annotation, "container needs type arguments")
    if raw is tuple:
        if len(args) != 2 or args[1] is not Ellipsis:
            raise UnresolvableType(annotation, "only tuple[T, ...] is supported")
        return Parameterized(raw=tuple, args=(resolve(args[0]),))
    if raw is dict:
        key, value = args
        if key is not str:
            raise UnresolvableType(annotation, "document keys are strings")
        return Parameterized(raw=dict, args=(Simple(cls=str), resolve(value)))
    (item,) = args
    return Parameterized(raw=raw, args=(resolve(item),))


def resolve(annotation: Any) -> TypeSpec:
    """Resolve a declared type annotation into a TypeSpec.

    Optional[X] resolves as X: None is representable for every type. Abstract
    containers (Sequence, Mapping, ...) are normalized to the builtin classes.
    """
    if annotation is Any:
        raise UnresolvableType(annotation, "Any cannot be converted")
    if isinstance(annotation, TypeVar):
        raise UnresolvableType(annotation, "type variables are not reifiable")
    origin = get_origin(annotation)
    if origin is Annotated:
        return resolve(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        return _resolve_optional(annotation)
    if origin is not None:
        if origin not in CONTAINERS:
            raise UnresolvableType(annotation, "unsupported generic type")
        return _resolve_container(annotation, CONTAINERS[origin])
    if not isinstance(annotation, type):
        raise UnresolvableType(annotation, "not a class")
    if annotation in CONTAINERS:
        raise UnresolvableType(annotation, "container needs type arguments")
    if issubclass(annotation, Entity):
        return Nested(entity=annotation)
    return Simple(cls=annotation)
