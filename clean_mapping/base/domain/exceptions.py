# (c) Nelen & Schuurmans

from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from .types import Id

__all__ = [
    "AlreadyExists",
    "DoesNotExist",
    "BadRequest",
    "MappingError",
    "EntityInstantiationError",
    "UnsupportedType",
    "UnresolvableType",
    "NoConverterFound",
    "TypeMismatchError",
    "ConversionFailed",
    "RegistryFrozen",
]


def _type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


class DoesNotExist(Exception):
    def __init__(self, name: str, id: Id | None = None):
        super().__init__()
        self.name = name
        self.id = id

    def __str__(self):
        if self.id:
            return f"does not exist: {self.name} with id={self.id}"
        else:
            return f"does not exist: {self.name}"


class AlreadyExists(Exception):
    def __init__(self, value: Any = None, key: str = "id"):
        super().__init__(f"record with {key}={value} already exists")


class BadRequest(Exception):
    def __init__(self, err_or_msg: ValidationError | str):
        self._internal_error = err_or_msg
        super().__init__(err_or_msg)

    def errors(self) -> list[ErrorDetails]:
        if isinstance(self._internal_error, ValidationError):
            return self._internal_error.errors()
        return [
            ErrorDetails(
                type="value_error",
                msg=self._internal_error,
                loc=[],  # type: ignore
                input=None,
            )
        ]

    def __str__(self) -> str:
        error = self._internal_error
        if isinstance(error, ValidationError):
            details = error.errors()[0]
            loc = "'" + ",".join([str(x) for x in details["loc"]]) + "' "
            if loc == "'*' ":
                loc = ""
            return f"validation error: {loc}{details['msg']}"
        return f"validation error: {super().__str__()}"


class MappingError(Exception):
    """Base class for errors raised while converting documents and entities.

    These signal configuration problems (missing converters, unsupported
    annotations) or converter bugs; they are never raised for unknown document
    fields.
    """


class EntityInstantiationError(MappingError):
    def __init__(self, cls: type, reason: Any = None):
        super().__init__(cls, reason)
        self.cls = cls
        self.reason = reason

    def __str__(self) -> str:
        msg = f"cannot instantiate {_type_name(self.cls)}"
        if self.reason is not None:
            msg += f": {self.reason}"
        return msg


class UnsupportedType(MappingError):
    def __init__(self, cls: Any, reason: str = "not a mappable entity type"):
        super().__init__(cls, reason)
        self.cls = cls
        self.reason = reason

    def __str__(self) -> str:
        return f"{_type_name(self.cls)}: {self.reason}"


class UnresolvableType(MappingError):
    def __init__(self, annotation: Any, reason: str = "no resolution strategy"):
        super().__init__(annotation, reason)
        self.annotation = annotation
        self.reason = reason

    def __str__(self) -> str:
        return f"cannot resolve type {self.annotation!r}: {self.reason}"


class NoConverterFound(MappingError):
    def __init__(self, source: type, target: Any, field: str | None = None):
        super().__init__(source, target, field)
        self.source = source
        self.target = target
        self.field = field

    def __str__(self) -> str:
        msg = f"no converter from {_type_name(self.source)} to {self.target}"
        if self.field:
            msg += f" (field '{self.field}')"
        return msg


class TypeMismatchError(MappingError):
    def __init__(self, value: Any, target: Any, field: str | None = None):
        super().__init__(value, target, field)
        self.value = value
        self.target = target
        self.field = field

    def __str__(self) -> str:
        msg = (
            f"converted value {self.value!r} of type "
            f"{_type_name(type(self.value))} is not of type {self.target}"
        )
        if self.field:
            msg += f" (field '{self.field}')"
        return msg


class ConversionFailed(MappingError):
    """A converter was found but could not convert the value.

    The original exception is chained as __cause__.
    """

    def __init__(
        self, value: Any, target: Any, field: str | None = None, reason: Any = None
    ):
        super().__init__(value, target, field, reason)
        self.value = value
        self.target = target
        self.field = field
        self.reason = reason

    def __str__(self) -> str:
        msg = f"cannot convert {self.value!r} to {self.target}"
        if self.field:
            msg += f" (field '{self.field}')"
        if self.reason is not None:
            msg += f": {self.reason}"
        return msg


class RegistryFrozen(MappingError):
    def __init__(self, msg: str = "converter registry is frozen"):
        super().__init__(msg)
