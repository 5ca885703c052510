# (c) Nelen & Schuurmans

from typing import Any
from typing import Optional
from typing import Tuple

from clean_mapping.base.domain import ValueObject

from .type_spec import Parameterized
from .type_spec import TypeSpec

__all__ = ["ConversionContext"]


class ConversionContext(ValueObject):
    """A single conversion: the value, what it should become and where it is.

    Contexts are immutable; converters that recurse create a new one per item
    through 'child'.
    """

    value: Any
    target: TypeSpec
    field: Optional[str] = None

    @property
    def args(self) -> Tuple[TypeSpec, ...]:
        if isinstance(self.target, Parameterized):
            return self.target.args
        return ()

    def child(self, value: Any, target: TypeSpec, key: Any) -> "ConversionContext":
        if isinstance(key, int):
            field = f"{self.field or ''}[{key}]"
        else:
            field = f"{self.field}.{key}" if self.field else str(key)
        return ConversionContext(value=value, target=target, field=field)
