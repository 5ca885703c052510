# (c) Nelen & Schuurmans

from typing import Any
from typing import Union
from uuid import UUID

__all__ = ["Json", "Document", "Id"]


Json = dict[str, Any]
Document = Json
Id = Union[int, str, UUID]
