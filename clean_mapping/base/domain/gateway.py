# (c) Nelen & Schuurmans

from abc import ABC
from typing import Callable
from typing import List
from typing import Optional

from .exceptions import DoesNotExist
from .filter import Filter
from .pagination import PageOptions
from .types import Document
from .types import Id

__all__ = ["Gateway"]


class Gateway(ABC):
    """The boundary to a document store. Everything in and out is a document.

    The primary key of a document lives under 'identity_key'.
    """

    identity_key: str = "_id"

    async def filter(
        self, filters: List[Filter], params: Optional[PageOptions] = None
    ) -> List[Document]:
        raise NotImplementedError()

    async def count(self, filters: List[Filter]) -> int:
        return len(await self.filter(filters, params=None))

    async def exists(self, filters: List[Filter]) -> bool:
        return len(await self.filter(filters, params=PageOptions(limit=1))) > 0

    async def get(self, id: Id) -> Optional[Document]:
        result = await self.filter([Filter.for_id(id, self.identity_key)])
        return result[0] if result else None

    async def add(self, item: Document) -> Document:
        raise NotImplementedError()

    async def update(self, item: Document) -> Document:
        raise NotImplementedError()

    async def update_transactional(
        self, id: Id, func: Callable[[Document], Document]
    ) -> Document:
        existing = await self.get(id)
        if existing is None:
            raise DoesNotExist("document", id)
        return await self.update(func(existing))

    async def upsert(self, item: Document) -> Document:
        try:
            return await self.update(item)
        except DoesNotExist:
            return await self.add(item)

    async def remove(self, id: Id) -> bool:
        raise NotImplementedError()
