# (c) Nelen & Schuurmans

from typing import Any
from typing import Generic
from typing import List
from typing import Optional
from typing import Type
from typing import TypeVar

from clean_mapping.base.domain import Document
from clean_mapping.base.domain import DoesNotExist
from clean_mapping.base.domain import Filter
from clean_mapping.base.domain import Gateway
from clean_mapping.base.domain import IdentifiableEntity
from clean_mapping.base.domain import Page
from clean_mapping.base.domain import PageOptions
from clean_mapping.mapping import MapperConfig
from clean_mapping.mapping import ObjectMapper

__all__ = ["Repository"]

T = TypeVar("T", bound=IdentifiableEntity)


class Repository(Generic[T]):
    """Loads and stores entities of one type through a document Gateway.

    Subclass it with the entity type as parameter:

        class WidgetRepository(Repository[Widget]):
            pass
    """

    entity: Type[T]

    def __init__(self, gateway: Gateway, mapper: Optional[ObjectMapper] = None):
        self.gateway = gateway
        if mapper is None:
            mapper = ObjectMapper(MapperConfig(identity_key=gateway.identity_key))
        assert mapper.config.identity_key == gateway.identity_key
        self.mapper = mapper

    def __init_subclass__(cls) -> None:
        (base,) = cls.__orig_bases__  # type: ignore
        (entity,) = base.__args__
        assert issubclass(entity, IdentifiableEntity)
        super().__init_subclass__()
        cls.entity = entity

    def _to_entity(self, document: Document) -> T:
        return self.mapper.document_to_entity(document, self.entity)  # type: ignore

    def _to_document(self, item: T) -> Document:
        return self.mapper.entity_to_document(item)  # type: ignore

    async def all(self, params: Optional[PageOptions] = None) -> Page[T]:
        return await self.filter([], params=params)

    async def by(
        self, key: str, value: Any, params: Optional[PageOptions] = None
    ) -> Page[T]:
        return await self.filter([Filter(field=key, values=[value])], params=params)

    async def filter(
        self, filters: List[Filter], params: Optional[PageOptions] = None
    ) -> Page[T]:
        documents = await self.gateway.filter(filters, params=params)
        total = len(documents)
        # when using pagination, we may need to do a count in the db
        # except in a typical 'first page' situation with few records
        if params is not None and not (params.offset == 0 and total < params.limit):
            total = await self.count(filters)
        return Page(
            total=total,
            limit=params.limit if params else None,
            offset=params.offset if params else None,
            items=[self._to_entity(x) for x in documents],
        )

    async def get(self, id: str) -> T:
        res = await self.gateway.get(id)
        if res is None:
            raise DoesNotExist(self.entity.__name__, id)
        return self._to_entity(res)

    async def add(self, item: T) -> T:
        created = await self.gateway.add(self._to_document(item))
        return self._to_entity(created)

    async def update(self, item: T) -> T:
        if item.id is None:
            raise DoesNotExist(self.entity.__name__)
        updated = await self.gateway.update(self._to_document(item))
        return self._to_entity(updated)

    async def upsert(self, item: T) -> T:
        upserted = await self.gateway.upsert(self._to_document(item))
        return self._to_entity(upserted)

    async def remove(self, id: str) -> bool:
        return await self.gateway.remove(id)

    async def count(self, filters: List[Filter]) -> int:
        return await self.gateway.count(filters)

    async def exists(self, filters: List[Filter]) -> bool:
        return await self.gateway.exists(filters)
