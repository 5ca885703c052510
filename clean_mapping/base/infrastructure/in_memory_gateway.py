# (c) Nelen & Schuurmans

from copy import deepcopy
from typing import List
from typing import Optional

from nanoid import generate

from clean_mapping.base.domain import AlreadyExists
from clean_mapping.base.domain import Document
from clean_mapping.base.domain import DoesNotExist
from clean_mapping.base.domain import Filter
from clean_mapping.base.domain import Gateway
from clean_mapping.base.domain import Id
from clean_mapping.base.domain import PageOptions

__all__ = ["InMemoryGateway"]

# Ref. https://digitalbazaar.github.io/base58-spec/
BASE58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


class InMemoryGateway(Gateway):
    """A document store in a dict, for testing purposes.

    Documents are stored and returned as deep copies. Missing ids are
    generated as base58 NanoIDs (like a store would generate an ObjectId).
    """

    def __init__(
        self, data: List[Document], identity_key: str = "_id", id_size: int = 12
    ):
        self.identity_key = identity_key
        self.id_size = id_size
        self.data = {x[identity_key]: deepcopy(x) for x in data}

    def _get_next_id(self) -> str:
        return generate(BASE58, self.id_size)

    def _paginate(self, objs: List[Document], params: PageOptions) -> List[Document]:
        objs = sorted(
            objs,
            key=lambda x: (x.get(params.order_by) is None, x.get(params.order_by)),
            reverse=not params.ascending,
        )
        return objs[params.offset : params.offset + params.limit]

    async def filter(
        self, filters: List[Filter], params: Optional[PageOptions] = None
    ) -> List[Document]:
        result = []
        for x in self.data.values():
            for filter in filters:
                if x.get(filter.field) not in filter.values:
                    break
            else:
                result.append(deepcopy(x))
        if params is not None:
            result = self._paginate(result, params)
        return result

    async def add(self, item: Document) -> Document:
        item = deepcopy(item)
        id_ = item.pop(self.identity_key, None)
        if id_ is None:
            id_ = self._get_next_id()
        elif id_ in self.data:
            raise AlreadyExists(id_, key=self.identity_key)

        self.data[id_] = {self.identity_key: id_, **item}
        return deepcopy(self.data[id_])

    async def update(self, item: Document) -> Document:
        # documents are replaced as a whole; absent fields are dropped
        id_ = item.get(self.identity_key)
        if id_ is None or id_ not in self.data:
            raise DoesNotExist("document", id_)
        self.data[id_] = deepcopy(item)
        return deepcopy(self.data[id_])

    async def remove(self, id: Id) -> bool:
        if id not in self.data:
            return False
        del self.data[id]
        return True
