from pydantic import BaseModel

from skladito.schemas.category import CategoryRead
from skladito.schemas.container import ContainerRead
from skladito.schemas.item import ItemRead


class SyncResponse(BaseModel):
    containers: list[ContainerRead]
    items: list[ItemRead]
    categories: list[CategoryRead]


class SearchResponse(BaseModel):
    containers: list[ContainerRead]
    items: list[ItemRead]
