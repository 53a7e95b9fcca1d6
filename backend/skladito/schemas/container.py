from datetime import datetime

from pydantic import BaseModel, Field


class ContainerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    photo: str | None = None
    number: str | None = Field(default=None, max_length=40)
    parent: str | None = None


class ContainerPatch(BaseModel):
    """Partial update. Omitted fields stay untouched, explicit nulls clear."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    photo: str | None = None
    number: str | None = Field(default=None, max_length=40)
    parent: str | None = None


class ContainerRead(BaseModel):
    id: str
    name: str
    photo: str | None
    number: str | None
    parent: str | None
    owner_id: str
    created: datetime
