from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    icon: str = Field(default="📁", min_length=1, max_length=16)


class CategoryPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=80)
    icon: str | None = Field(default=None, min_length=1, max_length=16)


class CategoryRead(BaseModel):
    id: str
    name: str
    icon: str
    order: int
