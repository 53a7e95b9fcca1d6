from datetime import datetime

from pydantic import BaseModel, Field


class ItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    quantity: int = Field(default=1, ge=0)
    min_quantity: int = Field(default=0, ge=0)
    category: str | None = None
    photo: str | None = None
    container: str = Field(min_length=1)


class ItemPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    quantity: int | None = Field(default=None, ge=0)
    min_quantity: int | None = Field(default=None, ge=0)
    category: str | None = None
    photo: str | None = None
    container: str | None = Field(default=None, min_length=1)


class ItemRead(BaseModel):
    id: str
    name: str
    quantity: int
    min_quantity: int
    category: str | None
    photo: str | None
    container: str
    created: datetime
    is_low_stock: bool


class LowStockAlertResponse(BaseModel):
    count: int
    items: list[ItemRead]
