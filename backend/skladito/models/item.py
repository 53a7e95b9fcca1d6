from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skladito.core.clock import utcnow
from skladito.core.database import Base


class Item(Base):
    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    min_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    category: Mapped[str | None] = mapped_column(String(40), nullable=True, index=True)
    photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    container: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    created: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
