from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skladito.core.clock import utcnow
from skladito.core.database import Base


class Container(Base):
    __tablename__ = "containers"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    parent: Mapped[str | None] = mapped_column(String(40), nullable=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    created: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
