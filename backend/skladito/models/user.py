from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from skladito.core.clock import utcnow
from skladito.core.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    # Keyed digest of the login code. NULL while inactive, so only active users collide.
    code: Mapped[str | None] = mapped_column(String(128), nullable=True, unique=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    invite_token: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    invite_expires: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    credential_version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
