from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from skladito.core.clock import utcnow
from skladito.core.database import Base


class ContainerAccess(Base):
    __tablename__ = "container_access"
    __table_args__ = (
        UniqueConstraint("container_id", "user_id", name="uq_container_access_container_user"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    container_id: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    created: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
