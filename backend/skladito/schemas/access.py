from datetime import datetime

from pydantic import BaseModel, Field

from skladito.schemas.auth import UserRead


class AccessGrant(BaseModel):
    user_id: str = Field(min_length=1)


class AccessRead(BaseModel):
    id: str
    container_id: str
    user_id: str
    created: datetime
    user: UserRead | None = None
