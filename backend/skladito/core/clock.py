from datetime import datetime, timezone
from uuid import uuid4


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns round-trip."""
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def new_id(prefix: str) -> str:
    return f"{prefix}{uuid4().hex}"
