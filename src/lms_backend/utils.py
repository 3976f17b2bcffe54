import re
from datetime import datetime, timezone
from typing import Optional
from text_unidecode import unidecode

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands timestamps back without tzinfo; they are stored in UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def slugify(value: str) -> str:
    slug = unidecode(value).lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")
