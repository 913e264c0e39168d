from typing import Optional
from fastapi import Header

from tacom.core.config import settings


async def get_responsible_user(x_user_name: Optional[str] = Header(default=None)) -> str:
    """Display name of the caller, recorded on every movement.

    Authentication lives in front of this service; the name is taken as given.
    """
    name = (x_user_name or "").strip()
    return name or settings.DEFAULT_RESPONSIBLE_USER
