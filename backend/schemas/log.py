from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


# One audit entry; actor_email is empty once the profile is gone
class LogOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    actor_email: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None

    model_config = ConfigDict(from_attributes=True)


class LogPage(BaseModel):
    items: List[LogOut]
    total: int
    page: int
    page_size: int
