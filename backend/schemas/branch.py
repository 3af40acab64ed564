from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


class BranchIn(BaseModel):
    name: str


class BranchOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
