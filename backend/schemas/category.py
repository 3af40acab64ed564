from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


class OutboundCategoryIn(BaseModel):
    name: str
    description: Optional[str] = None


class OutboundCategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InboundCategoryIn(BaseModel):
    code: str
    name: str


class InboundCategoryOut(BaseModel):
    id: int
    code: str
    name: str

    model_config = ConfigDict(from_attributes=True)
