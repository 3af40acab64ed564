from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional, List


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Create one logical product: a single `variant` or a list of `variants`
# (one row each). Neither given means one row without variant.
class ProductCreate(BaseModel):
    name: str
    variant: Optional[str] = None
    variants: Optional[List[str]] = None


# Edit a single product row
class ProductUpdate(BaseModel):
    name: str
    variant: Optional[str] = None


# Edit a logical product: new name and the complete variant list
class ProductGroupUpdate(BaseModel):
    name: str
    variants: List[str] = []


class ProductOut(ORMBase):
    id: int
    name: str
    variant: Optional[str] = None
    owner_id: int
    created_at: Optional[datetime] = None
    owner_email: Optional[str] = None


# One logical product with every row sharing its name
class ProductGroupOut(BaseModel):
    name: str
    variants: List[str]
    has_plain_row: bool
    rows: List[ProductOut]


class ProductDeleteResult(BaseModel):
    deleted: int
