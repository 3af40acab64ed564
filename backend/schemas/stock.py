from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from schemas.product import ProductOut
from schemas.branch import BranchOut
from schemas.category import InboundCategoryOut, OutboundCategoryOut

# Required ids are Optional here so a missing one gets the localized
# "required" message instead of a schema error.

# Payload for registering incoming stock
class StockInCreate(BaseModel):
    product_id: Optional[int] = None
    variant: Optional[str] = None
    quantity: Optional[int] = Field(None, gt=0)
    source_id: Optional[int] = None
    inbound_category_id: Optional[int] = None
    plate_number: Optional[str] = None
    driver: Optional[str] = None
    delivery_note: Optional[str] = None
    return_branch_id: Optional[int] = None
    date: Optional[datetime] = None

# Payload for registering outgoing stock
class StockOutCreate(BaseModel):
    product_id: Optional[int] = None
    variant: Optional[str] = None
    quantity: Optional[int] = Field(None, gt=0)
    destination_id: Optional[int] = None
    outbound_category_id: Optional[int] = None
    date: Optional[datetime] = None

# Stock-in row with related names inlined
class StockInOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    variant: Optional[str] = None
    quantity: int
    source_id: Optional[int] = None
    source_name: str
    inbound_category_id: Optional[int] = None
    category_name: Optional[str] = None
    plate_number: Optional[str] = None
    driver: Optional[str] = None
    delivery_note: Optional[str] = None
    return_branch_id: Optional[int] = None
    return_branch_name: Optional[str] = None
    owner_id: int
    owner_email: Optional[str] = None
    date: Optional[datetime] = None

# Stock-out row with related names inlined
class StockOutOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    variant: Optional[str] = None
    quantity: int
    destination_id: Optional[int] = None
    destination_name: str
    outbound_category_id: Optional[int] = None
    category_name: str
    owner_id: int
    owner_email: Optional[str] = None
    date: Optional[datetime] = None

# Everything the stock-in entry form needs, loaded together
class StockInOptions(BaseModel):
    products: List[ProductOut]
    branches: List[BranchOut]
    categories: List[InboundCategoryOut]

class StockOutOptions(BaseModel):
    products: List[ProductOut]
    branches: List[BranchOut]
    categories: List[OutboundCategoryOut]
