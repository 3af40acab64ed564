# schemas/reports.py
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel

# Remaining stock per product and variant
class StockSummaryItem(BaseModel):
    product_id: Optional[int] = None
    product_name: str
    variant: Optional[str] = None
    total_in: int
    total_out: int
    current_stock: int

class StockSummaryResponse(BaseModel):
    items: List[StockSummaryItem]
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

# Stock-in report line
class StockInReportItem(BaseModel):
    product_name: str
    variant: Optional[str] = None
    quantity: int
    source: str
    category: str
    date: Optional[datetime] = None
    owner_email: Optional[str] = None

# Stock-out report line
class StockOutReportItem(BaseModel):
    product_name: str
    variant: Optional[str] = None
    quantity: int
    destination: str
    jenis: str
    date: Optional[datetime] = None
    owner_email: Optional[str] = None

# One entry of the merged per-product movement history
class MovementItem(BaseModel):
    type: Literal["in", "out"]
    id: Optional[int] = None
    product_id: Optional[int] = None
    product_name: str
    variant: Optional[str] = None
    quantity: int
    counterparty: str
    category: str
    date: Optional[datetime] = None
    owner_email: Optional[str] = None

# Dashboard figures
class DashboardStats(BaseModel):
    total_products: int
    total_stock_in: int
    total_stock_out: int
    available_stock: int
    recent_stock_ins: List[MovementItem]
    recent_stock_outs: List[MovementItem]
