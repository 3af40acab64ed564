# routes/reports.py
from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.stock import StockIn, StockOut
from routes.stock import stock_in_query, stock_out_query
from schemas.reports import (
    MovementItem, StockInReportItem, StockOutReportItem,
    StockSummaryItem, StockSummaryResponse,
)
from utils.errors import ValidationFailed
from utils.ledger import aggregate_stock, merge_history, stock_in_record, stock_out_record
from utils.scope import ActorContext, attach_owner_emails, get_actor, scope_query

router = APIRouter(prefix="/reports", tags=["Reports"])


def parse_date_bound(value: Optional[str], end: bool = False) -> Optional[datetime]:
    """YYYY-MM-DD covers the whole day; full ISO datetimes are taken as-is."""
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if end else time.min)
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationFailed(f"Format tanggal tidak valid: {value}")

def _filtered(query, model, date_from, date_to, product_id):
    if date_from:
        query = query.filter(model.date >= date_from)
    if date_to:
        query = query.filter(model.date <= date_to)
    if product_id is not None:
        query = query.filter(model.product_id == product_id)
    return query


# -----------------------------
# 1) Sisa stok
# -----------------------------
@router.get("/stock-summary", response_model=StockSummaryResponse)
def report_stock_summary(
    product_id: Optional[int] = Query(None),
    date_from: Optional[str] = Query(None, description="YYYY-MM-DD or ISO datetime"),
    date_to: Optional[str] = Query(None, description="YYYY-MM-DD or ISO datetime"),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    fdt = parse_date_bound(date_from)
    tdt = parse_date_bound(date_to, end=True)

    ins = _filtered(stock_in_query(db, actor), StockIn, fdt, tdt, product_id).order_by(StockIn.id.asc()).all()
    outs = _filtered(stock_out_query(db, actor), StockOut, fdt, tdt, product_id).order_by(StockOut.id.asc()).all()

    items: List[StockSummaryItem] = [StockSummaryItem(**entry) for entry in aggregate_stock(ins, outs).values()]
    return StockSummaryResponse(items=items, date_from=fdt, date_to=tdt)


# -----------------------------
# 2) Stok masuk
# -----------------------------
@router.get("/stock-in", response_model=List[StockInReportItem])
def report_stock_in(
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    product_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    query = _filtered(stock_in_query(db, actor), StockIn,
                      parse_date_bound(date_from), parse_date_bound(date_to, end=True), product_id)
    rows = query.order_by(StockIn.date.desc(), StockIn.id.desc()).all()

    items = []
    for e in rows:
        r = stock_in_record(e)
        items.append({
            "product_name": r["product_name"],
            "variant": r["variant"],
            "quantity": r["quantity"],
            "source": r["counterparty"],
            "category": r["category"],
            "date": r["date"],
            "owner_id": r["owner_id"],
        })
    return attach_owner_emails(db, items, actor)


# -----------------------------
# 3) Stok keluar
# -----------------------------
@router.get("/stock-out", response_model=List[StockOutReportItem])
def report_stock_out(
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    product_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    query = _filtered(stock_out_query(db, actor), StockOut,
                      parse_date_bound(date_from), parse_date_bound(date_to, end=True), product_id)
    rows = query.order_by(StockOut.date.desc(), StockOut.id.desc()).all()

    items = []
    for e in rows:
        r = stock_out_record(e)
        items.append({
            "product_name": r["product_name"],
            "variant": r["variant"],
            "quantity": r["quantity"],
            "destination": r["counterparty"],
            "jenis": r["category"],
            "date": r["date"],
            "owner_id": r["owner_id"],
        })
    return attach_owner_emails(db, items, actor)


# -----------------------------
# 4) Riwayat per produk
# -----------------------------
@router.get("/history", response_model=List[MovementItem])
def report_history(
    product_id: Optional[int] = Query(None),
    product_name: Optional[str] = Query(None, description="All variants of a logical product"),
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    if product_id is None and not product_name:
        raise ValidationFailed("Pilih produk terlebih dahulu")

    fdt = parse_date_bound(date_from)
    tdt = parse_date_bound(date_to, end=True)
    ins = _filtered(stock_in_query(db, actor), StockIn, fdt, tdt, product_id)
    outs = _filtered(stock_out_query(db, actor), StockOut, fdt, tdt, product_id)
    if product_name:
        ins = ins.join(Product, StockIn.product_id == Product.id).filter(Product.name == product_name)
        outs = outs.join(Product, StockOut.product_id == Product.id).filter(Product.name == product_name)

    history = merge_history(ins.order_by(StockIn.id.asc()).all(), outs.order_by(StockOut.id.asc()).all())
    return attach_owner_emails(db, history, actor)


# Product names for the report filter
@router.get("/products", response_model=List[str])
def report_product_names(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    query = scope_query(db.query(Product.name), Product, actor).distinct().order_by(Product.name.asc())
    return [row[0] for row in query.all()]
