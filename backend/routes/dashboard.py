# backend/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.stock import StockIn, StockOut
from routes.stock import stock_in_query, stock_out_query
from schemas.reports import DashboardStats
from utils.ledger import stock_in_record, stock_out_record
from utils.scope import ActorContext, attach_owner_emails, get_actor, scope_query

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"]
)

# Number of latest movements shown per direction
RECENT_LIMIT = 5


def _sum_quantity(db: Session, model, actor: ActorContext) -> int:
    query = scope_query(db.query(func.coalesce(func.sum(model.quantity), 0)), model, actor)
    return int(query.scalar() or 0)


@router.get("", response_model=DashboardStats)
def get_dashboard(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    total_products = scope_query(db.query(func.count(Product.id)), Product, actor).scalar() or 0
    total_in = _sum_quantity(db, StockIn, actor)
    total_out = _sum_quantity(db, StockOut, actor)

    recent_ins = (stock_in_query(db, actor)
                  .order_by(StockIn.date.desc(), StockIn.id.desc())
                  .limit(RECENT_LIMIT).all())
    recent_outs = (stock_out_query(db, actor)
                   .order_by(StockOut.date.desc(), StockOut.id.desc())
                   .limit(RECENT_LIMIT).all())

    return {
        "total_products": total_products,
        "total_stock_in": total_in,
        "total_stock_out": total_out,
        "available_stock": total_in - total_out,
        "recent_stock_ins": attach_owner_emails(db, [stock_in_record(e) for e in recent_ins], actor),
        "recent_stock_outs": attach_owner_emails(db, [stock_out_record(e) for e in recent_outs], actor),
    }
