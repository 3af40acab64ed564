# backend/routes/stock.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session, joinedload

from database import get_db
from models.branch import Branch, SUPPLIER_BRANCH
from models.category import InboundCategory, OutboundCategory
from models.product import Product
from models.stock import StockIn, StockOut
import schemas.stock as stock_schemas
from routes.products import list_scoped_products
from utils.audit import client_ip, write_log
from utils.errors import NotFound, ValidationFailed
from utils.grouping import normalize_variant
from utils.inbound_rules import check_inbound_fields
from utils.ledger import UNKNOWN_CATEGORY, UNKNOWN_DESTINATION, UNKNOWN_PRODUCT
from utils.scope import ActorContext, attach_owner_emails, get_actor, scope_query

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stock"])

FIELDS_REQUIRED = "Semua field wajib diisi kecuali varian"

# Stock events are append-only: there are no update or delete endpoints.


# ---- HELPERS ----
def _name(related, placeholder):
    return related.name if related is not None and related.name else placeholder

def _stock_in_row(e: StockIn) -> dict:
    return {
        "id": e.id,
        "product_id": e.product_id,
        "product_name": _name(e.product, UNKNOWN_PRODUCT),
        "variant": e.variant,
        "quantity": e.quantity,
        "source_id": e.source_id,
        "source_name": _name(e.source, SUPPLIER_BRANCH),
        "inbound_category_id": e.inbound_category_id,
        "category_name": e.category.name if e.category is not None else None,
        "plate_number": e.plate_number,
        "driver": e.driver,
        "delivery_note": e.delivery_note,
        "return_branch_id": e.return_branch_id,
        "return_branch_name": e.return_branch.name if e.return_branch is not None else None,
        "owner_id": e.owner_id,
        "date": e.date,
    }

def _stock_out_row(e: StockOut) -> dict:
    return {
        "id": e.id,
        "product_id": e.product_id,
        "product_name": _name(e.product, UNKNOWN_PRODUCT),
        "variant": e.variant,
        "quantity": e.quantity,
        "destination_id": e.destination_id,
        "destination_name": _name(e.destination, UNKNOWN_DESTINATION),
        "outbound_category_id": e.outbound_category_id,
        "category_name": _name(e.category, UNKNOWN_CATEGORY),
        "owner_id": e.owner_id,
        "date": e.date,
    }

def stock_in_query(db: Session, actor: ActorContext):
    query = db.query(StockIn).options(
        joinedload(StockIn.product), joinedload(StockIn.source),
        joinedload(StockIn.return_branch), joinedload(StockIn.category),
    )
    return scope_query(query, StockIn, actor)

def stock_out_query(db: Session, actor: ActorContext):
    query = db.query(StockOut).options(
        joinedload(StockOut.product), joinedload(StockOut.destination), joinedload(StockOut.category),
    )
    return scope_query(query, StockOut, actor)

def _require_product(db: Session, actor: ActorContext, product_id: int) -> Product:
    product = scope_query(db.query(Product), Product, actor).filter(Product.id == product_id).first()
    if not product:
        raise NotFound("Produk tidak ditemukan")
    return product

def _require(db: Session, model, pk: int, message: str):
    row = db.query(model).filter(model.id == pk).first()
    if not row:
        raise NotFound(message)
    return row


# =========================
# STOK MASUK
# =========================
@router.get("/stock-in", response_model=List[stock_schemas.StockInOut])
def list_stock_in(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    rows = stock_in_query(db, actor).order_by(StockIn.date.desc(), StockIn.id.desc()).all()
    return attach_owner_emails(db, [_stock_in_row(e) for e in rows], actor)


@router.get("/stock-in/options", response_model=stock_schemas.StockInOptions)
def stock_in_options(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    return {
        "products": list_scoped_products(db, actor),
        "branches": db.query(Branch).order_by(Branch.name.asc()).all(),
        "categories": db.query(InboundCategory).order_by(InboundCategory.name.asc()).all(),
    }


@router.post("/stock-in", response_model=stock_schemas.StockInOut, status_code=201)
def create_stock_in(
    payload: stock_schemas.StockInCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    if payload.product_id is None or payload.quantity is None or payload.source_id is None:
        raise ValidationFailed(FIELDS_REQUIRED)

    product = _require_product(db, actor, payload.product_id)
    _require(db, Branch, payload.source_id, "Cabang sumber tidak ditemukan")

    if payload.inbound_category_id is not None:
        category = _require(db, InboundCategory, payload.inbound_category_id, "Jenis stok masuk tidak ditemukan")
        check_inbound_fields(category.code, payload.model_dump())
    if payload.return_branch_id is not None:
        _require(db, Branch, payload.return_branch_id, "Cabang asal retur tidak ditemukan")

    event = StockIn(
        product_id=product.id,
        variant=normalize_variant(payload.variant) or product.variant,
        quantity=payload.quantity,
        source_id=payload.source_id,
        inbound_category_id=payload.inbound_category_id,
        plate_number=(payload.plate_number or "").strip() or None,
        driver=(payload.driver or "").strip() or None,
        delivery_note=(payload.delivery_note or "").strip() or None,
        return_branch_id=payload.return_branch_id,
        owner_id=actor.actor_id,
    )
    if payload.date is not None:
        event.date = payload.date
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info("Stock in #%s: product=%s qty=%s by actor=%s", event.id, product.id, event.quantity, actor.actor_id)
    write_log(db, user_id=actor.actor_id, action="STOCK_IN", resource="stock",
              status="SUCCESS", ip=client_ip(request), meta={"id": event.id, "quantity": event.quantity})
    return attach_owner_emails(db, [_stock_in_row(event)], actor)[0]


# =========================
# STOK KELUAR
# =========================
@router.get("/stock-out", response_model=List[stock_schemas.StockOutOut])
def list_stock_out(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    rows = stock_out_query(db, actor).order_by(StockOut.date.desc(), StockOut.id.desc()).all()
    return attach_owner_emails(db, [_stock_out_row(e) for e in rows], actor)


@router.get("/stock-out/options", response_model=stock_schemas.StockOutOptions)
def stock_out_options(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    return {
        "products": list_scoped_products(db, actor),
        "branches": db.query(Branch).order_by(Branch.name.asc()).all(),
        "categories": db.query(OutboundCategory).order_by(OutboundCategory.name.asc()).all(),
    }


@router.post("/stock-out", response_model=stock_schemas.StockOutOut, status_code=201)
def create_stock_out(
    payload: stock_schemas.StockOutCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    if (payload.product_id is None or payload.quantity is None
            or payload.destination_id is None or payload.outbound_category_id is None):
        raise ValidationFailed(FIELDS_REQUIRED)

    product = _require_product(db, actor, payload.product_id)
    _require(db, Branch, payload.destination_id, "Cabang tujuan tidak ditemukan")
    _require(db, OutboundCategory, payload.outbound_category_id, "Jenis stok keluar tidak ditemukan")

    # Overdraft is allowed; the ledger reports negative balances as they are
    event = StockOut(
        product_id=product.id,
        variant=normalize_variant(payload.variant) or product.variant,
        quantity=payload.quantity,
        destination_id=payload.destination_id,
        outbound_category_id=payload.outbound_category_id,
        owner_id=actor.actor_id,
    )
    if payload.date is not None:
        event.date = payload.date
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info("Stock out #%s: product=%s qty=%s by actor=%s", event.id, product.id, event.quantity, actor.actor_id)
    write_log(db, user_id=actor.actor_id, action="STOCK_OUT", resource="stock",
              status="SUCCESS", ip=client_ip(request), meta={"id": event.id, "quantity": event.quantity})
    return attach_owner_emails(db, [_stock_out_row(event)], actor)[0]
