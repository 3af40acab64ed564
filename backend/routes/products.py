# backend/routes/products.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.stock import StockIn, StockOut
import schemas.product as product_schemas
from utils.audit import client_ip, write_log
from utils.errors import NotFound, ValidationFailed
from utils.grouping import (
    clean_variants, group_by_name, group_variants, normalize_variant, plan_variant_sync, variant_names,
)
from utils.scope import ActorContext, attach_owner_emails, get_actor, scope_query

router = APIRouter(prefix="/products", tags=["Products"])

NAME_REQUIRED = "Nama produk harus diisi"
PRODUCT_NOT_FOUND = "Produk tidak ditemukan"
DUPLICATE_VARIANT = "Produk dengan varian tersebut sudah ada"
HAS_STOCK_HISTORY = "Produk sudah memiliki riwayat stok dan tidak dapat dihapus"


# ---- HELPERS ----
def _serialize(p: Product) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "variant": p.variant,
        "owner_id": p.owner_id,
        "created_at": p.created_at,
    }

def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationFailed(NAME_REQUIRED)
    return name

def _scoped_products(db: Session, actor: ActorContext):
    return scope_query(db.query(Product), Product, actor)

def _get_scoped_product(db: Session, actor: ActorContext, product_id: int) -> Product:
    product = _scoped_products(db, actor).filter(Product.id == product_id).first()
    if not product:
        raise NotFound(PRODUCT_NOT_FOUND)
    return product

def _rows_by_name(db: Session, actor: ActorContext, name: str) -> List[Product]:
    return (_scoped_products(db, actor)
            .filter(Product.name == name)
            .order_by(Product.created_at.asc(), Product.id.asc())
            .all())

def _ensure_variants_free(db: Session, owner_id: int, name: str, variants, exclude_ids=()) -> None:
    """One row per (name, variant) and owner."""
    query = db.query(Product.variant).filter(Product.owner_id == owner_id, Product.name == name)
    if exclude_ids:
        query = query.filter(~Product.id.in_(list(exclude_ids)))
    taken = {normalize_variant(v) for (v,) in query.all()}
    if taken & {normalize_variant(v) for v in variants}:
        raise ValidationFailed(DUPLICATE_VARIANT)

def _ensure_no_stock_history(db: Session, product_ids) -> None:
    # Stock events are never deleted, so neither is a product they point to
    ids = list(product_ids)
    if not ids:
        return
    for model in (StockIn, StockOut):
        if db.query(model.id).filter(model.product_id.in_(ids)).first() is not None:
            raise ValidationFailed(HAS_STOCK_HISTORY)

def list_scoped_products(db: Session, actor: ActorContext) -> List[dict]:
    rows = _scoped_products(db, actor).order_by(Product.created_at.desc(), Product.id.desc()).all()
    return attach_owner_emails(db, [_serialize(p) for p in rows], actor)


# =========================
# LISTS
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    return list_scoped_products(db, actor)


@router.get("/grouped", response_model=List[product_schemas.ProductGroupOut])
def list_grouped_products(db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    """One entry per logical product, with every variant row sharing its name."""
    items = list_scoped_products(db, actor)
    rows = [product_schemas.ProductOut.model_validate(i) for i in items]
    result = []
    for name, group in group_by_name(rows).items():
        result.append({
            "name": name,
            "variants": variant_names(group),
            "has_plain_row": None in group_variants(group),
            "rows": group,
        })
    return result


# =========================
# LOGICAL PRODUCT (BY NAME)
# =========================
@router.put("/by-name/{name}", response_model=List[product_schemas.ProductOut])
def update_product_group(
    name: str,
    payload: product_schemas.ProductGroupUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    """Rename a logical product and replace its variant set."""
    new_name = _clean_name(payload.name)
    rows = _rows_by_name(db, actor, name)
    if not rows:
        raise NotFound(PRODUCT_NOT_FOUND)

    # A superadmin sees every owner's rows; each owner keeps their own product
    by_owner = {}
    for row in rows:
        by_owner.setdefault(row.owner_id, []).append(row)
    plans = {owner_id: plan_variant_sync(owner_rows, payload.variants)
             for owner_id, owner_rows in by_owner.items()}

    if new_name != name:
        for owner_id, (keep, _, insert) in plans.items():
            _ensure_variants_free(db, owner_id, new_name, [r.variant for r in keep] + insert)
    _ensure_no_stock_history(db, [row.id for _, delete, _ in plans.values() for row in delete])

    deleted, added = 0, []
    for owner_id, (keep, delete, insert) in plans.items():
        for row in keep:
            row.name = new_name
        for row in delete:
            db.delete(row)
        deleted += len(delete)
        added.extend(Product(name=new_name, variant=v, owner_id=owner_id) for v in insert)
    db.add_all(added)
    db.commit()

    write_log(db, user_id=actor.actor_id, action="PRODUCT_GROUP_UPDATE", resource="products",
              status="SUCCESS", ip=client_ip(request),
              meta={"name": name, "new_name": new_name, "owners": len(plans),
                    "deleted": deleted, "added": len(added)})

    return attach_owner_emails(db, [_serialize(p) for p in _rows_by_name(db, actor, new_name)], actor)


@router.delete("/by-name/{name}", response_model=product_schemas.ProductDeleteResult)
def delete_product_group(
    name: str,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    """Delete a logical product: every row with this name, whatever its variant."""
    ids = [pid for (pid,) in scope_query(db.query(Product.id), Product, actor).filter(Product.name == name).all()]
    if not ids:
        raise NotFound(PRODUCT_NOT_FOUND)
    _ensure_no_stock_history(db, ids)

    deleted = db.query(Product).filter(Product.id.in_(ids)).delete(synchronize_session=False)
    db.commit()

    write_log(db, user_id=actor.actor_id, action="PRODUCT_GROUP_DELETE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"name": name, "deleted": deleted})
    return {"deleted": deleted}


# =========================
# SINGLE ROW
# =========================
@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db), actor: ActorContext = Depends(get_actor)):
    product = _get_scoped_product(db, actor, product_id)
    return attach_owner_emails(db, [_serialize(product)], actor)[0]


@router.post("", response_model=List[product_schemas.ProductOut], status_code=201)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    name = _clean_name(payload.name)
    wanted = clean_variants((payload.variants or []) + [payload.variant]) or [None]

    existing = {normalize_variant(p.variant) for p in _rows_by_name(db, actor, name)
                if p.owner_id == actor.actor_id}
    to_insert = [v for v in wanted if v not in existing]
    if not to_insert:
        raise ValidationFailed("Produk dengan varian tersebut sudah ada")

    created = [Product(name=name, variant=v, owner_id=actor.actor_id) for v in to_insert]
    db.add_all(created)
    db.commit()
    for p in created:
        db.refresh(p)

    write_log(db, user_id=actor.actor_id, action="PRODUCT_CREATE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"ids": [p.id for p in created]})
    return attach_owner_emails(db, [_serialize(p) for p in created], actor)


@router.put("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    product = _get_scoped_product(db, actor, product_id)
    new_name = _clean_name(payload.name)
    new_variant = normalize_variant(payload.variant)
    _ensure_variants_free(db, product.owner_id, new_name, [new_variant], exclude_ids=[product.id])

    product.name = new_name
    product.variant = new_variant
    db.commit()
    db.refresh(product)

    write_log(db, user_id=actor.actor_id, action="PRODUCT_UPDATE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"id": product.id})
    return attach_owner_emails(db, [_serialize(product)], actor)[0]


@router.delete("/{product_id}", response_model=product_schemas.ProductDeleteResult)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(get_actor),
):
    product = _get_scoped_product(db, actor, product_id)
    _ensure_no_stock_history(db, [product.id])
    db.delete(product)
    db.commit()

    write_log(db, user_id=actor.actor_id, action="PRODUCT_DELETE", resource="products",
              status="SUCCESS", ip=client_ip(request), meta={"id": product_id})
    return {"deleted": 1}
