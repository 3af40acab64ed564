# backend/routes/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.category import InboundCategory, OutboundCategory
from models.profile import Profile, ROLE_SUPERADMIN
from schemas.category import InboundCategoryIn, InboundCategoryOut, OutboundCategoryIn, OutboundCategoryOut
from utils.audit import client_ip, write_log
from utils.errors import NotFound, ValidationFailed
from utils.tokenJWT import get_current_user, role_required

router = APIRouter(tags=["Categories"])

superadmin_only = role_required(ROLE_SUPERADMIN)


def _get_outbound(db: Session, category_id: int) -> OutboundCategory:
    category = db.query(OutboundCategory).filter(OutboundCategory.id == category_id).first()
    if not category:
        raise NotFound("Jenis stok keluar tidak ditemukan")
    return category

def _apply_outbound(category: OutboundCategory, payload: OutboundCategoryIn) -> None:
    name = (payload.name or "").strip()
    if not name:
        raise ValidationFailed("Nama jenis harus diisi")
    category.name = name
    category.description = (payload.description or "").strip() or None


# =========================
# JENIS STOK KELUAR
# =========================
@router.get("/outbound-categories", response_model=List[OutboundCategoryOut])
def list_outbound_categories(db: Session = Depends(get_db), current_user: Profile = Depends(get_current_user)):
    return db.query(OutboundCategory).order_by(OutboundCategory.name.asc()).all()


@router.post("/outbound-categories", response_model=OutboundCategoryOut, status_code=201)
def create_outbound_category(
    payload: OutboundCategoryIn,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    category = OutboundCategory()
    _apply_outbound(category, payload)
    db.add(category)
    db.commit()
    db.refresh(category)
    write_log(db, user_id=current_user.id, action="OUTBOUND_CATEGORY_CREATE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"id": category.id})
    return category


@router.put("/outbound-categories/{category_id}", response_model=OutboundCategoryOut)
def update_outbound_category(
    category_id: int,
    payload: OutboundCategoryIn,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    category = _get_outbound(db, category_id)
    _apply_outbound(category, payload)
    db.commit()
    db.refresh(category)
    write_log(db, user_id=current_user.id, action="OUTBOUND_CATEGORY_UPDATE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"id": category.id})
    return category


@router.delete("/outbound-categories/{category_id}")
def delete_outbound_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    category = _get_outbound(db, category_id)
    db.delete(category)
    db.commit()
    write_log(db, user_id=current_user.id, action="OUTBOUND_CATEGORY_DELETE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"id": category_id})
    return {"message": "Jenis stok keluar berhasil dihapus"}


# =========================
# JENIS STOK MASUK
# =========================
@router.get("/inbound-categories", response_model=List[InboundCategoryOut])
def list_inbound_categories(db: Session = Depends(get_db), current_user: Profile = Depends(get_current_user)):
    return db.query(InboundCategory).order_by(InboundCategory.name.asc()).all()


@router.post("/inbound-categories", response_model=InboundCategoryOut, status_code=201)
def create_inbound_category(
    payload: InboundCategoryIn,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    code = (payload.code or "").strip().upper().replace(" ", "_")
    name = (payload.name or "").strip()
    if not code or not name:
        raise ValidationFailed("Kode dan nama jenis harus diisi")
    if db.query(InboundCategory).filter(InboundCategory.code == code).first():
        raise HTTPException(status_code=400, detail="Kode jenis sudah digunakan")

    category = InboundCategory(code=code, name=name)
    db.add(category)
    db.commit()
    db.refresh(category)
    write_log(db, user_id=current_user.id, action="INBOUND_CATEGORY_CREATE", resource="categories",
              status="SUCCESS", ip=client_ip(request), meta={"id": category.id, "code": code})
    return category
