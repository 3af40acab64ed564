# backend/routes/branches.py
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from models.branch import Branch
from models.profile import Profile, ROLE_SUPERADMIN
from schemas.branch import BranchIn, BranchOut
from utils.audit import client_ip, write_log
from utils.errors import NotFound, ValidationFailed
from utils.tokenJWT import get_current_user, role_required

router = APIRouter(prefix="/branches", tags=["Branches"])

# Branches are shared master data: everyone reads, superadmins write
superadmin_only = role_required(ROLE_SUPERADMIN)


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationFailed("Nama cabang harus diisi")
    return name

def _get_branch(db: Session, branch_id: int) -> Branch:
    branch = db.query(Branch).filter(Branch.id == branch_id).first()
    if not branch:
        raise NotFound("Cabang tidak ditemukan")
    return branch


@router.get("", response_model=List[BranchOut])
def list_branches(db: Session = Depends(get_db), current_user: Profile = Depends(get_current_user)):
    return db.query(Branch).order_by(Branch.name.asc()).all()


@router.post("", response_model=BranchOut, status_code=201)
def create_branch(
    payload: BranchIn,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    branch = Branch(name=_clean_name(payload.name))
    db.add(branch)
    db.commit()
    db.refresh(branch)
    write_log(db, user_id=current_user.id, action="BRANCH_CREATE", resource="branches",
              status="SUCCESS", ip=client_ip(request), meta={"id": branch.id})
    return branch


@router.put("/{branch_id}", response_model=BranchOut)
def update_branch(
    branch_id: int,
    payload: BranchIn,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    branch = _get_branch(db, branch_id)
    branch.name = _clean_name(payload.name)
    db.commit()
    db.refresh(branch)
    write_log(db, user_id=current_user.id, action="BRANCH_UPDATE", resource="branches",
              status="SUCCESS", ip=client_ip(request), meta={"id": branch.id})
    return branch


@router.delete("/{branch_id}")
def delete_branch(
    branch_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    branch = _get_branch(db, branch_id)
    db.delete(branch)
    db.commit()
    write_log(db, user_id=current_user.id, action="BRANCH_DELETE", resource="branches",
              status="SUCCESS", ip=client_ip(request), meta={"id": branch_id})
    return {"message": "Cabang berhasil dihapus"}
