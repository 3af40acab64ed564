# backend/routes/users.py
from fastapi import APIRouter, Depends, HTTPException, Request
from typing import List
from sqlalchemy.orm import Session

from database import get_db
from models.profile import Profile, ROLE_SUPERADMIN
from routes.auth import EMAIL_TAKEN, find_profile_by_email
from schemas.user import UserCreate, UserResponse
from utils.audit import client_ip, write_log
from utils.errors import ValidationFailed
from utils.hashing import get_password_hash
from utils.tokenJWT import role_required

router = APIRouter(prefix="/users", tags=["Users"])

superadmin_only = role_required(ROLE_SUPERADMIN)


# All profiles, newest first (superadmin only)
@router.get("", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    return db.query(Profile).order_by(Profile.created_at.desc(), Profile.id.desc()).all()


# Create an account with an explicit role (superadmin only)
@router.post("", response_model=UserResponse, status_code=201)
def create_user(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(superadmin_only),
):
    name = payload.name.strip()
    email = payload.email.strip().lower()
    if not name or not email or not payload.password.strip():
        raise ValidationFailed("Nama, email dan password harus diisi")
    if "@" not in email:
        raise ValidationFailed("Format email tidak valid")

    if find_profile_by_email(db, email):
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

    profile = Profile(
        email=email,
        password_hash=get_password_hash(payload.password),
        name=name,
        role=payload.role,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)

    write_log(db, user_id=current_user.id, action="USER_CREATE", resource="users",
              status="SUCCESS", ip=client_ip(request), meta={"id": profile.id, "role": profile.role})
    return profile
