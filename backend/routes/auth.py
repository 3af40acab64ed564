# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.profile import Profile, ROLE_USER
from schemas import user as schemas
from utils.audit import client_ip, write_log
from utils.errors import AuthenticationFailed
from utils.hashing import get_password_hash, verify_password
from utils.rate_limit import limiter
from utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(tags=["Auth"])

EMAIL_TAKEN = "Email sudah terdaftar"


def find_profile_by_email(db: Session, email: str):
    return db.query(Profile).filter(func.lower(Profile.email) == email.strip().lower()).first()


# Self sign-up, always as a standard user
@router.post("/register", response_model=schemas.UserResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
def register(request: Request, payload: schemas.UserRegister, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()

    if find_profile_by_email(db, normalized_email):
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": normalized_email, "reason": "Email exists"})
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

    profile = Profile(
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        name=payload.name.strip(),
        role=ROLE_USER,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)

    write_log(db, user_id=profile.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": profile.email})
    return profile


# Authenticate and issue a JWT token
@router.post("/login", response_model=schemas.Token)
@limiter.limit(settings.RATE_LIMIT_AUTH)
def login(request: Request, payload: schemas.UserLogin, db: Session = Depends(get_db)):
    profile = find_profile_by_email(db, payload.email)

    if not profile or not verify_password(payload.password, profile.password_hash):
        write_log(db, user_id=(profile.id if profile else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": payload.email})
        raise AuthenticationFailed()

    access_token = create_access_token(data={"sub": profile.email, "role": profile.role})

    write_log(db, user_id=profile.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": profile.email})

    return {"access_token": access_token, "token_type": "bearer"}


# Tokens are stateless; signing out only records the event
@router.post("/logout")
def logout(request: Request, db: Session = Depends(get_db), current_user: Profile = Depends(get_current_user)):
    write_log(db, user_id=current_user.id, action="LOGOUT", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": current_user.email})
    return {"message": "Berhasil keluar"}


# Current actor details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: Profile = Depends(get_current_user)):
    return current_user
