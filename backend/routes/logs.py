# backend/routes/logs.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.profile import Profile, ROLE_SUPERADMIN
from routes.reports import parse_date_bound
from schemas.log import LogPage
from utils.tokenJWT import role_required

router = APIRouter(prefix="/logs", tags=["Logs"])


# Audit trail, newest first (superadmin only)
@router.get("", response_model=LogPage)
def list_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Substring of the action, e.g. STOCK_IN"),
    user_id: Optional[int] = Query(None),
    resource: Optional[str] = Query(None),
    status: Optional[str] = Query(None, description="SUCCESS / FAIL"),
    date_from: Optional[str] = Query(None, description="YYYY-MM-DD or ISO datetime"),
    date_to: Optional[str] = Query(None, description="YYYY-MM-DD or ISO datetime"),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(role_required(ROLE_SUPERADMIN)),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action.ilike(f"%{action}%"))
    if user_id is not None:
        query = query.filter(Log.user_id == user_id)
    if resource:
        query = query.filter(Log.resource.ilike(f"%{resource}%"))
    if status:
        query = query.filter(Log.status == status.upper())

    # Same bounds as the stock reports; a malformed date is a 400
    fdt = parse_date_bound(date_from)
    tdt = parse_date_bound(date_to, end=True)
    if fdt:
        query = query.filter(Log.ts >= fdt)
    if tdt:
        query = query.filter(Log.ts <= tdt)

    total = query.count()
    rows = (query.order_by(Log.ts.desc(), Log.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all())

    return {"items": rows, "total": total, "page": page, "page_size": page_size}
