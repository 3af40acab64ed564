import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from models.log import Log

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "SUCCESS"
STATUS_FAIL = "FAIL"


def write_log(db: Session, *, user_id, action, resource, status=STATUS_SUCCESS, ip=None, meta=None):
    """Persist one audit entry and commit it on its own."""
    if status == STATUS_FAIL:
        logger.warning("%s on %s failed (actor=%s, ip=%s)", action, resource, user_id, ip)
    db.add(Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {}))
    db.commit()


def client_ip(request: Optional[Request]) -> Optional[str]:
    """Caller address as seen by the server (proxies not unwrapped)."""
    if request is None or request.client is None:
        return None
    return request.client.host
