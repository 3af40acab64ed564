from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from config import settings


def get_client_ip(request: Request) -> str:
    # First address of X-Forwarded-For when running behind a proxy
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


# In-memory storage, one process
limiter = Limiter(key_func=get_client_ip, enabled=settings.RATE_LIMIT_ENABLED)
