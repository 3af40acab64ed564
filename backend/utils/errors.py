"""Error taxonomy and the handlers that turn failures into user-facing messages.

Every failure reaching the API boundary ends up as one of the classes below
and is answered with ``{"detail": <localized message>}``. Nothing is retried
or queued; the failure is logged and the request ends.
"""
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)

MSG_CONNECTION = "Koneksi ke server gagal. Periksa koneksi internet Anda atau coba lagi nanti."
MSG_AUTHENTICATION = "Email atau password salah"
MSG_PERMISSION = "Anda tidak memiliki izin untuk melakukan tindakan ini"
MSG_RATE_LIMIT = "Terlalu banyak permintaan. Silakan coba lagi nanti"
MSG_NOT_FOUND = "Data tidak ditemukan"
MSG_GENERIC = "Terjadi kesalahan. Silakan coba lagi"


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = MSG_GENERIC

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.message, headers=headers)


class ConnectionFailed(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = MSG_CONNECTION


class AuthenticationFailed(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = MSG_AUTHENTICATION


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = MSG_PERMISSION


class RateLimited(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = MSG_RATE_LIMIT


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = MSG_NOT_FOUND


class ValidationFailed(AppError):
    """Input rejected before anything was written."""
    status_code = status.HTTP_400_BAD_REQUEST


def classify_error(exc: BaseException, custom_message: Optional[str] = None) -> HTTPException:
    """Map any exception onto the taxonomy.

    ``custom_message`` replaces the generic fallback text only; classified
    errors keep their own message.
    """
    if isinstance(exc, HTTPException):
        return exc

    text = str(exc) or ""
    code = str(getattr(exc, "code", "") or "")

    if isinstance(exc, (OperationalError, DisconnectionError, PoolTimeoutError, ConnectionError)) \
            or "net::ERR" in text or "NetworkError" in text:
        return ConnectionFailed()
    if "Invalid login credentials" in text:
        return AuthenticationFailed()
    if code == "PGRST301" or "permission denied" in text:
        return PermissionDenied()
    if code == "429" or "Too many requests" in text:
        return RateLimited()
    return AppError(custom_message)


async def _app_error_handler(request: Request, exc: AppError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    error = classify_error(exc)
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


async def _rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded on %s (%s)", request.url.path, exc.detail)
    return JSONResponse(
        status_code=RateLimited.status_code,
        content={"detail": MSG_RATE_LIMIT},
        headers={"Retry-After": "60"},
    )


async def _unhandled_error_handler(request: Request, exc: Exception):
    error = classify_error(exc)
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
