from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from ..core.exceptions import InvalidUsernameError, RemoteStoreError, UserNotFoundError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    """Envelope shared by every error the API returns"""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "status_code": status_code, **extra}
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return error_response(exc.status_code, exc.detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in exc.errors()]
    logger.warning(f"{request.method} {request.url.path} rejected: {errors}")
    return error_response(422, "Validation error", errors=errors)


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} failed", exc_info=exc)
    return error_response(500, "Internal server error")


def credential_error_to_http(error: Exception) -> HTTPException:
    """Map an error returned by the credential store to an HTTP error"""
    if isinstance(error, InvalidUsernameError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, UserNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, RemoteStoreError):
        return HTTPException(status_code=502, detail=f"Key-value store error: {error}")
    return HTTPException(status_code=500, detail=str(error))
