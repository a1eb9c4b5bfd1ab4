"""HTTP error rendering

Use cases return ``libs.result.Error``; routes raise ``ClientError`` with it
and the handlers below render ``{"error": {...}}``.
"""

import logging
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error
from src.app.errors import ErrorCode

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"

ERROR_STATUS = {
    ErrorCode.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INSUFFICIENT_BALANCE: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.INVALID_CODE: status.HTTP_404_NOT_FOUND,
    ErrorCode.COUPON_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ALREADY_USED: status.HTTP_409_CONFLICT,
    ErrorCode.USES_EXHAUSTED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_CODE: status.HTTP_409_CONFLICT,
    ErrorCode.IDEMPOTENCY_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.EXPIRED: status.HTTP_410_GONE,
    ErrorCode.NOT_ELIGIBLE: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.QUOTA_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.PARTIAL_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.STORE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(code: str) -> int:
    return ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST)


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_for(error.code)


def error_body(error: Error) -> dict:
    return {"error": error.model_dump(exclude_none=True)}


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error.code}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.error))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    error = Error(
        code=VALIDATION_ERROR,
        message="Invalid request parameters",
        reason=f"{'.'.join(str(p) for p in first.get('loc', []))}: {first.get('msg', '')}",
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(error))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
