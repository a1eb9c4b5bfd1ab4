"""Error taxonomy for the ALC ledger

Codes are returned in ``libs.result.Error.code``; ``LedgerError`` subclasses
are raised inside engines and converted to results at the use-case boundary.
"""

from typing import Optional
from libs.result import Error


class ErrorCode:
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    INVALID_CODE = "INVALID_CODE"
    EXPIRED = "EXPIRED"
    USES_EXHAUSTED = "USES_EXHAUSTED"
    ALREADY_USED = "ALREADY_USED"
    STORE_ERROR = "STORE_ERROR"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"

    INVALID_AMOUNT = "INVALID_AMOUNT"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    COUPON_NOT_FOUND = "COUPON_NOT_FOUND"
    DUPLICATE_CODE = "DUPLICATE_CODE"
    IDEMPOTENCY_CONFLICT = "IDEMPOTENCY_CONFLICT"


class LedgerError(Exception):
    code = ErrorCode.STORE_ERROR

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_error(self) -> Error:
        return Error(code=self.code, message=self.message, reason=self.reason)


class InsufficientBalanceError(LedgerError):
    code = ErrorCode.INSUFFICIENT_BALANCE


class InvalidAmountError(LedgerError):
    code = ErrorCode.INVALID_AMOUNT


class NotEligibleError(LedgerError):
    code = ErrorCode.NOT_ELIGIBLE


class QuotaExceededError(LedgerError):
    code = ErrorCode.QUOTA_EXCEEDED


class InvalidCodeError(LedgerError):
    code = ErrorCode.INVALID_CODE


class CouponExpiredError(LedgerError):
    code = ErrorCode.EXPIRED


class UsesExhaustedError(LedgerError):
    code = ErrorCode.USES_EXHAUSTED


class AlreadyUsedError(LedgerError):
    code = ErrorCode.ALREADY_USED


class CouponNotFoundError(LedgerError):
    code = ErrorCode.COUPON_NOT_FOUND


class DuplicateCodeError(LedgerError):
    code = ErrorCode.DUPLICATE_CODE


class IdempotencyConflictError(LedgerError):
    code = ErrorCode.IDEMPOTENCY_CONFLICT


class DuplicateIdempotencyKeyError(IdempotencyConflictError):
    """Raised by the store when another writer already inserted the key"""


class StoreTimeoutError(LedgerError):
    code = ErrorCode.STORE_ERROR


def store_error(exc: Exception, message: str = "Store operation failed") -> Error:
    return Error(code=ErrorCode.STORE_ERROR, message=message, reason=str(exc) or type(exc).__name__)
