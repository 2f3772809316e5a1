"""
Application error taxonomy - each error maps to one HTTP status
"""

from enum import Enum
from typing import Optional


class SagaOutcome(str, Enum):
    """Result tag of a dual-write saga"""
    SUCCESS = "SUCCESS"
    COMPENSATED_FAILURE = "COMPENSATED_FAILURE"      # failed, stores consistent again
    UNCOMPENSATED_FAILURE = "UNCOMPENSATED_FAILURE"  # failed dirty, needs manual reconciliation


class LookupApiError(Exception):
    """Base class for errors that carry their own HTTP status"""
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LookupApiError):
    http_status = 400


class BadRequestError(ValidationError):
    pass


class UnauthorizedError(LookupApiError):
    http_status = 401


class ForbiddenError(LookupApiError):
    http_status = 403

    def __init__(self, message: str = "You are not allowed to perform this action!"):
        super().__init__(message)


class NotFoundError(LookupApiError):
    http_status = 404


class ConflictError(LookupApiError):
    http_status = 409


class TransactionFailureError(LookupApiError):
    """Dual-write saga failure; ``cause`` is the step error, ``rollback_error`` set when compensation failed"""
    http_status = 500

    def __init__(
        self,
        message: str,
        outcome: SagaOutcome = SagaOutcome.COMPENSATED_FAILURE,
        cause: Optional[BaseException] = None,
        rollback_error: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.outcome = outcome
        self.cause = cause
        self.rollback_error = rollback_error


class ServiceUnavailableError(LookupApiError):
    http_status = 503


class InternalServerError(LookupApiError):
    http_status = 500


def not_found(model_name: str, record_id: str) -> NotFoundError:
    return NotFoundError(f"{model_name} with id: {record_id} doesn't exist")
