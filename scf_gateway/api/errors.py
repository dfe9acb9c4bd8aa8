"""Translate domain exceptions into HTTP errors"""

import logging

from fastapi import HTTPException

from scf_gateway.domain.exceptions import (
    AlreadyPaid,
    DomainException,
    DuplicateParticipant,
    InvalidState,
    NotFound,
    UnknownParticipant,
)
from scf_gateway.infrastructure.observability.metrics import record_operation

STATUS_BY_ERROR = {
    NotFound: 404,
    UnknownParticipant: 404,
    DuplicateParticipant: 409,
    InvalidState: 409,
    AlreadyPaid: 409,
}


def to_http_exception(error: DomainException, operation: str, request_id: str) -> HTTPException:
    """Everything not listed is a validation failure (422); error class goes in X-Error-Code"""
    status_code = STATUS_BY_ERROR.get(type(error), 422)
    record_operation(operation, ok=False)
    logging.warning(
        f"{operation} rejected: {error}",
        extra={"request_id": request_id, "operation": operation, "error": type(error).__name__},
    )
    return HTTPException(
        status_code=status_code,
        detail=str(error),
        headers={"X-Error-Code": type(error).__name__},
    )
