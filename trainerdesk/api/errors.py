"""
Translation of domain errors into HTTP responses.

The core raises TrainerDeskError subclasses and repositories raise
NotFoundError subclasses; routes funnel both through `to_http_error`
so every endpoint answers the same failure with the same status code.
"""

import logging
from typing import Union

from fastapi import HTTPException, status

from ..core.errors import (
    InvalidAmount,
    InvalidBillingCycle,
    InvalidDate,
    InvalidFormat,
    InvalidSchedule,
    MissingSelection,
    TrainerDeskError,
)
from ..infrastructure.repository import NotFoundError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type, int] = {
    InvalidDate: status.HTTP_400_BAD_REQUEST,
    InvalidFormat: status.HTTP_400_BAD_REQUEST,
    InvalidAmount: status.HTTP_400_BAD_REQUEST,
    InvalidSchedule: status.HTTP_400_BAD_REQUEST,
    MissingSelection: status.HTTP_400_BAD_REQUEST,
    InvalidBillingCycle: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def to_http_error(error: Union[TrainerDeskError, NotFoundError]) -> HTTPException:
    """Map a domain or lookup error to the HTTPException a route should raise."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))

    if isinstance(error, InvalidBillingCycle):
        logger.error("Billing cycle out of bounds", extra={"error": str(error)})

    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR.items() if isinstance(error, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    return HTTPException(status_code=status_code, detail=str(error))
