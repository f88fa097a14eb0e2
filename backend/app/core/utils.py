"""
Utility functions for the application.
"""
from typing import Any, Dict
from fastapi import HTTPException, status
from app.services.exceptions import (
    CurrencyMismatchError, DuplicateParticipantError, ExpenseNotFoundError,
    OwnerRemovalError, ParticipantInUseError, ParticipantNotFoundError,
    SelfSettlementError, SettlementEngineError, SplitValidationError,
    TripNotFoundError, UnbalancedLedgerError
)

ERROR_STATUS = {
    TripNotFoundError: status.HTTP_404_NOT_FOUND,
    ParticipantNotFoundError: status.HTTP_404_NOT_FOUND,
    ExpenseNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateParticipantError: status.HTTP_409_CONFLICT,
    OwnerRemovalError: status.HTTP_409_CONFLICT,
    ParticipantInUseError: status.HTTP_409_CONFLICT,
    UnbalancedLedgerError: status.HTTP_409_CONFLICT,
    SplitValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    CurrencyMismatchError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    SelfSettlementError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response


def to_http_exception(exc: SettlementEngineError) -> HTTPException:
    """Map an engine error to the HTTP error shown to the client."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_type, code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code = code
            break

    if isinstance(exc, UnbalancedLedgerError):
        message = "Couldn't calculate settlement, please refresh"
    else:
        message = str(exc)
    return HTTPException(status_code=status_code, detail=format_error(message, exc.to_detail()))
