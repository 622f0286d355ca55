"""Conversion des erreurs métier en réponses HTTP (un message par erreur)"""
from fastapi import HTTPException, status

from app.core.errors import (
    BookingError, InvalidTransition, NotEditable, PermissionDenied,
    StoreUnavailable, SubmissionError
)


def booking_http_error(error: BookingError) -> HTTPException:
    """Statut HTTP correspondant à une erreur métier"""
    if isinstance(error, SubmissionError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"code": error.code.value, "message": error.message}
        )
    if isinstance(error, PermissionDenied):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.message)
    if isinstance(error, (InvalidTransition, NotEditable)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.message)
    if isinstance(error, StoreUnavailable):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=error.message)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
