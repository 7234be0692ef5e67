"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from app.schemas.common import StandardResponse, ErrorResponse
from app.services.errors import OperationResult

# HTTP status for each seating rejection; anything unlisted is a 400
ERROR_STATUS = {
    "TableNotFound": status.HTTP_404_NOT_FOUND,
    "AssignmentNotFound": status.HTTP_404_NOT_FOUND,
    "GuestNotFound": status.HTTP_404_NOT_FOUND,
    "SeatOccupied": status.HTTP_409_CONFLICT,
    "PersonAlreadySeated": status.HTTP_409_CONFLICT,
}

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=jsonable_encoder(response),
        status_code=status_code
    )

def result_response(result: OperationResult, status_code: int = 200) -> JSONResponse:
    """Turn an engine result into the standard envelope"""
    if result.success:
        return success_response(message=result.message, data=result.data, status_code=status_code)
    return error_response(
        message=result.message,
        error_code=result.error_code,
        status_code=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST)
    )
