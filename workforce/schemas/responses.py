"""Response bodies shared by several routers."""

from fastapi import status
from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class SuccessResponse(MessageResponse):
    """Acknowledgement for deletes and membership changes."""

    success: bool = True
    message: str = "Operation completed successfully"


class ErrorResponse(BaseModel):
    """Body of every rejected request: domain errors, auth failures, missing records."""

    detail: str


# Documented on every /api router; validation failures keep FastAPI's own 422 schema.
ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Rejected by a business rule"},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse, "description": "Missing or invalid token"},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse, "description": "Role not allowed"},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Record not found"},
}
