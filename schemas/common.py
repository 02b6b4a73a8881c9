from enum import Enum
from typing import Optional, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# ------------------------------- Base Models ------------------------------- #

class ApiStatus(str, Enum):
    """Standard API response statuses"""
    SUCCESS = "success"
    ERROR = "error"
    VALIDATION_ERROR = "validation_error"
    AUTHENTICATION_ERROR = "authentication_error"
    AUTHORIZATION_ERROR = "authorization_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"

class CamelModel(BaseModel):
    """
    Base for request/response bodies exchanged with the frontend.
    Python attributes stay snake_case; the wire format is camelCase.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class RowModel(BaseModel):
    """Base for table rows returned verbatim (snake_case column names)."""
    model_config = ConfigDict(from_attributes=True)

# ------------------------------- Response Helpers ------------------------------- #

def error_response(
    message: str = "An error occurred",
    status: ApiStatus = ApiStatus.ERROR,
    error_code: Optional[str] = None,
    data: Any = None,
    timestamp: Optional[str] = None
) -> dict:
    """Helper function to create a standardized error response"""
    return {
        "status": status.value,
        "message": message,
        "data": data,
        "error_code": error_code,
        "timestamp": timestamp
    }

class MessageResponse(CamelModel):
    success: bool = True
    message: str
