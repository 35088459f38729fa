from .common import SuccessResponse, ErrorResponse, HealthResponse
from .user import UserUpdateRequest, UserRemoveRequest

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "HealthResponse",
    "UserUpdateRequest",
    "UserRemoveRequest",
]
