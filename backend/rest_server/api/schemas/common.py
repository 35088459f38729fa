from pydantic import BaseModel, ConfigDict
from typing import Optional, TypeVar, Generic

T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """Standard success response"""
    success: bool = True
    message: str = "Operation completed successfully"
    data: Optional[T] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "success": True,
            "message": "update successfully",
            "data": {"username": "alice"}
        }
    })


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    message: str
    status_code: int


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    service: str = "rest-server"
    version: str = "0.1.0"
    timestamp: str
    etcd: str = "connected"
    bootstrap: str

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "status": "healthy",
            "service": "rest-server",
            "version": "0.1.0",
            "timestamp": "2024-01-01T12:00:00Z",
            "etcd": "connected",
            "bootstrap": "ready"
        }
    })
