from pydantic import BaseModel, Field, field_validator
from typing import Optional


class UserUpdateRequest(BaseModel):
    """Request model for creating or updating a user"""
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6, description="Plain password, only its derived hash is stored")
    admin: Optional[bool] = Field(None, description="Admin flag, left untouched when omitted")
    modify: bool = Field(False, description="Update an existing user instead of creating one")

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return v.strip()


class UserRemoveRequest(BaseModel):
    """Request model for removing a user"""
    username: str = Field(..., min_length=1, max_length=64)
