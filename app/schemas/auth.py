"""
Authentication schemas
"""
from typing import Optional
from pydantic import BaseModel, Field

from app.models.enums import UserRole


class LoginRequest(BaseModel):
    """Login request schema"""
    username: str = Field(..., description="Username (email address)")
    password: str = Field(..., description="Password")


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    token_type: str = "bearer"


class CurrentUserOut(BaseModel):
    """Who the bearer token belongs to"""
    id: int
    username: str
    full_name: Optional[str] = None
    role: UserRole
    department_id: Optional[int] = None
    employee_id: Optional[int] = None
