from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30, description="Username must be 3-30 characters")
    name: str = Field(..., min_length=1, max_length=100)
    student_id: str = Field(..., min_length=1, max_length=50)
    class_name: str = Field(..., min_length=1, max_length=100)
    grade: str = Field(..., min_length=1, max_length=20)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")
    is_member: bool = True

    @field_validator("username", "name", "student_id", "class_name", "grade", "phone", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace before length checks run."""
        return v.strip() if isinstance(v, str) else v

    class Config:
        json_schema_extra = {
            "example": {
                "username": "jdoe",
                "name": "John Doe",
                "student_id": "2024001",
                "class_name": "CS-1",
                "grade": "2024",
                "email": "jdoe@example.com",
                "phone": "13800000000",
                "password": "secret123",
                "is_member": True,
            }
        }


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserResponse(BaseModel):
    id: int
    username: str
    name: str
    student_id: str
    class_name: str
    grade: str
    email: str
    phone: str
    is_admin: bool
    is_super_admin: bool
    is_member: bool
    points: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
