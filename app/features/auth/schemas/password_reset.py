from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address of the account")


class ForgotPasswordResponse(BaseModel):
    # Only populated when EXPOSE_RESET_CODE is enabled outside production
    code: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., pattern=r"^\s*\d{6}\s*$", description="6-digit verification code")
    new_password: str = Field(..., min_length=6, description="New password")
