from app.features.auth.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from app.features.auth.schemas.password_reset import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    ResetPasswordRequest,
)

__all__ = [
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "LoginRequest",
    "RegisterRequest",
    "ResetPasswordRequest",
    "TokenResponse",
    "UserResponse",
]
