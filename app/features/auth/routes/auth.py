from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.dependencies.code_store import get_code_store
from app.features.auth.models.user import User
from app.features.auth.schemas import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from app.features.auth.services.auth_service import AuthService
from app.features.auth.services.verification_codes import VerificationCodeStore, VerifyOutcome
from app.features.auth.utils.emailer import send_password_reset_code
from app.features.auth.utils.security import decode_access_token
from app.platform.config import settings
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/auth", tags=["Authentication"])
security = HTTPBearer(auto_error=False)

FORGOT_PASSWORD_MESSAGE = "If the email is registered, a verification code has been sent"


@router.post(
    "/register",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    auth_service = AuthService(db)
    await auth_service.register_user(request)
    return api_response(
        message="Registration successful",
        status_code=status.HTTP_201_CREATED,
    )


@router.post(
    "/login",
    response_model=dict,
    status_code=status.HTTP_200_OK,
    summary="Login user",
    description="Authenticate with username and password",
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    auth_service = AuthService(db)
    token_response = await auth_service.login_user(request)
    return api_response(
        data=token_response,
        message="Login successful",
        status_code=status.HTTP_200_OK,
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth_service = AuthService(db)
    user = await auth_service.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.get("/me", response_model=dict, summary="Current user")
async def me(user: User = Depends(get_current_user)):
    return api_response(
        data=UserResponse.model_validate(user),
        message="Current user retrieved",
    )


@router.post(
    "/forgot-password",
    response_model=dict,
    summary="Request a password reset code",
    description="Emails a 6-digit code. The response does not reveal whether the email is registered.",
)
async def forgot_password(
    request: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    code_store: VerificationCodeStore = Depends(get_code_store),
):
    auth_service = AuthService(db, code_store)
    user, code = await auth_service.request_password_reset(request.email)

    data = None
    if user is not None:
        background_tasks.add_task(send_password_reset_code, user.email, user.name, code)
        if settings.expose_reset_code:
            data = ForgotPasswordResponse(code=code)

    return api_response(
        data=data,
        message=FORGOT_PASSWORD_MESSAGE,
        status_code=status.HTTP_200_OK,
    )


@router.post(
    "/reset-password",
    response_model=dict,
    summary="Reset password with a verification code",
)
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    code_store: VerificationCodeStore = Depends(get_code_store),
):
    auth_service = AuthService(db, code_store)
    result = await auth_service.confirm_password_reset(
        request.email, request.code.strip(), request.new_password
    )

    if not result.valid:
        data = {"reason": result.outcome.value}
        if result.outcome is VerifyOutcome.MISMATCH:
            data["remaining_attempts"] = result.remaining
        return api_response(
            data=data,
            message=result.message,
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return api_response(
        message="Password reset successful, please log in with your new password",
        status_code=status.HTTP_200_OK,
    )
