import logging
from typing import Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.models.user import User
from app.features.auth.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from app.features.auth.services.verification_codes import (
    VerificationCodeStore,
    VerificationResult,
    normalize_email,
)
from app.features.auth.utils.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession, code_store: Optional[VerificationCodeStore] = None):
        self.db = db
        self.code_store = code_store

    async def register_user(self, request: RegisterRequest) -> User:
        email = normalize_email(request.email)
        existing = await self.db.execute(
            select(User).where(
                or_(
                    User.username == request.username,
                    User.email == email,
                    User.student_id == request.student_id,
                )
            )
        )
        if existing.scalars().first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username, student ID or email already exists",
            )

        new_user = User(
            username=request.username,
            name=request.name,
            student_id=request.student_id,
            class_name=request.class_name,
            grade=request.grade,
            email=email,
            phone=request.phone,
            password_hash=hash_password(request.password),
            is_admin=False,
            is_super_admin=False,
            is_member=request.is_member,
            points=0,
        )

        try:
            self.db.add(new_user)
            await self.db.commit()
            await self.db.refresh(new_user)
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username, student ID or email already exists",
            )
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Registration failed for {request.username}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to register user",
            )

        logger.info(f"User registered - user: {new_user.id}, username: {new_user.username}")
        return new_user

    async def login_user(self, request: LoginRequest) -> TokenResponse:
        result = await self.db.execute(select(User).where(User.username == request.username))
        user = result.scalar_one_or_none()

        if not user or not verify_password(request.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token = create_access_token(
            data={
                "sub": str(user.id),
                "username": user.username,
                "is_admin": bool(user.is_admin),
                "is_super_admin": bool(user.is_super_admin),
            }
        )

        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            user=UserResponse.model_validate(user),
        )

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def request_password_reset(self, email: str) -> Tuple[Optional[User], Optional[str]]:
        """
        Issue a reset code for a registered email.

        Returns (user, code), or (None, None) when no account uses the email.
        Any code issued earlier for the same email stops working. Sending the
        email is left to the caller.
        """
        user = await self.get_user_by_email(email)
        if not user:
            logger.info(f"Password reset requested for unregistered email: {email}")
            return None, None

        code = self.code_store.generate_code()
        self.code_store.save(email, code)
        logger.info(f"Password reset code issued - user: {user.id}")
        return user, code

    async def confirm_password_reset(
        self, email: str, code: str, new_password: str
    ) -> VerificationResult:
        """
        Check the code and, only on success, replace the stored password hash.
        Any other verification result is returned untouched.
        """
        verification = self.code_store.verify(email, code)
        if not verification.valid:
            logger.warning(
                f"Password reset verification failed - email: {email}, reason: {verification.outcome.value}"
            )
            return verification

        user = await self.get_user_by_email(email)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        user_id = user.id
        user.password_hash = hash_password(new_password)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(f"Password reset failed to persist - user: {user_id}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to reset password",
            )

        logger.info(f"Password reset successful - user: {user_id}")
        return verification
