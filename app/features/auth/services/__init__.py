from app.features.auth.services.auth_service import AuthService
from app.features.auth.services.verification_codes import (
    VerificationCodeStore,
    VerificationResult,
    VerifyOutcome,
    generate_code,
    normalize_email,
)

__all__ = [
    "AuthService",
    "VerificationCodeStore",
    "VerificationResult",
    "VerifyOutcome",
    "generate_code",
    "normalize_email",
]
