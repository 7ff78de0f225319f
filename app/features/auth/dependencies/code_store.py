from fastapi import Request

from app.features.auth.services.verification_codes import VerificationCodeStore


def get_code_store(request: Request) -> VerificationCodeStore:
    """The reset code store owned by the running application (see app.main.lifespan)."""
    return request.app.state.code_store
