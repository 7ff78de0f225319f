"""
In-memory store for password reset verification codes.

Codes are keyed by normalized email, expire after a fixed TTL and allow a
limited number of verification attempts. Nothing is persisted: restarting the
process drops every outstanding code and users have to request a new one.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

CODE_TTL = timedelta(minutes=15)
MAX_ATTEMPTS = 5

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_code() -> str:
    """Generate a 6-digit code, uniform over 100000-999999."""
    return str(100000 + secrets.randbelow(900000))


class VerifyOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    EXPIRED = "EXPIRED"
    ATTEMPTS_EXHAUSTED = "ATTEMPTS_EXHAUSTED"
    MISMATCH = "MISMATCH"


@dataclass
class VerificationCodeEntry:
    email: str
    code: str
    expires_at: datetime
    attempts: int = 0


@dataclass(frozen=True)
class VerificationResult:
    outcome: VerifyOutcome
    message: Optional[str] = None
    remaining: Optional[int] = None

    @property
    def valid(self) -> bool:
        return self.outcome is VerifyOutcome.SUCCESS


class VerificationCodeStore:
    def __init__(
        self,
        ttl: timedelta = CODE_TTL,
        max_attempts: int = MAX_ATTEMPTS,
        clock: Clock = utcnow,
    ) -> None:
        self._ttl = ttl
        self._max_attempts = max_attempts
        self._clock = clock
        self._entries: Dict[str, VerificationCodeEntry] = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def __len__(self) -> int:
        return len(self._entries)

    def generate_code(self) -> str:
        return generate_code()

    def save(self, email: str, code: str) -> None:
        """Store a code for the email, replacing any code issued before."""
        key = normalize_email(email)
        self._entries[key] = VerificationCodeEntry(
            email=key,
            code=code,
            expires_at=self._clock() + self._ttl,
        )

    def verify(self, email: str, code: str) -> VerificationResult:
        """
        Check a submitted code.

        Checks run in a fixed order: existence, expiry, attempt limit, then
        the attempt is recorded and the code compared. The attempt limit is
        evaluated against earlier calls only, so exactly max_attempts
        comparisons are allowed and the next call fails without comparing.
        """
        key = normalize_email(email)
        entry = self._entries.get(key)

        if entry is None:
            return VerificationResult(
                VerifyOutcome.NOT_FOUND, "code does not exist or has expired."
            )

        if self._clock() > entry.expires_at:
            del self._entries[key]
            return VerificationResult(
                VerifyOutcome.EXPIRED, "code has expired, request a new one."
            )

        if entry.attempts >= self._max_attempts:
            del self._entries[key]
            logger.warning(f"Reset code attempts exhausted for {key}")
            return VerificationResult(
                VerifyOutcome.ATTEMPTS_EXHAUSTED, "too many attempts, request a new one."
            )

        entry.attempts += 1

        if entry.code != code:
            remaining = self._max_attempts - entry.attempts
            return VerificationResult(
                VerifyOutcome.MISMATCH,
                f"incorrect code, {remaining} attempts remaining.",
                remaining=remaining,
            )

        del self._entries[key]
        return VerificationResult(VerifyOutcome.SUCCESS)

    def sweep(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)
