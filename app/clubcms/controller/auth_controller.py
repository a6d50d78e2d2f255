"""
Admin login: OTP issuance/verification and the role gate.
"""

from __future__ import annotations

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from clubcms.controller.otp_handler import Mailer, generate_otp, otp_email_body
from clubcms.controller.otp_store import OtpEntry, OtpStore
from clubcms.controller.token_handler import TokenClaim
from clubcms.cryptography import verify_secret
from clubcms.exceptions import (
    InvalidCredentials,
    InvalidEmail,
    InvalidOrExpiredOtp,
    NoIdentityContext,
    RoleNotAllowed,
)
from clubcms.models.admin_model import AdminAccount

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
PLACEHOLDER_IDENTITY = "admin_id_placeholder"
OTP_EXPIRE_MINUTES = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OtpService:
    def __init__(
        self,
        *,
        store: OtpStore,
        mailer: Mailer,
        session_factory,
        admin_email: Optional[str],
        admin_secret_hash: Optional[str],
        club_name: str = "Club",
        expire_minutes: int = OTP_EXPIRE_MINUTES,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.mailer = mailer
        self.session_factory = session_factory
        self.admin_email = admin_email
        self.admin_secret_hash = admin_secret_hash
        self.club_name = club_name
        self.expire_minutes = expire_minutes
        self.clock = clock

    def _check_email(self, email: Optional[str]) -> str:
        if not self.admin_email or not email or email != self.admin_email:
            raise InvalidEmail()
        return email

    # ------------------ Issue OTP ------------------
    async def issue(self, email: Optional[str], submitted_secret: Optional[str]) -> None:
        email = self._check_email(email)
        if not verify_secret(submitted_secret, self.admin_secret_hash):
            logger.warning("Rejected OTP request with a wrong admin secret")
            raise InvalidCredentials()

        code = generate_otp()
        expires_at = self.clock() + timedelta(minutes=self.expire_minutes)
        # Overwrites any earlier code for this email.
        self.store.put(OtpEntry(email=email, code=code, expires_at=expires_at))

        await self.mailer.send(
            email,
            f"Your {self.club_name} Admin Login OTP",
            otp_email_body(code, self.club_name, self.expire_minutes),
        )
        logger.info("OTP sent to admin email")

    # ------------------ Verify OTP ------------------
    def verify(self, email: Optional[str], submitted_code: Optional[str]) -> TokenClaim:
        email = self._check_email(email)
        entry = self.store.get(email)
        if (
            entry is None
            or not submitted_code
            or not hmac.compare_digest(entry.code.encode(), str(submitted_code).encode())
            or self.clock() > entry.expires_at
        ):
            raise InvalidOrExpiredOtp()

        # Single use.
        self.store.delete(email)
        return TokenClaim(identity_id=self._lookup_identity(email), role=ADMIN_ROLE)

    def _lookup_identity(self, email: str) -> str:
        db = self.session_factory()
        try:
            account = (
                db.query(AdminAccount)
                .filter(AdminAccount.email == email, AdminAccount.role == ADMIN_ROLE)
                .first()
            )
        finally:
            db.close()
        if account is None:
            logger.warning("Admin account %s not found in DB. Using placeholder identity.", email)
            return PLACEHOLDER_IDENTITY
        return str(account.id)


# ------------------ Role gate ------------------
def authorize(claim: Optional[TokenClaim], allowed_roles: Iterable[str]) -> None:
    if claim is None or not claim.role:
        raise NoIdentityContext()
    allowed = list(allowed_roles)
    if claim.role not in allowed:
        raise RoleNotAllowed(
            f"Access denied: Requires one of the following roles: {', '.join(allowed)}"
        )
