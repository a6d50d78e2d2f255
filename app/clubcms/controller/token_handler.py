from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from clubcms.exceptions import InvalidOrExpiredToken, MalformedToken, MissingToken

_JWT_ALG = "HS256"
TOKEN_EXPIRE_MINUTES = 60


@dataclass(frozen=True)
class TokenClaim:
    identity_id: Optional[str]
    role: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.identity_id, "role": self.role}


def mint(
    claim: TokenClaim,
    *,
    secret: str,
    expires_minutes: int = TOKEN_EXPIRE_MINUTES,
    now: datetime | None = None,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(minutes=max(1, int(expires_minutes)))

    payload: Dict[str, Any] = {
        "user": claim.to_dict(),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def verify(token: str, *, secret: str) -> TokenClaim:
    if not token:
        raise MissingToken()
    if not secret:
        raise ValueError("jwt_secret_blank")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[_JWT_ALG],
            options={"require": ["exp", "iat"]},
        )
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass.
        raise InvalidOrExpiredToken()

    user = payload.get("user")
    if not isinstance(user, dict):
        # Signed but carries no identity; the role gate rejects it.
        return TokenClaim(identity_id=None, role=None)
    identity_id = user.get("id")
    return TokenClaim(
        identity_id=str(identity_id) if identity_id is not None else None,
        role=user.get("role"),
    )


def read_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        raise MissingToken()
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise MalformedToken()
    return parts[1]
