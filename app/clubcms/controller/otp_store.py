"""
Keyed OTP storage.

The auth service receives one of these at construction time. All backings
share the same contract: ``put`` overwrites any entry for the email, ``get``
returns the entry (expired or not) and ``delete`` consumes it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Protocol

import redis

from clubcms.models.otp_records_model import OTPRecord


@dataclass(frozen=True)
class OtpEntry:
    email: str
    code: str
    expires_at: datetime  # aware, UTC


class OtpStore(Protocol):
    def put(self, entry: OtpEntry) -> None:
        ...

    def get(self, email: str) -> Optional[OtpEntry]:
        ...

    def delete(self, email: str) -> None:
        ...


@dataclass
class InMemoryOtpStore:
    """Process-lifetime map, suitable for a single instance."""

    entries: Dict[str, OtpEntry] = field(default_factory=dict)

    def put(self, entry: OtpEntry) -> None:
        self.entries[entry.email] = entry

    def get(self, email: str) -> Optional[OtpEntry]:
        return self.entries.get(email)

    def delete(self, email: str) -> None:
        self.entries.pop(email, None)


class DatabaseOtpStore:
    """Keeps entries in the ``otp_records`` table."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def put(self, entry: OtpEntry) -> None:
        db = self.session_factory()
        try:
            record = db.query(OTPRecord).filter(OTPRecord.email == entry.email).first()
            expires_at = entry.expires_at.astimezone(timezone.utc).replace(tzinfo=None)
            if record:
                record.otp = entry.code
                record.expires_at = expires_at
            else:
                db.add(OTPRecord(email=entry.email, otp=entry.code, expires_at=expires_at))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def get(self, email: str) -> Optional[OtpEntry]:
        db = self.session_factory()
        try:
            record = db.query(OTPRecord).filter(OTPRecord.email == email).first()
            if not record:
                return None
            return OtpEntry(
                email=record.email,
                code=record.otp,
                expires_at=record.expires_at.replace(tzinfo=timezone.utc),
            )
        finally:
            db.close()

    def delete(self, email: str) -> None:
        db = self.session_factory()
        try:
            db.query(OTPRecord).filter(OTPRecord.email == email).delete()
            db.commit()
        finally:
            db.close()


class RedisOtpStore:
    """Redis-backed store for deployments running more than one instance."""

    def __init__(
        self,
        url: str | None = None,
        *,
        key_prefix: str = "clubcms:otp:",
        client=None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.key_prefix = key_prefix
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.client = client if client is not None else redis.Redis.from_url(url)

    def _key(self, email: str) -> str:
        return f"{self.key_prefix}{email}"

    def put(self, entry: OtpEntry) -> None:
        payload = json.dumps({"code": entry.code, "expires_at": entry.expires_at.isoformat()})
        ttl = int((entry.expires_at - self.clock()).total_seconds())
        # Keep stale entries around a little; expiry is decided by the service.
        self.client.set(self._key(entry.email), payload, ex=max(ttl, 0) + 60)

    def get(self, email: str) -> Optional[OtpEntry]:
        raw = self.client.get(self._key(email))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
        return OtpEntry(
            email=email,
            code=data["code"],
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )

    def delete(self, email: str) -> None:
        self.client.delete(self._key(email))
