from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime, timezone
from clubcms.database import Base


class OTPRecord(Base):
    __tablename__ = "otp_records"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)

    otp = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)  # naive UTC
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
