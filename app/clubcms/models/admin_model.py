from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime, timezone
from clubcms.database import Base


class AdminAccount(Base):
    __tablename__ = "admin_accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    hashed_secret = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="admin")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
