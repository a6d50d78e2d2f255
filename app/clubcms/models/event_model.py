from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from datetime import datetime, timezone
from clubcms.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=False, default="")
    speakers = Column(JSON, nullable=False)   # [{"name": str, "id": int}, ...]
    poster = Column(JSON, nullable=False)     # {"kind": "upload"|"url", "value": str}
    report_link = Column(String, nullable=True)
    academic_year = Column(String(10), nullable=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "eventName": self.name,
            "eventDate": self.date,
            "description": self.description,
            "speakers": self.speakers,
            "poster": self.poster,
            "reportLink": self.report_link,
            "academicYear": self.academic_year,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
