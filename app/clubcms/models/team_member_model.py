from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON
from datetime import datetime, timezone
from clubcms.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    # NULLs do not collide, so the ID number stays optional.
    id_number = Column(String, nullable=True, unique=True)
    photo = Column(JSON, nullable=False)      # {"kind": "upload"|"url"|"import", "value": str}
    position = Column(String, nullable=False)
    academic_year = Column(String, nullable=False)
    display_order = Column(Integer, nullable=False, default=99)
    linkedin_id = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    is_phone_number_public = Column(Boolean, nullable=False, default=False)
    telegram_link = Column(String, nullable=True)
    is_telegram_link_public = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "idNumber": self.id_number,
            "photo": self.photo,
            "position": self.position,
            "academicYear": self.academic_year,
            "displayOrder": self.display_order,
            "linkedinId": self.linkedin_id,
            "phoneNumber": self.phone_number,
            "isPhoneNumberPublic": self.is_phone_number_public,
            "telegramLink": self.telegram_link,
            "isTelegramLinkPublic": self.is_telegram_link_public,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
