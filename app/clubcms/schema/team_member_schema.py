import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from clubcms.schema.image_schema import ImageField

PHONE_PATTERN = re.compile(r"^\+?[0-9]{10,15}$")
DEFAULT_DISPLAY_ORDER = 99


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def parse_display_order(value) -> int:
    # Lower numbers are listed first; junk falls back to the end of the list.
    try:
        return int(value)
    except (TypeError, ValueError):
        return DEFAULT_DISPLAY_ORDER


def _required(v, message):
    if v is None or not str(v).strip():
        raise ValueError(message)
    return str(v).strip()


def _optional(v):
    if v is None:
        return None
    v = str(v).strip()
    return v or None


class TeamMemberPayload(BaseModel):
    name: Optional[str] = None
    id_number: Optional[str] = None
    photo: ImageField
    position: Optional[str] = None
    academic_year: Optional[str] = None
    display_order: int = DEFAULT_DISPLAY_ORDER
    linkedin_id: Optional[str] = None
    phone_number: Optional[str] = None
    is_phone_number_public: bool = False
    telegram_link: Optional[str] = None
    is_telegram_link_public: bool = False

    model_config = ConfigDict(validate_default=True)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _required(v, "Name is required")

    @field_validator("position")
    @classmethod
    def check_position(cls, v):
        return _required(v, "Position is required")

    @field_validator("academic_year")
    @classmethod
    def check_academic_year(cls, v):
        return _required(v, "Academic year is required")

    @field_validator("id_number", "linkedin_id", "telegram_link", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _optional(v)

    @field_validator("phone_number", mode="before")
    @classmethod
    def check_phone_number(cls, v):
        v = _optional(v)
        if v is not None and not PHONE_PATTERN.match(v):
            raise ValueError("Please fill a valid phone number")
        return v

    @field_validator("display_order", mode="before")
    @classmethod
    def coerce_display_order(cls, v):
        return parse_display_order(v)

    @field_validator("is_phone_number_public", "is_telegram_link_public", mode="before")
    @classmethod
    def coerce_flags(cls, v):
        return parse_bool(v)
