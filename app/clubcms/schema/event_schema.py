import json
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from clubcms.exceptions import ValidationError
from clubcms.schema.image_schema import ImageField, is_url

ACADEMIC_YEARS = ("2024-25", "2025-26")


class Speaker(BaseModel):
    name: Optional[str] = None
    id: Optional[int] = None

    model_config = ConfigDict(validate_default=True, extra="ignore")

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        if v is None or not v.strip():
            raise ValueError("Speaker name is required")
        return v.strip()

    @field_validator("id")
    @classmethod
    def id_positive(cls, v):
        if v is None:
            raise ValueError("Speaker ID is required")
        if v < 1:
            raise ValueError("Speaker ID must be a positive number")
        return v


class EventPayload(BaseModel):
    """Full event record as it is persisted.

    Every field is checked with the messages the admin panel shows, so
    missing values are modelled as ``None`` and rejected by the validators.
    """

    name: Optional[str] = None
    date: Optional[datetime] = None
    description: Optional[str] = ""
    speakers: List[Speaker] = []
    poster: ImageField
    report_link: Optional[str] = None
    academic_year: Optional[str] = None

    model_config = ConfigDict(validate_default=True)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is None or not v.strip():
            raise ValueError("Event name is required")
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Event name must be at least 3 characters long")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Event date is required")
        if isinstance(v, str):
            v = v.strip()
            try:
                return datetime.strptime(v, "%Y-%m-%d")
            except ValueError:
                pass
            try:
                v = datetime.fromisoformat(v.replace("Z", "+00:00"))
            except ValueError:
                raise ValueError(f"{v} is not a valid event date")
        if isinstance(v, datetime) and v.tzinfo is not None:
            # Stored as naive UTC.
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        v = v or ""
        if len(v) > 1000:
            raise ValueError("Description cannot exceed 1000 characters")
        return v

    @field_validator("speakers")
    @classmethod
    def speakers_not_empty(cls, v):
        if not v:
            raise ValueError("At least one speaker with a valid name and ID is required.")
        return v

    @field_validator("poster")
    @classmethod
    def poster_kind(cls, v):
        if v.kind not in ("upload", "url"):
            raise ValueError("Poster type must be either 'upload' or 'url'")
        return v

    @field_validator("report_link")
    @classmethod
    def check_report_link(cls, v):
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not is_url(v):
            raise ValueError(f"{v} is not a valid URL for report link!")
        return v

    @field_validator("academic_year")
    @classmethod
    def check_academic_year(cls, v):
        if v is None or not v.strip():
            raise ValueError("Academic year is required")
        if v.strip() not in ACADEMIC_YEARS:
            raise ValueError("Academic year must be 2024-25 or 2025-26")
        return v.strip()


def parse_speakers(raw: str) -> list:
    """Decode the ``speakers`` form field, a JSON array of objects."""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid speakers format. Must be a valid JSON array.")
    if not isinstance(parsed, list) or not all(isinstance(s, dict) for s in parsed):
        raise ValidationError("Invalid speakers format. Must be a valid JSON array.")
    return parsed
