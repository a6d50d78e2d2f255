from typing import Any, Dict, Optional

from clubcms.controller.image_field import ImageFieldSpec
from clubcms.controller.resource_controller import ResourceKind
from clubcms.models.event_model import Event
from clubcms.schema.event_schema import EventPayload, parse_speakers

POSTER_PLACEHOLDER = "https://via.placeholder.com/300x200?text=No+Poster"

EVENT_KIND = ResourceKind(
    label="Event",
    model=Event,
    payload=EventPayload,
    image=ImageFieldSpec(
        attr="poster",
        label="poster",
        placeholder=POSTER_PLACEHOLDER,
        declared_kinds=("url",),
    ),
    # Most recent first
    order_by=(Event.date.desc(), Event.id.desc()),
)


def event_fields(
    *,
    event_name: Optional[str] = None,
    event_date: Optional[str] = None,
    description: Optional[str] = None,
    speakers: Optional[str] = None,
    report_link: Optional[str] = None,
    academic_year: Optional[str] = None,
) -> Dict[str, Any]:
    """Map submitted form values onto record fields, skipping absent ones."""
    fields: Dict[str, Any] = {
        "name": event_name,
        "date": event_date,
        "description": description,
        "report_link": report_link,
        "academic_year": academic_year,
    }
    fields = {key: val for key, val in fields.items() if val is not None}
    if speakers is not None:
        fields["speakers"] = parse_speakers(speakers)
    return fields
