from typing import Any, Dict, Optional

from clubcms.controller.image_field import ImageFieldSpec
from clubcms.controller.resource_controller import ResourceKind
from clubcms.models.team_member_model import TeamMember
from clubcms.schema.team_member_schema import TeamMemberPayload

PHOTO_PLACEHOLDER = "https://via.placeholder.com/150"

TEAM_MEMBER_KIND = ResourceKind(
    label="Team member",
    model=TeamMember,
    payload=TeamMemberPayload,
    image=ImageFieldSpec(
        attr="photo",
        label="photo",
        placeholder=PHOTO_PLACEHOLDER,
        declared_kinds=("url", "import"),
    ),
    order_by=(TeamMember.display_order.asc(), TeamMember.academic_year.asc(), TeamMember.name.asc()),
    duplicate_message="A team member with this ID number already exists.",
)


def team_member_fields(**form: Optional[str]) -> Dict[str, Any]:
    """Keep the submitted form values; names already match the record."""
    return {key: val for key, val in form.items() if val is not None}
