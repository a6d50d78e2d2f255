"""
Decides the stored representation of an image field (event poster, team
member photo) from the request payload and the resource's prior state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from clubcms.controller.upload_handler import StoredUpload
from clubcms.exceptions import ValidationError


@dataclass(frozen=True)
class ImageFieldSpec:
    attr: str                   # model attribute, e.g. "poster"
    label: str                  # used in messages, e.g. "poster"
    placeholder: str
    declared_kinds: Tuple[str, ...] = ("url",)   # kinds accepted without a file


def _field(kind: str, value: Optional[str]) -> dict:
    return {"kind": kind, "value": value}


def resolve_on_create(
    image: ImageFieldSpec,
    stored: Optional[StoredUpload],
    declared_kind: Optional[str],
    declared_value: Optional[str],
) -> dict:
    if stored is not None:
        return _field("upload", stored.public_path)
    if declared_kind in image.declared_kinds and declared_value:
        return _field(declared_kind, declared_value)
    return _field("url", image.placeholder)


def resolve_on_update(
    image: ImageFieldSpec,
    previous: Optional[dict],
    stored: Optional[StoredUpload],
    declared_kind: Optional[str],
    declared_value: Optional[str],
) -> Tuple[Optional[dict], Optional[str]]:
    """Return ``(new_field, superseded_path)``.

    ``new_field`` is None when the image is left untouched. ``superseded_path``
    is the previous upload that the caller must delete once the update is
    committed.
    """
    previous = previous or {}
    previous_upload = previous.get("value") if previous.get("kind") == "upload" else None

    if stored is not None:
        return _field("upload", stored.public_path), previous_upload

    if not declared_kind:
        return None, None

    if declared_kind not in image.declared_kinds:
        raise ValidationError(f"Invalid {image.label} type specified for update.")

    return _field(declared_kind, declared_value), previous_upload


def upload_path(field: Optional[dict]) -> Optional[str]:
    if field and field.get("kind") == "upload":
        return field.get("value")
    return None
