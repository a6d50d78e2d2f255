"""
Create/update/delete logic shared by every admin-managed resource.

A ``ResourceKind`` describes one resource type (its ORM model, the pydantic
schema of a full record and its image field); the functions below reconcile
the image field, validate, persist and clean up uploaded files the same way
for all of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type

import pydantic
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubcms.controller.image_field import (
    ImageFieldSpec,
    resolve_on_create,
    resolve_on_update,
    upload_path,
)
from clubcms.controller.upload_handler import StoredUpload, delete_public_file, discard_upload
from clubcms.exceptions import InvalidIdentifier, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "


@dataclass(frozen=True)
class ResourceKind:
    label: str
    model: Type[Any]
    payload: Type[pydantic.BaseModel]
    image: ImageFieldSpec
    order_by: Tuple[Any, ...] = ()
    duplicate_message: Optional[str] = None


def schema_error_message(exc: pydantic.ValidationError) -> str:
    messages = []
    for err in exc.errors():
        msg = err.get("msg", "")
        if msg.startswith(_VALUE_ERROR_PREFIX):
            messages.append(msg[len(_VALUE_ERROR_PREFIX):])
        else:
            loc = ".".join(str(part) for part in err.get("loc", ()))
            messages.append(f"{loc}: {msg}" if loc else msg)
    return ", ".join(messages)


def validate_record(kind: ResourceKind, record: Dict[str, Any]) -> pydantic.BaseModel:
    try:
        return kind.payload.model_validate(record)
    except pydantic.ValidationError as e:
        raise ValidationError(schema_error_message(e)) from e


def current_record(kind: ResourceKind, obj) -> Dict[str, Any]:
    return {name: getattr(obj, name) for name in kind.payload.model_fields}


def parse_id(kind: ResourceKind, raw_id) -> int:
    try:
        value = int(str(raw_id))
    except (TypeError, ValueError):
        raise InvalidIdentifier(f"Invalid {kind.label} ID format.")
    if value < 1:
        raise InvalidIdentifier(f"Invalid {kind.label} ID format.")
    return value


def _commit(db: Session, kind: ResourceKind) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError(
            kind.duplicate_message or f"{kind.label} conflicts with an existing record."
        ) from e
    except Exception:
        db.rollback()
        raise


# ------------------ Retrieve ------------------
async def retrieve_resources(db: Session, kind: ResourceKind):
    return db.query(kind.model).order_by(*kind.order_by).all()


async def retrieve_resource(db: Session, kind: ResourceKind, raw_id):
    resource_id = parse_id(kind, raw_id)
    obj = db.query(kind.model).filter(kind.model.id == resource_id).first()
    if obj is None:
        raise NotFoundError(f"{kind.label} not found")
    return obj


# ------------------ Create ------------------
async def create_resource(
    db: Session,
    kind: ResourceKind,
    fields: Dict[str, Any],
    *,
    stored: Optional[StoredUpload] = None,
    declared_kind: Optional[str] = None,
    declared_value: Optional[str] = None,
):
    try:
        image = resolve_on_create(kind.image, stored, declared_kind, declared_value)
        payload = validate_record(kind, {**fields, kind.image.attr: image})
        obj = kind.model(**payload.model_dump())
        db.add(obj)
        _commit(db, kind)
        db.refresh(obj)
        logger.info("Created %s %s", kind.label, obj.id)
    except Exception:
        # Rejected submissions must not leave files behind.
        discard_upload(stored)
        raise
    return obj


# ------------------ Update ------------------
async def update_resource(
    db: Session,
    kind: ResourceKind,
    raw_id,
    fields: Dict[str, Any],
    *,
    upload_dir: str,
    stored: Optional[StoredUpload] = None,
    declared_kind: Optional[str] = None,
    declared_value: Optional[str] = None,
):
    try:
        obj = await retrieve_resource(db, kind, raw_id)
        image, superseded = resolve_on_update(
            kind.image,
            getattr(obj, kind.image.attr),
            stored,
            declared_kind,
            declared_value,
        )

        record = current_record(kind, obj)
        record.update(fields)
        if image is not None:
            record[kind.image.attr] = image
        payload = validate_record(kind, record)

        for key, val in payload.model_dump().items():
            setattr(obj, key, val)
        _commit(db, kind)
        db.refresh(obj)
    except Exception:
        discard_upload(stored)
        raise

    if superseded and superseded != upload_path(getattr(obj, kind.image.attr)):
        delete_public_file(superseded, upload_dir)
    return obj


# ------------------ Delete ------------------
async def delete_resource(db: Session, kind: ResourceKind, raw_id, *, upload_dir: str):
    obj = await retrieve_resource(db, kind, raw_id)
    obj_id = obj.id
    backing_file = upload_path(getattr(obj, kind.image.attr))

    db.delete(obj)
    _commit(db, kind)
    logger.info("Deleted %s %s", kind.label, obj_id)

    if backing_file:
        delete_public_file(backing_file, upload_dir)
