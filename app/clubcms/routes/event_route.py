import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from clubcms.controller.event_controller import EVENT_KIND, event_fields
from clubcms.controller.resource_controller import (
    create_resource,
    delete_resource,
    retrieve_resource,
    retrieve_resources,
    update_resource,
)
from clubcms.controller.upload_handler import discard_upload, store_image
from clubcms.database import get_db
from clubcms.dependencies import get_app_settings, require_admin
from clubcms.exceptions import AppError
from clubcms.response_model import ResponseModel, ErrorResponseModel

logger = logging.getLogger(__name__)

router = APIRouter()

POSTER_FIELD = "posterFile"


# ----------------------- GET ALL Events -----------------------
@router.get("", response_description="Retrieve all events")
async def get_events(db: Session = Depends(get_db)):
    try:
        events = await retrieve_resources(db, EVENT_KIND)
        return [event.to_dict() for event in events]
    except Exception:
        logger.exception("Error fetching events")
        return ErrorResponseModel("Server error fetching events.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- GET Event -----------------------
@router.get("/{event_id}", response_description="Retrieve a single event")
async def get_event(event_id: str, db: Session = Depends(get_db)):
    try:
        event = await retrieve_resource(db, EVENT_KIND, event_id)
        return event.to_dict()
    except AppError as e:
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        logger.exception("Error fetching event %s", event_id)
        return ErrorResponseModel("Server error fetching event.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- ADD Event -----------------------
@router.post("", response_description="Create a new event", dependencies=[Depends(require_admin)])
async def add_event_data(
    event_name: Optional[str] = Form(None, alias="eventName"),
    event_date: Optional[str] = Form(None, alias="eventDate"),
    description: Optional[str] = Form(None),
    speakers: Optional[str] = Form(None, description="JSON array of {name, id} objects."),
    report_link: Optional[str] = Form(None, alias="reportLink"),
    academic_year: Optional[str] = Form(None, alias="academicYear"),
    poster_type: Optional[str] = Form(None, alias="posterType"),
    poster_value: Optional[str] = Form(None, alias="posterValue"),
    poster_file: UploadFile = File(None, alias=POSTER_FIELD),
    db: Session = Depends(get_db),
    settings=Depends(get_app_settings),
):
    stored = None
    try:
        stored = await store_image(
            poster_file,
            field_name=POSTER_FIELD,
            upload_dir=settings.upload_dir,
            max_bytes=settings.max_upload_bytes,
        )
        fields = event_fields(
            event_name=event_name,
            event_date=event_date,
            description=description,
            speakers=speakers,
            report_link=report_link,
            academic_year=academic_year,
        )
        event = await create_resource(
            db,
            EVENT_KIND,
            fields,
            stored=stored,
            declared_kind=poster_type,
            declared_value=poster_value,
        )
        return ResponseModel("Event saved successfully!", status.HTTP_201_CREATED, event=event.to_dict())
    except AppError as e:
        discard_upload(stored)
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        discard_upload(stored)
        logger.exception("Error saving event")
        return ErrorResponseModel("Server error saving event.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ------------------ Update Event ------------------
@router.put("/{event_id}", response_description="Update an existing event", dependencies=[Depends(require_admin)])
async def update_event(
    event_id: str,
    event_name: Optional[str] = Form(None, alias="eventName"),
    event_date: Optional[str] = Form(None, alias="eventDate"),
    description: Optional[str] = Form(None),
    speakers: Optional[str] = Form(None),
    report_link: Optional[str] = Form(None, alias="reportLink"),
    academic_year: Optional[str] = Form(None, alias="academicYear"),
    poster_type: Optional[str] = Form(None, alias="posterType"),
    poster_value: Optional[str] = Form(None, alias="posterValue"),
    poster_file: UploadFile = File(None, alias=POSTER_FIELD),
    db: Session = Depends(get_db),
    settings=Depends(get_app_settings),
):
    stored = None
    try:
        stored = await store_image(
            poster_file,
            field_name=POSTER_FIELD,
            upload_dir=settings.upload_dir,
            max_bytes=settings.max_upload_bytes,
        )
        fields = event_fields(
            event_name=event_name,
            event_date=event_date,
            description=description,
            speakers=speakers,
            report_link=report_link,
            academic_year=academic_year,
        )
        event = await update_resource(
            db,
            EVENT_KIND,
            event_id,
            fields,
            upload_dir=settings.upload_dir,
            stored=stored,
            declared_kind=poster_type,
            declared_value=poster_value,
        )
        return ResponseModel("Event updated successfully!", event=event.to_dict())
    except AppError as e:
        discard_upload(stored)
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        discard_upload(stored)
        logger.exception("Error updating event %s", event_id)
        return ErrorResponseModel("Server error updating event.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ------------------ Delete Event ------------------
@router.delete("/{event_id}", response_description="Delete an event", dependencies=[Depends(require_admin)])
async def delete_event(event_id: str, db: Session = Depends(get_db), settings=Depends(get_app_settings)):
    try:
        await delete_resource(db, EVENT_KIND, event_id, upload_dir=settings.upload_dir)
        return ResponseModel("Event deleted successfully!")
    except AppError as e:
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        logger.exception("Error deleting event %s", event_id)
        return ErrorResponseModel("Server error deleting event.", status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = ["router"]
