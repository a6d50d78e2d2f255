import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from clubcms.controller.resource_controller import (
    create_resource,
    delete_resource,
    retrieve_resource,
    retrieve_resources,
    update_resource,
)
from clubcms.controller.team_controller import TEAM_MEMBER_KIND, team_member_fields
from clubcms.controller.upload_handler import discard_upload, store_image
from clubcms.database import get_db
from clubcms.dependencies import get_app_settings, require_admin
from clubcms.exceptions import AppError
from clubcms.response_model import ResponseModel, ErrorResponseModel

logger = logging.getLogger(__name__)

router = APIRouter()

PHOTO_FIELD = "photo"


# ----------------------- GET ALL Team members -----------------------
@router.get("", response_description="Retrieve all team members")
async def get_team_members(db: Session = Depends(get_db)):
    try:
        members = await retrieve_resources(db, TEAM_MEMBER_KIND)
        return [member.to_dict() for member in members]
    except Exception:
        logger.exception("Error fetching team members")
        return ErrorResponseModel("Server error fetching team members.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- GET Team member -----------------------
@router.get("/{member_id}", response_description="Retrieve a single team member")
async def get_team_member(member_id: str, db: Session = Depends(get_db)):
    try:
        member = await retrieve_resource(db, TEAM_MEMBER_KIND, member_id)
        return member.to_dict()
    except AppError as e:
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        logger.exception("Error fetching team member %s", member_id)
        return ErrorResponseModel("Server error fetching team member.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- ADD Team member -----------------------
@router.post("", response_description="Add a new team member", dependencies=[Depends(require_admin)])
async def add_team_member(
    name: Optional[str] = Form(None),
    id_number: Optional[str] = Form(None, alias="idNumber"),
    position: Optional[str] = Form(None),
    academic_year: Optional[str] = Form(None, alias="academicYear"),
    display_order: Optional[str] = Form(None, alias="displayOrder"),
    linkedin_id: Optional[str] = Form(None, alias="linkedinId"),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    is_phone_number_public: Optional[str] = Form(None, alias="isPhoneNumberPublic"),
    telegram_link: Optional[str] = Form(None, alias="telegramLink"),
    is_telegram_link_public: Optional[str] = Form(None, alias="isTelegramLinkPublic"),
    photo_type: Optional[str] = Form(None, alias="photoType"),
    photo_value: Optional[str] = Form(None, alias="photoValue"),
    photo: UploadFile = File(None, alias=PHOTO_FIELD),
    db: Session = Depends(get_db),
    settings=Depends(get_app_settings),
):
    stored = None
    try:
        stored = await store_image(
            photo,
            field_name=PHOTO_FIELD,
            upload_dir=settings.upload_dir,
            max_bytes=settings.max_upload_bytes,
        )
        fields = team_member_fields(
            name=name,
            id_number=id_number,
            position=position,
            academic_year=academic_year,
            display_order=display_order,
            linkedin_id=linkedin_id,
            phone_number=phone_number,
            is_phone_number_public=is_phone_number_public,
            telegram_link=telegram_link,
            is_telegram_link_public=is_telegram_link_public,
        )
        member = await create_resource(
            db,
            TEAM_MEMBER_KIND,
            fields,
            stored=stored,
            declared_kind=photo_type,
            declared_value=photo_value,
        )
        return ResponseModel(
            "Team member saved successfully!", status.HTTP_201_CREATED, teamMember=member.to_dict()
        )
    except AppError as e:
        discard_upload(stored)
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        discard_upload(stored)
        logger.exception("Error saving team member")
        return ErrorResponseModel("Server error saving team member.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- UPDATE Team member -----------------------
@router.put("/{member_id}", response_description="Update a team member", dependencies=[Depends(require_admin)])
async def update_team_member(
    member_id: str,
    name: Optional[str] = Form(None),
    id_number: Optional[str] = Form(None, alias="idNumber"),
    position: Optional[str] = Form(None),
    academic_year: Optional[str] = Form(None, alias="academicYear"),
    display_order: Optional[str] = Form(None, alias="displayOrder"),
    linkedin_id: Optional[str] = Form(None, alias="linkedinId"),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    is_phone_number_public: Optional[str] = Form(None, alias="isPhoneNumberPublic"),
    telegram_link: Optional[str] = Form(None, alias="telegramLink"),
    is_telegram_link_public: Optional[str] = Form(None, alias="isTelegramLinkPublic"),
    photo_type: Optional[str] = Form(None, alias="photoType"),
    photo_value: Optional[str] = Form(None, alias="photoValue"),
    photo: UploadFile = File(None, alias=PHOTO_FIELD),
    db: Session = Depends(get_db),
    settings=Depends(get_app_settings),
):
    stored = None
    try:
        stored = await store_image(
            photo,
            field_name=PHOTO_FIELD,
            upload_dir=settings.upload_dir,
            max_bytes=settings.max_upload_bytes,
        )
        fields = team_member_fields(
            name=name,
            id_number=id_number,
            position=position,
            academic_year=academic_year,
            display_order=display_order,
            linkedin_id=linkedin_id,
            phone_number=phone_number,
            is_phone_number_public=is_phone_number_public,
            telegram_link=telegram_link,
            is_telegram_link_public=is_telegram_link_public,
        )
        member = await update_resource(
            db,
            TEAM_MEMBER_KIND,
            member_id,
            fields,
            upload_dir=settings.upload_dir,
            stored=stored,
            declared_kind=photo_type,
            declared_value=photo_value,
        )
        return ResponseModel("Team member updated successfully!", teamMember=member.to_dict())
    except AppError as e:
        discard_upload(stored)
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        discard_upload(stored)
        logger.exception("Error updating team member %s", member_id)
        return ErrorResponseModel("Server error updating team member.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- DELETE Team member -----------------------
@router.delete("/{member_id}", response_description="Delete a team member", dependencies=[Depends(require_admin)])
async def delete_team_member(member_id: str, db: Session = Depends(get_db), settings=Depends(get_app_settings)):
    try:
        await delete_resource(db, TEAM_MEMBER_KIND, member_id, upload_dir=settings.upload_dir)
        return ResponseModel("Team member deleted successfully!")
    except AppError as e:
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        logger.exception("Error deleting team member %s", member_id)
        return ErrorResponseModel("Server error deleting team member.", status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = ["router"]
