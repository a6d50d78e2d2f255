from typing import Optional

from pydantic import BaseModel, Field


class GenerateOtpRequest(BaseModel):
    email: Optional[str] = None
    admin_secret: Optional[str] = Field(default=None, alias="adminSecret")


class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None
