"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from fastapi import Depends, Request

from clubcms.config import Settings
from clubcms.controller import token_handler
from clubcms.controller.auth_controller import OtpService, authorize
from clubcms.controller.token_handler import TokenClaim


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_otp_service(request: Request) -> OtpService:
    return request.app.state.otp_service


def get_upload_dir(request: Request) -> str:
    return request.app.state.settings.upload_dir


def get_current_user(request: Request) -> TokenClaim:
    """Decode the bearer token and expose the claim as ``request.state.user``."""
    settings = request.app.state.settings
    token = token_handler.read_bearer(request.headers.get("Authorization"))
    claim = token_handler.verify(token, secret=settings.jwt_secret)
    request.state.user = claim
    return claim


def require_roles(*roles: str):
    def dependency(claim: TokenClaim = Depends(get_current_user)) -> TokenClaim:
        authorize(claim, roles)
        return claim

    return dependency


require_admin = require_roles("admin")
