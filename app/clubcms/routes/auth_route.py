import logging

from fastapi import APIRouter, Depends, status

from clubcms.controller import token_handler
from clubcms.controller.auth_controller import OtpService
from clubcms.controller.token_handler import TokenClaim
from clubcms.dependencies import get_app_settings, get_otp_service, require_admin
from clubcms.exceptions import AppError
from clubcms.response_model import ResponseModel, ErrorResponseModel
from clubcms.schema.auth_schema import GenerateOtpRequest, VerifyOtpRequest

logger = logging.getLogger(__name__)

router = APIRouter()


# ----------------------- GENERATE OTP -----------------------
@router.post("/generate-otp", response_description="Send a login OTP to the admin email")
async def generate_otp(
    body: GenerateOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
):
    try:
        await otp_service.issue(body.email, body.admin_secret)
        return ResponseModel("OTP sent to admin email.")
    except AppError as e:
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        logger.exception("Error sending OTP")
        return ErrorResponseModel(
            "Failed to send OTP. Please check server logs.", status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# ----------------------- VERIFY OTP -----------------------
@router.post("/verify-otp", response_description="Verify the OTP and return a session token")
async def verify_otp(
    body: VerifyOtpRequest,
    otp_service: OtpService = Depends(get_otp_service),
    settings=Depends(get_app_settings),
):
    try:
        if not settings.jwt_secret:
            # Checked before verify so the OTP stays usable.
            logger.error("JWT_SECRET is not set; cannot issue session tokens")
            return ErrorResponseModel("Server error during login.", status.HTTP_500_INTERNAL_SERVER_ERROR)
        claim = otp_service.verify(body.email, body.otp)
        token = token_handler.mint(
            claim,
            secret=settings.jwt_secret,
            expires_minutes=settings.token_expire_minutes,
        )
        logger.info("Admin %s logged in", claim.identity_id)
        return ResponseModel("Logged in successfully!", token=token)
    except AppError as e:
        return ErrorResponseModel(e.message, e.status_code)
    except Exception:
        logger.exception("Login error")
        return ErrorResponseModel("Server error during login.", status.HTTP_500_INTERNAL_SERVER_ERROR)


# ----------------------- PROTECTED PROBE -----------------------
@router.get("/test-protected", response_description="Check that a token grants admin access")
async def test_protected(claim: TokenClaim = Depends(require_admin)):
    return ResponseModel("You have access to protected data!", user=claim.to_dict())


__all__ = ["router"]
