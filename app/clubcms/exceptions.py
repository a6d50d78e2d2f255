"""Error taxonomy shared by controllers and routes.

Every error carries the HTTP status it maps to and a human readable message,
so a route can answer with ``ErrorResponseModel(err.message, err.status_code)``.
"""

from __future__ import annotations


class AppError(Exception):
    status_code = 500
    default_message = "An unexpected server error occurred."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ------------------ Auth ------------------
class AuthError(AppError):
    status_code = 401
    default_message = "Authentication failed."


class InvalidEmail(AuthError):
    status_code = 400
    default_message = "Invalid admin email."


class InvalidCredentials(AuthError):
    status_code = 401
    default_message = "Invalid Admin Secret Key."


class InvalidOrExpiredOtp(AuthError):
    status_code = 400
    default_message = "Invalid or expired OTP."


class MissingToken(AuthError):
    default_message = "No token, authorization denied"


class MalformedToken(AuthError):
    default_message = "Token format invalid, authorization denied"


class InvalidOrExpiredToken(AuthError):
    default_message = "Token is not valid or expired"


class NoIdentityContext(AuthError):
    status_code = 403
    default_message = "Access denied: No user or role information found in token."


class RoleNotAllowed(AuthError):
    status_code = 403
    default_message = "Access denied: role not allowed."


# ------------------ Validation ------------------
class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed."


# ------------------ Lookup ------------------
class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found."


class InvalidIdentifier(NotFoundError):
    status_code = 400
    default_message = "Invalid ID format."


# ------------------ Upstream ------------------
class UpstreamError(AppError):
    status_code = 500
    default_message = "Upstream service failed."


class DeliveryFailure(UpstreamError):
    default_message = "Failed to send OTP. Please check server logs."
