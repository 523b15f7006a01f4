import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    """
    Custom exception handler for DRF that returns consistent error format.

    Domain errors raised by services are mapped to their own status codes.
    Anything DRF does not know about is logged and turned into a generic 500
    so no traceback reaches the client.
    """
    if isinstance(exc, PulsezenError):
        return error_response(exc)

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view") if context else None
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else "unknown view"
        )
        return Response(
            format_error(code="internal_error", message="An unexpected error occurred"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        code = "validation_error"
        message = "Invalid request data"
    else:
        code = getattr(exc, "default_code", "error")
        message = _detail_message(exc)

    response.data = format_error(
        code=code,
        message=message,
        details=(
            response.data
            if isinstance(response.data, dict)
            else {"detail": response.data}
        ),
    )
    return response


def _detail_message(exc):
    detail = getattr(exc, "detail", None)
    if isinstance(detail, dict):
        detail = detail.get("detail", detail)
    return str(detail) if detail is not None else str(exc)


def format_error(code: str, message: str, details=None):
    return {
        "success": False,
        "error": {
            "code": str(code).upper(),
            "message": message,
            "details": details if details is not None else {},
        },
        "message": message,
    }


def format_success(data=None, message=None):
    payload = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return payload


class PulsezenError(Exception):
    """Base class for domain errors rendered by `exception_handler`"""

    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, details=None):
        self.details = details or {}
        super().__init__(message)


class DeviceNotFoundError(PulsezenError):
    """Raised when a device is not registered for the requesting user"""

    code = "device_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message="Device not registered"):
        super().__init__(message)


class BiometricNotSupportedError(PulsezenError):
    """Raised when a device does not report biometric hardware"""

    code = "biometric_not_supported"

    def __init__(self, message="Device does not support biometric authentication"):
        super().__init__(message)


class DeviceConflictError(PulsezenError):
    """Raised when a fingerprint is already registered to another account"""

    code = "device_conflict"

    def __init__(self, message="Device is already registered to another account"):
        super().__init__(message)


class BackupCodeInvalidError(PulsezenError):
    """Raised when a backup code is unknown, used or expired"""

    code = "invalid_backup_code"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message="Invalid or expired backup code"):
        super().__init__(message)


class AuthenticationError(PulsezenError):
    """Raised when credentials are rejected; `details` may carry fallback options"""

    code = "authentication_failed"
    status_code = status.HTTP_401_UNAUTHORIZED


class RegistrationError(PulsezenError):
    """Raised when an account cannot be created"""

    code = "registration_failed"


def error_response(exc: PulsezenError):
    return Response(
        format_error(code=exc.code, message=str(exc), details=exc.details),
        status=exc.status_code,
    )
