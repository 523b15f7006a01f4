from .exceptions import (
    exception_handler,
    format_error,
    format_success,
    error_response,
    PulsezenError,
    AuthenticationError,
    BackupCodeInvalidError,
    BiometricNotSupportedError,
    DeviceConflictError,
    DeviceNotFoundError,
    RegistrationError,
)
from .request import client_ip, user_agent

__all__ = [
    "exception_handler",
    "format_error",
    "format_success",
    "error_response",
    "PulsezenError",
    "AuthenticationError",
    "BackupCodeInvalidError",
    "BiometricNotSupportedError",
    "DeviceConflictError",
    "DeviceNotFoundError",
    "RegistrationError",
    "client_ip",
    "user_agent",
]
