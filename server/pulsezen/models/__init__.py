"""Database models exposed by the `pulsezen` Django app.

This package aggregates the account and device-trust models so other parts of
the backend can import them from one place.
"""

from .auth_log import AuthLog
from .backup_code import BackupCode
from .biometric import BiometricToken
from .device import DeviceTrustScore, UserDevice, calculate_security_level
from .profile import UserProfile
from .user import User

__all__ = [
    "AuthLog",
    "BackupCode",
    "BiometricToken",
    "DeviceTrustScore",
    "User",
    "UserDevice",
    "UserProfile",
    "calculate_security_level",
]
