"""Serializer package for the `pulsezen` Django app.

This package re-exports the public DRF serializer classes used by views.
Field names are camelCase to match the mobile client.
"""

from .auth_log import AuthLogSerializer
from .backup_code import BackupCodeLoginSerializer, BackupCodeSerializer, UsedBackupCodeSerializer
from .biometric import (
    BiometricEnableSerializer,
    BiometricLoginSerializer,
    BiometricRotateSerializer,
    BiometricTokenSerializer,
)
from .device import DeviceCapabilitiesSerializer, DeviceRegistrationSerializer, UserDeviceSerializer
from .profile import OnboardingSerializer, ProfileUpdateSerializer, UserProfileSerializer
from .user import (
    LoginSerializer,
    PasswordCheckSerializer,
    RefreshTokenSerializer,
    RegisterSerializer,
    UserSerializer,
)

__all__ = [
    "AuthLogSerializer",
    "BackupCodeLoginSerializer",
    "BackupCodeSerializer",
    "UsedBackupCodeSerializer",
    "BiometricEnableSerializer",
    "BiometricLoginSerializer",
    "BiometricRotateSerializer",
    "BiometricTokenSerializer",
    "DeviceCapabilitiesSerializer",
    "DeviceRegistrationSerializer",
    "UserDeviceSerializer",
    "OnboardingSerializer",
    "ProfileUpdateSerializer",
    "UserProfileSerializer",
    "LoginSerializer",
    "PasswordCheckSerializer",
    "RefreshTokenSerializer",
    "RegisterSerializer",
    "UserSerializer",
]
