"""Device registration, biometric login, backup codes and device management."""

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from pulsezen.models import (
    AuthLog,
    BackupCode,
    BiometricToken,
    DeviceTrustScore,
    UserDevice,
    calculate_security_level,
)
from pulsezen.models.device import (
    SECURITY_BASIC,
    SECURITY_INSECURE,
    SECURITY_PREMIUM,
    SECURITY_PROTECTED,
)
from pulsezen.services.accounts import issue_tokens
from pulsezen.utils import (
    BackupCodeInvalidError,
    BiometricNotSupportedError,
    DeviceConflictError,
    DeviceNotFoundError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

MIN_BIOMETRIC_TRUST_SCORE = 30


@dataclass
class AuthResult:
    """Outcome of a biometric login attempt"""

    success: bool
    method: str = "biometric"
    error: Optional[str] = None
    tokens: Optional[dict] = None
    user: Optional[object] = None
    device: Optional[UserDevice] = None
    trust_score: Optional[float] = None
    fallback_methods: List[str] = field(default_factory=list)
    requires_additional_verification: bool = False

    def error_details(self):
        details = {"method": self.method}
        if self.fallback_methods:
            details["fallbackMethods"] = self.fallback_methods
        if self.requires_additional_verification:
            details["requiresAdditionalVerification"] = True
            details["trustScore"] = self.trust_score
        if self.device is not None:
            details["deviceId"] = str(self.device.id)
        return details


def get_fallback_methods(capabilities):
    methods = []
    if (capabilities or {}).get("hasDevicePasscode"):
        methods.append("devicePin")
    methods.append("appPin")
    methods.append("email")
    return methods


def get_security_recommendations(security_level, capabilities):
    capabilities = capabilities or {}
    has_biometrics = bool(capabilities.get("hasBiometrics"))
    recommendations = []

    if security_level == SECURITY_INSECURE:
        recommendations.append("Enable screen lock on your device for better security")
        recommendations.append("Consider using a device PIN or password")
    elif security_level == SECURITY_BASIC:
        if has_biometrics:
            recommendations.append("Enable biometric authentication for faster and more secure login")
        recommendations.append("Enable device passcode for additional security")
    elif security_level == SECURITY_PROTECTED:
        if has_biometrics:
            recommendations.append("Enable biometric authentication for premium security experience")
    elif security_level == SECURITY_PREMIUM:
        recommendations.append("Your device has optimal security configuration")

    return recommendations


def describe_capabilities(capabilities):
    """Security summary for a capability set that is not tied to a stored device."""
    security_level = calculate_security_level(capabilities)
    return {
        "securityLevel": security_level,
        "canUseBiometrics": bool(capabilities.get("hasBiometrics")),
        "hasDevicePasscode": bool(capabilities.get("hasDevicePasscode")),
        "hasScreenLock": bool(capabilities.get("hasScreenLock")),
        "fallbackMethods": get_fallback_methods(capabilities),
        "recommendations": get_security_recommendations(security_level, capabilities),
    }


def register_device(user, data, ip_address=None, user_agent=None):
    """
    Create or update the device identified by `data["fingerprint"]`.

    Returns `(device, created)`. A fingerprint owned by another account raises
    `DeviceConflictError`.
    """
    fingerprint = data["fingerprint"]
    existing = UserDevice.objects.filter(fingerprint=fingerprint).first()

    if existing is not None and existing.user_id != user.id:
        logger.warning("Device fingerprint conflict for user %s", user.id)
        raise DeviceConflictError()

    if existing is not None:
        existing.device_name = data["device_name"]
        existing.os_version = data.get("os_version")
        existing.app_version = data.get("app_version")
        existing.capabilities = data["capabilities"]
        existing.security_level = calculate_security_level(data["capabilities"])
        existing.last_seen_at = timezone.now()
        existing.save()
        DeviceTrustScore.objects.get_or_create(device=existing)
        logger.info("Device %s updated for user %s", existing.id, user.id)
        return existing, False

    with transaction.atomic():
        device = UserDevice.objects.create(
            user=user,
            fingerprint=fingerprint,
            device_name=data["device_name"],
            device_type=data["device_type"],
            platform=data["platform"],
            os_version=data.get("os_version"),
            app_version=data.get("app_version"),
            capabilities=data["capabilities"],
            last_seen_at=timezone.now(),
        )
        DeviceTrustScore.objects.create(device=device)
        AuthLog.log_success(
            user,
            "email",
            device=device,
            ip_address=ip_address,
            user_agent=user_agent,
            geolocation=data.get("geolocation"),
            device_info=data.get("device_info"),
        )

    logger.info("Device %s registered for user %s (%s)", device.id, user.id, device.security_level)
    return device, True


def _get_user_device(user, fingerprint):
    device = UserDevice.objects.filter(user=user, fingerprint=fingerprint).first()
    if device is None:
        raise DeviceNotFoundError()
    return device


def enable_biometric_auth(user, fingerprint, biometric_type, biometric_data=None):
    """
    Issue a biometric token for one of the user's devices.

    Returns `(token, raw_token)`; the raw token is shown to the client once.
    """
    device = _get_user_device(user, fingerprint)
    if not device.has_capability("hasBiometrics"):
        raise BiometricNotSupportedError()

    with transaction.atomic():
        token, raw_token = BiometricToken.create_for_device(
            user, device, biometric_type, biometric_data
        )
        device.biometric_enabled = True
        device.save(update_fields=["biometric_enabled", "updated_at"])
        AuthLog.log_success(user, "biometric", device=device, biometric_type=biometric_type)

    logger.info("Biometric %s enabled on device %s", biometric_type, device.id)
    return token, raw_token


def rotate_biometric_token(user, fingerprint, biometric_type):
    device = _get_user_device(user, fingerprint)
    token = (
        BiometricToken.objects.filter(
            user=user,
            device=device,
            biometric_type=biometric_type,
            is_active=True,
        )
        .order_by("-created_at")
        .first()
    )
    if token is None:
        raise DeviceNotFoundError("No active biometric token for this device")

    raw_token = token.rotate()
    logger.info("Biometric token %s rotated", token.id)
    return token, raw_token


def validate_biometric_signature(token, signature):
    """
    Compare `signature` with sha256(device id + public key + biometric type).

    Tokens enrolled without a public key never validate.
    """
    public_key = token.public_key
    if not public_key or not signature:
        return False
    expected = hashlib.sha256(
        f"{token.device_id}{public_key}{token.biometric_type}".encode("utf-8")
    ).hexdigest()
    return hmac.compare_digest(expected, str(signature))


def _find_device_for_login(data):
    fingerprint = data["device_fingerprint"]
    queryset = UserDevice.objects.select_related("user", "trust_score")
    user_id = data.get("user_id")
    if user_id:
        return queryset.filter(user_id=user_id, fingerprint=fingerprint).first()
    return queryset.filter(fingerprint=fingerprint, biometric_enabled=True).first()


def _log_biometric_failure(device, data, reason, ip_address, user_agent, trust_score=None):
    AuthLog.log_failure(
        device.user,
        "biometric",
        reason,
        device=device,
        biometric_type=data.get("biometric_type"),
        ip_address=ip_address,
        user_agent=user_agent,
        geolocation=data.get("geolocation"),
        device_info=data.get("device_info"),
        trust_score=trust_score,
    )
    logger.warning("Biometric login failed on device %s: %s", device.id, reason)


def authenticate_with_biometric(data, ip_address=None, user_agent=None):
    """
    Run the biometric login checks in order and return an `AuthResult`.

    Checks: device registered and owned by an active account, biometrics
    enabled, a valid token for the requested type, trust score of at least
    30, then the optional raw token and signature. Failures on a known device
    are written to the auth log.
    """
    started = time.monotonic()
    biometric_type = data["biometric_type"]

    device = _find_device_for_login(data)
    if device is None or not device.user.is_active or device.user.is_deleted:
        if device is not None:
            _log_biometric_failure(device, data, "Account inactive", ip_address, user_agent)
        logger.info("Biometric login for unregistered device from %s", ip_address)
        return AuthResult(success=False, error="Device not registered")

    fallback_methods = get_fallback_methods(device.capabilities)

    if not device.biometric_enabled:
        _log_biometric_failure(device, data, "Biometric not enabled", ip_address, user_agent)
        return AuthResult(
            success=False,
            error="Biometric authentication not enabled",
            device=device,
            fallback_methods=fallback_methods,
        )

    token = (
        BiometricToken.objects.valid()
        .filter(user=device.user, device=device, biometric_type=biometric_type)
        .order_by("-created_at")
        .first()
    )
    if token is None:
        _log_biometric_failure(device, data, "No valid biometric token", ip_address, user_agent)
        return AuthResult(
            success=False,
            error="No valid biometric token found",
            device=device,
            fallback_methods=fallback_methods,
        )

    trust_score = getattr(device, "trust_score", None)
    final_score = float(trust_score.final_score) if trust_score is not None else 0.0
    if trust_score is None or final_score < MIN_BIOMETRIC_TRUST_SCORE:
        _log_biometric_failure(
            device, data, "Low trust score", ip_address, user_agent, trust_score=final_score
        )
        return AuthResult(
            success=False,
            error="Device trust score too low",
            device=device,
            trust_score=final_score,
            requires_additional_verification=True,
        )

    raw_token = data.get("biometric_token")
    if raw_token and not token.verify_token(raw_token):
        token.record_attempt()
        trust_score.record_failed_auth()
        _log_biometric_failure(device, data, "Invalid biometric token", ip_address, user_agent, final_score)
        return AuthResult(
            success=False,
            error="Invalid biometric token",
            device=device,
            fallback_methods=fallback_methods,
        )

    signature = data.get("biometric_signature")
    if signature and not validate_biometric_signature(token, signature):
        token.record_attempt()
        trust_score.record_failed_auth()
        _log_biometric_failure(device, data, "Invalid biometric signature", ip_address, user_agent, final_score)
        return AuthResult(
            success=False,
            error="Invalid biometric signature",
            device=device,
            fallback_methods=fallback_methods,
        )

    user = device.user
    geolocation = data.get("geolocation") or {}
    with transaction.atomic():
        token.record_usage()
        trust_score.record_successful_auth()
        if ip_address:
            trust_score.add_location_data(
                {
                    "ip": ip_address,
                    "country": geolocation.get("country"),
                    "city": geolocation.get("city"),
                    "at": timezone.now().isoformat(),
                }
            )
        device.update_last_seen()

        response_time_ms = int((time.monotonic() - started) * 1000)
        AuthLog.log_success(
            user,
            "biometric",
            device=device,
            biometric_type=biometric_type,
            ip_address=ip_address,
            user_agent=user_agent,
            geolocation=data.get("geolocation"),
            device_info=data.get("device_info"),
            trust_score=final_score,
            response_time_ms=response_time_ms,
        )
        tokens = issue_tokens(user, device=device)
    logger.info("Biometric login succeeded for user %s on device %s", user.id, device.id)

    return AuthResult(
        success=True,
        tokens=tokens,
        user=user,
        device=device,
        trust_score=final_score,
    )


def authenticate_with_backup_code(user_id, code, ip_address=None, user_agent=None):
    """Redeem a backup code and return `(user, tokens)`."""
    user = User.objects.filter(pk=user_id).first()
    if user is None or not user.is_active or user.is_deleted:
        logger.info("Backup code login for unknown or inactive user from %s", ip_address)
        raise BackupCodeInvalidError()

    backup_code = BackupCode.validate_and_use_code(user, code, ip_address)
    if backup_code is None:
        AuthLog.log_failure(
            user,
            "backupCode",
            "Invalid or expired backup code",
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.warning("Backup code login failed for user %s", user.id)
        raise BackupCodeInvalidError()

    AuthLog.log_success(user, "backupCode", ip_address=ip_address, user_agent=user_agent)
    logger.info("Backup code %s redeemed by user %s", backup_code.code_partial, user.id)
    return user, issue_tokens(user)


def get_user_devices(user):
    return list(
        UserDevice.objects.filter(user=user)
        .select_related("trust_score")
        .order_by("-last_seen_at", "-created_at")
    )


def get_user_auth_stats(user):
    devices = get_user_devices(user)
    return {
        "userId": str(user.id),
        "email": user.email,
        "totalDevices": len(devices),
        "trustedDevices": sum(1 for device in devices if device.is_trusted),
        "biometricEnabledDevices": sum(1 for device in devices if device.biometric_enabled),
        "authSuccessRate": round(AuthLog.objects.success_rate(user, days=30), 2),
        "recentFailuresCount": AuthLog.objects.recent_failures(user, minutes=60).count(),
        "hasBackupCodes": BackupCode.has_valid_codes(user),
        "backupCodesCount": BackupCode.valid_code_count(user),
        "devices": devices,
    }


def revoke_device(user, device_id):
    """Deactivate the device's biometric tokens and drop its trusted status."""
    device = UserDevice.objects.filter(pk=device_id, user=user).first()
    if device is None:
        raise DeviceNotFoundError("Device not found or access denied")

    with transaction.atomic():
        BiometricToken.objects.filter(user=user, device=device, is_active=True).update(
            is_active=False,
            updated_at=timezone.now(),
        )
        device.is_trusted = False
        device.biometric_enabled = False
        device.save(update_fields=["is_trusted", "biometric_enabled", "updated_at"])
        AuthLog.log_success(user, "email", device=device)

    logger.info("Device %s revoked by user %s", device.id, user.id)
    return device
