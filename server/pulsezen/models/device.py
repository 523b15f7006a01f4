"""Registered client devices and their trust scores.

A device's `security_level` is a coarse rating derived from the capability
flags the mobile app reports at registration time. `DeviceTrustScore` holds
the per-device numeric trust fields; its calculation helpers are only run by
the recalculation task, never on the request path.
"""

import math
import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import F
from django.utils import timezone

SECURITY_PREMIUM = "premium"
SECURITY_PROTECTED = "protected"
SECURITY_BASIC = "basic"
SECURITY_INSECURE = "insecure"

BIOMETRIC_READY_LEVELS = {SECURITY_PREMIUM, SECURITY_PROTECTED}

DEFAULT_TRUST_SCORE = Decimal("50.00")
LOCATION_HISTORY_LIMIT = 50


def calculate_security_level(capabilities) -> str:
    """
    Derive a security level from device capability flags.

    Priority order:
    - premium: biometrics and a device passcode
    - protected: passcode and screen lock
    - basic: screen lock only
    - insecure: nothing

    Missing flags count as False, so every input maps to a level.
    """
    capabilities = capabilities or {}
    has_biometrics = bool(capabilities.get("hasBiometrics"))
    has_passcode = bool(capabilities.get("hasDevicePasscode"))
    has_screen_lock = bool(capabilities.get("hasScreenLock"))

    if has_biometrics and has_passcode:
        return SECURITY_PREMIUM
    if has_passcode and has_screen_lock:
        return SECURITY_PROTECTED
    if has_screen_lock:
        return SECURITY_BASIC
    return SECURITY_INSECURE


def _clamp_score(value) -> Decimal:
    value = min(100.0, max(0.0, float(value)))
    return Decimal(str(round(value, 2))).quantize(Decimal("0.01"))


class UserDevice(models.Model):
    """A client device registered by a user"""

    DEVICE_TYPE_CHOICES = [
        ('mobile', 'Mobile'),
        ('tablet', 'Tablet'),
        ('desktop', 'Desktop'),
    ]

    PLATFORM_CHOICES = [
        ('ios', 'iOS'),
        ('android', 'Android'),
        ('web', 'Web'),
    ]

    SECURITY_LEVEL_CHOICES = [
        (SECURITY_PREMIUM, 'Premium'),
        (SECURITY_PROTECTED, 'Protected'),
        (SECURITY_BASIC, 'Basic'),
        (SECURITY_INSECURE, 'Insecure'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='devices'
    )
    fingerprint = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stable device identifier computed by the mobile app"
    )
    device_name = models.CharField(max_length=100)
    device_type = models.CharField(max_length=50, choices=DEVICE_TYPE_CHOICES)
    platform = models.CharField(max_length=50, choices=PLATFORM_CHOICES)
    os_version = models.CharField(max_length=50, null=True, blank=True)
    app_version = models.CharField(max_length=50, null=True, blank=True)
    capabilities = models.JSONField(
        default=dict,
        help_text="hasBiometrics, biometricTypes, hasDevicePasscode, hasScreenLock, ..."
    )
    security_level = models.CharField(
        max_length=20,
        choices=SECURITY_LEVEL_CHOICES,
        blank=True,
        help_text="Derived from capabilities"
    )
    is_trusted = models.BooleanField(default=False)
    biometric_enabled = models.BooleanField(default=False)
    last_seen_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_devices'
        indexes = [
            models.Index(fields=['security_level'], name='user_device_sec_level_idx'),
            models.Index(fields=['is_trusted'], name='user_device_trusted_idx'),
            models.Index(fields=['last_seen_at'], name='user_device_last_seen_idx'),
            models.Index(
                fields=['fingerprint', 'biometric_enabled', 'user'],
                name='idx_device_auth_lookup',
            ),
        ]

    def __str__(self):
        return f"{self.device_name} ({self.platform}, {self.security_level})"

    def save(self, *args, **kwargs):
        if self._state.adding and not self.security_level:
            self.security_level = self.calculate_security_level()
        super().save(*args, **kwargs)

    def has_capability(self, name: str) -> bool:
        return bool((self.capabilities or {}).get(name))

    def calculate_security_level(self) -> str:
        return calculate_security_level(self.capabilities)

    def update_security_level(self):
        self.security_level = self.calculate_security_level()
        self.save(update_fields=['security_level', 'updated_at'])

    def update_last_seen(self):
        self.last_seen_at = timezone.now()
        self.save(update_fields=['last_seen_at', 'updated_at'])

    def is_high_trust(self) -> bool:
        return self.is_trusted and self.security_level == SECURITY_PREMIUM

    def can_use_biometrics(self) -> bool:
        """Biometrics need hardware support, user opt-in and a locked-down device."""
        return (
            self.has_capability('hasBiometrics')
            and self.biometric_enabled
            and self.security_level in BIOMETRIC_READY_LEVELS
        )


class DeviceTrustScore(models.Model):
    """Per-device trust rating (0-100) and the counters it is computed from"""

    WEIGHTS = {
        'base': 0.3,
        'behavior': 0.4,
        'location': 0.2,
        'time': 0.1,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    device = models.OneToOneField(
        UserDevice,
        on_delete=models.CASCADE,
        related_name='trust_score'
    )
    base_score = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TRUST_SCORE)
    behavior_score = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TRUST_SCORE)
    location_score = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TRUST_SCORE)
    time_score = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TRUST_SCORE)
    final_score = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TRUST_SCORE)
    login_frequency = models.IntegerField(default=0)
    successful_auths = models.IntegerField(default=0)
    failed_auths = models.IntegerField(default=0)
    location_history = models.JSONField(
        null=True,
        blank=True,
        help_text="Most recent login locations, newest last"
    )
    usage_patterns = models.JSONField(
        null=True,
        blank=True,
        help_text="dailyUsageHours, weeklyUsageDays, sessionDurations, featureUsage"
    )
    last_calculated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'device_trust_scores'
        indexes = [
            models.Index(fields=['final_score'], name='trust_score_final_idx'),
            models.Index(fields=['last_calculated_at'], name='trust_score_calc_at_idx'),
        ]

    def __str__(self):
        return f"Trust {self.final_score} ({self.device_id})"

    def calculate_base_score(self) -> Decimal:
        device = self.device
        score = 50

        if device.has_capability('hasBiometrics'):
            score += 20
        if device.has_capability('hasDevicePasscode'):
            score += 15
        if device.has_capability('hasScreenLock'):
            score += 10

        if device.platform == 'ios':
            score += 10
        if device.platform == 'android' and device.os_version:
            try:
                major = int(device.os_version.split('.')[0])
            except ValueError:
                major = 0
            if major >= 11:
                score += 8

        return _clamp_score(score)

    def calculate_behavior_score(self) -> Decimal:
        score = 50.0

        total = self.successful_auths + self.failed_auths
        if total > 0:
            score = self.successful_auths / total * 100

        # The two penalties stack.
        if self.failed_auths > 5:
            score -= 20
        if self.failed_auths > 10:
            score -= 40

        if self.login_frequency > 10:
            score += 10

        return _clamp_score(score)

    def calculate_location_score(self) -> Decimal:
        score = 50
        history = self.location_history or []
        if not history:
            return _clamp_score(score)

        unique_countries = len({entry.get('country') for entry in history})
        unique_ips = len({entry.get('ip') for entry in history})

        if unique_countries == 1:
            score += 20
        if unique_ips <= 3:
            score += 15
        if unique_countries > 3:
            score -= 30
        if unique_ips > 10:
            score -= 20

        return _clamp_score(score)

    def calculate_time_score(self) -> Decimal:
        score = 50
        patterns = self.usage_patterns
        if not patterns:
            return _clamp_score(score)

        daily_hours = patterns.get('dailyUsageHours') or []
        weekly_days = patterns.get('weeklyUsageDays') or []

        if daily_hours:
            spread = self._std_dev(daily_hours)
            if spread < 2:
                score += 20
            elif spread < 4:
                score += 10

        if weekly_days:
            weekend = sum(1 for day in weekly_days if day in (0, 6))
            weekday = sum(1 for day in weekly_days if 0 < day < 6)
            if weekday > weekend:
                score += 10

        return _clamp_score(score)

    @staticmethod
    def _std_dev(values) -> float:
        mean = sum(values) / len(values)
        return math.sqrt(sum((value - mean) ** 2 for value in values) / len(values))

    def calculate_final_score(self) -> Decimal:
        """Recompute every component, persist them and return the final score."""
        self.base_score = self.calculate_base_score()
        self.behavior_score = self.calculate_behavior_score()
        self.location_score = self.calculate_location_score()
        self.time_score = self.calculate_time_score()

        weighted = (
            float(self.base_score) * self.WEIGHTS['base']
            + float(self.behavior_score) * self.WEIGHTS['behavior']
            + float(self.location_score) * self.WEIGHTS['location']
            + float(self.time_score) * self.WEIGHTS['time']
        )
        self.final_score = _clamp_score(math.floor(weighted + 0.5))
        self.last_calculated_at = timezone.now()
        self.save()
        return self.final_score

    def record_successful_auth(self):
        DeviceTrustScore.objects.filter(pk=self.pk).update(
            successful_auths=F('successful_auths') + 1,
            login_frequency=F('login_frequency') + 1,
            updated_at=timezone.now(),
        )
        self.refresh_from_db(fields=['successful_auths', 'login_frequency', 'updated_at'])

    def record_failed_auth(self):
        DeviceTrustScore.objects.filter(pk=self.pk).update(
            failed_auths=F('failed_auths') + 1,
            updated_at=timezone.now(),
        )
        self.refresh_from_db(fields=['failed_auths', 'updated_at'])

    def add_location_data(self, location: dict):
        history = list(self.location_history or [])
        history.append(location)
        self.location_history = history[-LOCATION_HISTORY_LIMIT:]
        self.save(update_fields=['location_history', 'updated_at'])

    def update_usage_patterns(self, patterns: dict):
        current = self.usage_patterns or {
            'dailyUsageHours': [],
            'weeklyUsageDays': [],
            'sessionDurations': [],
            'featureUsage': {},
        }
        self.usage_patterns = {**current, **patterns}
        self.save(update_fields=['usage_patterns', 'updated_at'])

    def trust_level(self) -> str:
        if self.final_score >= 80:
            return 'high'
        if self.final_score >= 60:
            return 'medium'
        if self.final_score >= 40:
            return 'low'
        return 'very_low'

    def is_trustworthy(self) -> bool:
        return self.final_score >= 70

    def requires_additional_verification(self) -> bool:
        return self.final_score < 50
