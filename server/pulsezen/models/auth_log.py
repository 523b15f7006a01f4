"""Append-only audit trail of authentication attempts."""

import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Avg
from django.utils import timezone

FAILURE_REASON_MAX_LENGTH = 100
SUSPICIOUS_TRUST_THRESHOLD = 30
SUSPICIOUS_RESPONSE_MS = 10000


def truncate_reason(reason):
    if reason is None or len(reason) <= FAILURE_REASON_MAX_LENGTH:
        return reason
    return reason[: FAILURE_REASON_MAX_LENGTH - 3] + "..."


class AuthLogQuerySet(models.QuerySet):
    def for_user(self, user):
        return self.filter(user=user)

    def recent_failures(self, user, minutes=15):
        since = timezone.now() - timedelta(minutes=minutes)
        return self.filter(
            user=user,
            result=AuthLog.RESULT_FAILED,
            attempted_at__gte=since,
        ).order_by('-attempted_at')

    def success_rate(self, user, days=30) -> float:
        """Percentage of successful attempts over the window, 0 when there are none."""
        since = timezone.now() - timedelta(days=days)
        window = self.filter(user=user, attempted_at__gte=since)
        total = window.count()
        if not total:
            return 0.0
        successful = window.filter(result=AuthLog.RESULT_SUCCESS).count()
        return successful / total * 100

    def average_response_time(self, user, auth_method, days=7) -> float:
        since = timezone.now() - timedelta(days=days)
        average = self.filter(
            user=user,
            auth_method=auth_method,
            result=AuthLog.RESULT_SUCCESS,
            attempted_at__gte=since,
            response_time_ms__isnull=False,
        ).aggregate(value=Avg('response_time_ms'))['value']
        return float(average or 0)


class AuthLog(models.Model):
    """One authentication attempt; rows are never updated after insert"""

    RESULT_SUCCESS = 'success'
    RESULT_FAILED = 'failed'
    RESULT_FALLBACK = 'fallback'
    RESULT_BLOCKED = 'blocked'

    AUTH_METHOD_CHOICES = [
        ('biometric', 'Biometric'),
        ('devicePin', 'Device PIN'),
        ('appPin', 'App PIN'),
        ('email', 'Email'),
        ('sms', 'SMS'),
        ('backupCode', 'Backup code'),
    ]

    RESULT_CHOICES = [
        (RESULT_SUCCESS, 'Success'),
        (RESULT_FAILED, 'Failed'),
        (RESULT_FALLBACK, 'Fallback'),
        (RESULT_BLOCKED, 'Blocked'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='auth_logs'
    )
    device = models.ForeignKey(
        'pulsezen.UserDevice',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='auth_logs'
    )
    auth_method = models.CharField(max_length=20, choices=AUTH_METHOD_CHOICES)
    biometric_type = models.CharField(max_length=20, null=True, blank=True)
    result = models.CharField(max_length=20, choices=RESULT_CHOICES)
    failure_reason = models.CharField(max_length=FAILURE_REASON_MAX_LENGTH, null=True, blank=True)
    ip_address = models.CharField(max_length=45, null=True, blank=True)
    user_agent = models.CharField(max_length=500, null=True, blank=True)
    geolocation = models.JSONField(null=True, blank=True)
    device_info = models.JSONField(null=True, blank=True)
    trust_score_at_time = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True
    )
    response_time_ms = models.IntegerField(null=True, blank=True)
    required_fallback = models.BooleanField(default=False)
    attempted_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuthLogQuerySet.as_manager()

    class Meta:
        db_table = 'auth_logs'
        ordering = ['-attempted_at']
        indexes = [
            models.Index(fields=['user', 'attempted_at'], name='auth_log_user_attempt_idx'),
            models.Index(fields=['auth_method'], name='auth_log_method_idx'),
            models.Index(fields=['result'], name='auth_log_result_idx'),
        ]

    def __str__(self):
        return f"{self.auth_method} {self.result} at {self.attempted_at:%Y-%m-%d %H:%M:%S}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("AuthLog entries are append-only")
        self.failure_reason = truncate_reason(self.failure_reason)
        super().save(*args, **kwargs)

    @classmethod
    def _record(cls, user, result, auth_method, device=None, **fields):
        user_agent = fields.pop('user_agent', None)
        if user_agent:
            user_agent = user_agent[:500]
        return cls.objects.create(
            user=user,
            device=device,
            auth_method=auth_method,
            result=result,
            user_agent=user_agent,
            **fields,
        )

    @classmethod
    def log_success(cls, user, auth_method, device=None, biometric_type=None, ip_address=None,
                    user_agent=None, geolocation=None, device_info=None, trust_score=None,
                    response_time_ms=None):
        return cls._record(
            user,
            cls.RESULT_SUCCESS,
            auth_method,
            device=device,
            biometric_type=biometric_type,
            ip_address=ip_address,
            user_agent=user_agent,
            geolocation=geolocation,
            device_info=device_info,
            trust_score_at_time=trust_score,
            response_time_ms=response_time_ms,
        )

    @classmethod
    def log_failure(cls, user, auth_method, failure_reason, device=None, biometric_type=None,
                    ip_address=None, user_agent=None, geolocation=None, device_info=None,
                    trust_score=None, response_time_ms=None):
        return cls._record(
            user,
            cls.RESULT_FAILED,
            auth_method,
            device=device,
            biometric_type=biometric_type,
            failure_reason=failure_reason,
            ip_address=ip_address,
            user_agent=user_agent,
            geolocation=geolocation,
            device_info=device_info,
            trust_score_at_time=trust_score,
            response_time_ms=response_time_ms,
        )

    @classmethod
    def log_fallback(cls, user, original_method, fallback_method, device=None, ip_address=None,
                     user_agent=None, trust_score=None, response_time_ms=None):
        return cls._record(
            user,
            cls.RESULT_FALLBACK,
            fallback_method,
            device=device,
            failure_reason=f"Fallback from {original_method} to {fallback_method}",
            ip_address=ip_address,
            user_agent=user_agent,
            trust_score_at_time=trust_score,
            response_time_ms=response_time_ms,
            required_fallback=True,
        )

    @classmethod
    def log_blocked(cls, user, auth_method, block_reason, device=None, ip_address=None,
                    user_agent=None, trust_score=None):
        return cls._record(
            user,
            cls.RESULT_BLOCKED,
            auth_method,
            device=device,
            failure_reason=block_reason,
            ip_address=ip_address,
            user_agent=user_agent,
            trust_score_at_time=trust_score,
        )

    def is_successful(self) -> bool:
        return self.result == self.RESULT_SUCCESS

    def is_failed(self) -> bool:
        return self.result == self.RESULT_FAILED

    def is_fallback(self) -> bool:
        return self.result == self.RESULT_FALLBACK

    def is_blocked(self) -> bool:
        return self.result == self.RESULT_BLOCKED

    def is_suspicious(self) -> bool:
        """Failed with a very low trust score, or answered unusually slowly."""
        low_trust = self.is_failed() and (self.trust_score_at_time or 0) < SUSPICIOUS_TRUST_THRESHOLD
        slow = (self.response_time_ms or 0) > SUSPICIOUS_RESPONSE_MS
        return low_trust or slow
