"""Per-device biometric credential handles.

Only a salted hash of the opaque token is stored. The raw value is handed to
the client once, on creation or rotation, and never persisted or logged.
"""

import secrets
import uuid
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

TOKEN_TTL_DAYS = 30


class BiometricTokenQuerySet(models.QuerySet):
    def valid(self):
        """Active tokens that have no expiry or have not expired yet."""
        now = timezone.now()
        return self.filter(is_active=True).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=now)
        )

    def expired(self):
        return self.filter(is_active=True, expires_at__lte=timezone.now())


class BiometricToken(models.Model):
    """Biometric credential handle bound to one device and one biometric type"""

    BIOMETRIC_TYPE_CHOICES = [
        ('faceId', 'Face ID'),
        ('touchId', 'Touch ID'),
        ('fingerprint', 'Fingerprint'),
        ('iris', 'Iris'),
        ('voice', 'Voice'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='biometric_tokens'
    )
    device = models.ForeignKey(
        'pulsezen.UserDevice',
        on_delete=models.CASCADE,
        related_name='biometric_tokens'
    )
    token_hash = models.CharField(
        max_length=255,
        help_text="Password-hasher digest of the raw token"
    )
    biometric_type = models.CharField(max_length=20, choices=BIOMETRIC_TYPE_CHOICES)
    biometric_data = models.JSONField(
        null=True,
        blank=True,
        help_text="templateHash, publicKey, challenge, signature, metadata"
    )
    challenge_attempts = models.IntegerField(default=0)
    success_count = models.IntegerField(default=0)
    last_used_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BiometricTokenQuerySet.as_manager()

    class Meta:
        db_table = 'biometric_tokens'
        indexes = [
            models.Index(fields=['user', 'device'], name='bio_token_user_device_idx'),
            models.Index(fields=['biometric_type'], name='bio_token_type_idx'),
            models.Index(fields=['is_active'], name='bio_token_active_idx'),
            models.Index(fields=['expires_at'], name='bio_token_expires_idx'),
        ]

    def __str__(self):
        return f"{self.biometric_type} token ({self.device_id})"

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(32)

    @staticmethod
    def hash_token(raw_token: str) -> str:
        return make_password(raw_token)

    def verify_token(self, raw_token: str) -> bool:
        if not raw_token:
            return False
        return check_password(raw_token, self.token_hash)

    @classmethod
    def create_for_device(cls, user, device, biometric_type, biometric_data=None):
        """
        Create a fresh token for `device` and return `(token, raw_token)`.

        The raw token is the only copy of the secret; callers must hand it to
        the client and drop it.
        """
        raw_token = cls.generate_token()
        token = cls.objects.create(
            user=user,
            device=device,
            token_hash=cls.hash_token(raw_token),
            biometric_type=biometric_type,
            biometric_data=biometric_data,
            expires_at=timezone.now() + timedelta(days=TOKEN_TTL_DAYS),
        )
        return token, raw_token

    def rotate(self) -> str:
        raw_token = self.generate_token()
        self.token_hash = self.hash_token(raw_token)
        self.challenge_attempts = 0
        self.expires_at = timezone.now() + timedelta(days=TOKEN_TTL_DAYS)
        self.save(update_fields=['token_hash', 'challenge_attempts', 'expires_at', 'updated_at'])
        return raw_token

    def record_usage(self):
        now = timezone.now()
        BiometricToken.objects.filter(pk=self.pk).update(
            success_count=F('success_count') + 1,
            last_used_at=now,
            updated_at=now,
        )
        self.refresh_from_db(fields=['success_count', 'last_used_at', 'updated_at'])

    def record_attempt(self):
        BiometricToken.objects.filter(pk=self.pk).update(
            challenge_attempts=F('challenge_attempts') + 1,
            updated_at=timezone.now(),
        )
        self.refresh_from_db(fields=['challenge_attempts', 'updated_at'])

    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= timezone.now()

    def is_valid(self) -> bool:
        return self.is_active and not self.is_expired()

    def deactivate(self):
        self.is_active = False
        self.save(update_fields=['is_active', 'updated_at'])

    @property
    def public_key(self):
        return (self.biometric_data or {}).get('publicKey')
