"""One-time backup codes used when no biometric or PIN is available."""

import secrets
import uuid
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import models, transaction
from django.db.models import Q
from django.utils import timezone

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 8
CODE_TTL_DAYS = 180
DEFAULT_CODE_COUNT = 10


class BackupCodeQuerySet(models.QuerySet):
    def unexpired(self):
        return self.filter(Q(expires_at__isnull=True) | Q(expires_at__gt=timezone.now()))

    def valid_for_user(self, user):
        return self.filter(user=user, is_used=False).unexpired().order_by('-created_at')

    def used_for_user(self, user):
        return self.filter(user=user, is_used=True).order_by('-used_at')


class BackupCode(models.Model):
    """Hashed single-use fallback code"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='backup_codes'
    )
    code_hash = models.CharField(max_length=255)
    code_partial = models.CharField(
        max_length=10,
        help_text="First and last two characters, e.g. AB****YZ"
    )
    is_used = models.BooleanField(default=False)
    used_at = models.DateTimeField(null=True, blank=True)
    used_from_ip = models.CharField(max_length=45, null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BackupCodeQuerySet.as_manager()

    class Meta:
        db_table = 'backup_codes'
        indexes = [
            models.Index(fields=['user', 'is_used'], name='backup_code_user_used_idx'),
            models.Index(fields=['expires_at'], name='backup_code_expires_idx'),
        ]

    def __str__(self):
        return f"{self.code_partial} ({'used' if self.is_used else 'unused'})"

    @staticmethod
    def generate_random_code() -> str:
        return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))

    @staticmethod
    def hash_code(code: str) -> str:
        return make_password(code.strip().upper())

    def verify_code(self, code: str) -> bool:
        if not code:
            return False
        return check_password(code.strip().upper(), self.code_hash)

    @staticmethod
    def get_code_partial(code: str) -> str:
        if len(code) < 4:
            return code
        return f"{code[:2]}****{code[-2:]}"

    @classmethod
    @transaction.atomic
    def generate_codes_for_user(cls, user, count=DEFAULT_CODE_COUNT):
        """
        Replace the user's unused codes with `count` fresh ones.

        Returns `(codes, raw_codes)`; raw codes are only available here.
        """
        now = timezone.now()
        cls.objects.filter(user=user, is_used=False).update(
            is_used=True,
            used_at=now,
            updated_at=now,
        )

        codes = []
        raw_codes = []
        for _ in range(count):
            raw_code = cls.generate_random_code()
            codes.append(
                cls.objects.create(
                    user=user,
                    code_hash=cls.hash_code(raw_code),
                    code_partial=cls.get_code_partial(raw_code),
                    expires_at=now + timedelta(days=CODE_TTL_DAYS),
                )
            )
            raw_codes.append(raw_code)
        return codes, raw_codes

    @classmethod
    def validate_and_use_code(cls, user, code, ip_address=None):
        """
        Redeem `code` for `user`. Returns the consumed `BackupCode` or None.

        The row is claimed with a conditional update so two concurrent
        requests cannot both redeem the same code.
        """
        for backup_code in cls.objects.valid_for_user(user):
            if not backup_code.verify_code(code):
                continue
            now = timezone.now()
            claimed = cls.objects.filter(pk=backup_code.pk, is_used=False).update(
                is_used=True,
                used_at=now,
                used_from_ip=ip_address,
                updated_at=now,
            )
            if not claimed:
                return None
            backup_code.refresh_from_db()
            return backup_code
        return None

    @classmethod
    def has_valid_codes(cls, user) -> bool:
        return cls.objects.valid_for_user(user).exists()

    @classmethod
    def valid_code_count(cls, user) -> int:
        return cls.objects.valid_for_user(user).count()

    def mark_as_used(self, ip_address=None):
        self.is_used = True
        self.used_at = timezone.now()
        self.used_from_ip = ip_address
        self.save(update_fields=['is_used', 'used_at', 'used_from_ip', 'updated_at'])

    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= timezone.now()

    def is_valid(self) -> bool:
        return not self.is_used and not self.is_expired()

    def extend(self, days=CODE_TTL_DAYS):
        self.expires_at = timezone.now() + timedelta(days=days)
        self.save(update_fields=['expires_at', 'updated_at'])
