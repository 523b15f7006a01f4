"""Custom user model used by the `pulsezen` Django app.

Accounts are email/password based. The email doubles as the Django username so
the stock auth machinery (admin, `authenticate`, password hashers) keeps
working. Accounts are never hard-deleted from the API: `soft_delete` stamps
`deleted_at` and deactivates the user, which also stops its JWTs from
authenticating.
"""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Account root owning devices, biometric tokens, auth logs and backup codes"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(
        unique=True,
        help_text="Login identifier, also stored in username."
    )
    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user confirmed ownership of the email address."
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Set when the account was soft-deleted."
    )

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["email_verified"], name="users_email_verified_idx"),
        ]

    def save(self, *args, **kwargs):
        """Keep username aligned with email so either can be used to look the user up"""
        if self.email:
            self.email = self.email.strip().lower()
            if not self.username:
                self.username = self.email
        super().save(*args, **kwargs)

    @property
    def is_deleted(self):
        """Return True once the account has been soft-deleted."""
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.is_active = False
        self.save(update_fields=["deleted_at", "is_active", "updated_at"])

    def __str__(self):
        """Return a human-readable identifier for the user."""
        return self.email or self.username
