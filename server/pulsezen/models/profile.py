"""Per-user profile and onboarding answers collected by the mobile app."""

import uuid

from django.conf import settings
from django.db import models


class UserProfile(models.Model):
    """Optional personal details, one row per user, created lazily"""

    SEX_CHOICES = [
        ('MENINO', 'Menino'),
        ('MENINA', 'Menina'),
        ('OTHER', 'Other'),
    ]

    EXPERIENCE_LEVEL_CHOICES = [
        ('BEGINNER', 'Beginner'),
        ('INTERMEDIATE', 'Intermediate'),
        ('ADVANCED', 'Advanced'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile'
    )
    first_name = models.CharField(max_length=100, null=True, blank=True)
    last_name = models.CharField(max_length=100, null=True, blank=True)
    display_name = models.CharField(max_length=255, null=True, blank=True)
    sex = models.CharField(max_length=10, choices=SEX_CHOICES, null=True, blank=True)
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    goals = models.JSONField(
        null=True,
        blank=True,
        help_text="List of goal identifiers picked during onboarding."
    )
    experience_level = models.CharField(
        max_length=20,
        choices=EXPERIENCE_LEVEL_CHOICES,
        null=True,
        blank=True
    )
    avatar_url = models.URLField(max_length=500, null=True, blank=True)
    timezone = models.CharField(max_length=50, default='UTC')
    language = models.CharField(max_length=10, default='en')
    preferences = models.JSONField(
        null=True,
        blank=True,
        help_text="Free-form settings and extra onboarding answers."
    )
    onboarding_completed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_profiles'

    def __str__(self):
        return f"Profile of {self.user_id}"

    @classmethod
    def get_or_create_for_user(cls, user):
        profile, _ = cls.objects.get_or_create(user=user)
        return profile

    @property
    def full_name(self):
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.display_name or self.first_name or self.last_name or None

    @property
    def is_onboarding_complete(self):
        """
        True once onboarding was submitted and the core answers are present.

        `onboarding_completed` alone only records that the form was sent.
        """
        return bool(
            self.onboarding_completed
            and self.first_name
            and self.sex
            and self.age
            and self.goals
            and self.experience_level
        )
