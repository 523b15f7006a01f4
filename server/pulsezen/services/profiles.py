"""Profile edits and the onboarding form."""

import logging

from django.db import transaction

from pulsezen.models import UserProfile

logger = logging.getLogger(__name__)

# Onboarding answers without a profile column, stored under these preference keys
ONBOARDING_PREFERENCE_KEYS = {
    "mental_health_concerns": "mentalHealthConcerns",
    "preferred_activities": "preferredActivities",
    "current_stress_level": "currentStressLevel",
    "sleep_hours": "sleepHours",
    "exercise_frequency": "exerciseFrequency",
    "preferred_contact_method": "preferredContactMethod",
    "notification_preferences": "notificationPreferences",
}


def get_profile(user):
    return UserProfile.get_or_create_for_user(user)


def _apply(profile, data):
    for field, value in data.items():
        if field == "preferences":
            value = {**(profile.preferences or {}), **(value or {})}
        setattr(profile, field, value)


def update_profile(user, data):
    """
    Change only the profile fields present in `data`.

    `preferences` is merged into the stored object rather than replacing it.
    """
    with transaction.atomic():
        profile = UserProfile.get_or_create_for_user(user)
        profile = UserProfile.objects.select_for_update().get(pk=profile.pk)
        _apply(profile, data)
        profile.save()
    logger.info("Profile updated for user %s", user.id)
    return profile


def complete_onboarding(user, data):
    """Store the onboarding answers and mark onboarding as done."""
    data = dict(data)
    answers = {
        key: data.pop(field)
        for field, key in ONBOARDING_PREFERENCE_KEYS.items()
        if field in data
    }
    if answers:
        data["preferences"] = {**(data.get("preferences") or {}), **answers}

    with transaction.atomic():
        profile = UserProfile.get_or_create_for_user(user)
        profile = UserProfile.objects.select_for_update().get(pk=profile.pk)
        _apply(profile, data)
        profile.onboarding_completed = True
        profile.save()
    logger.info("Onboarding completed for user %s", user.id)
    return profile
