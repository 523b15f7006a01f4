from datetime import date

from django.test import TestCase

from pulsezen.models import User, UserProfile
from pulsezen.services import profiles


class UserProfileModelTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="ana@example.com", username="ana@example.com")

    def test_get_or_create_is_idempotent(self):
        first = UserProfile.get_or_create_for_user(self.user)
        second = UserProfile.get_or_create_for_user(self.user)

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(self.user.profile, first)
        self.assertFalse(first.onboarding_completed)
        self.assertEqual(first.timezone, "UTC")
        self.assertEqual(first.language, "en")

    def test_full_name(self):
        profile = UserProfile(user=self.user)
        self.assertIsNone(profile.full_name)

        profile.display_name = "Aninha"
        self.assertEqual(profile.full_name, "Aninha")

        profile.first_name = "Ana"
        self.assertEqual(profile.full_name, "Aninha")

        profile.last_name = "Silva"
        self.assertEqual(profile.full_name, "Ana Silva")

    def test_onboarding_complete_needs_core_answers(self):
        profile = UserProfile(user=self.user, onboarding_completed=True)
        self.assertFalse(profile.is_onboarding_complete)

        profile.first_name = "Ana"
        profile.sex = "MENINA"
        profile.age = 29
        profile.goals = ["sleep"]
        profile.experience_level = "BEGINNER"
        self.assertTrue(profile.is_onboarding_complete)

        profile.goals = []
        self.assertFalse(profile.is_onboarding_complete)

    def test_profile_is_deleted_with_user(self):
        UserProfile.get_or_create_for_user(self.user)

        self.user.delete()

        self.assertFalse(UserProfile.objects.exists())


class ProfileServiceTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="ana@example.com", username="ana@example.com")

    def test_update_changes_only_given_fields(self):
        UserProfile.objects.create(user=self.user, first_name="Ana", last_name="Silva")

        profile = profiles.update_profile(self.user, {"display_name": "Aninha", "age": 29})

        self.assertEqual(profile.first_name, "Ana")
        self.assertEqual(profile.last_name, "Silva")
        self.assertEqual(profile.display_name, "Aninha")
        self.assertEqual(profile.age, 29)

    def test_update_merges_preferences(self):
        UserProfile.objects.create(user=self.user, preferences={"theme": "dark", "sound": True})

        profile = profiles.update_profile(self.user, {"preferences": {"sound": False}})

        self.assertEqual(profile.preferences, {"theme": "dark", "sound": False})

    def test_complete_onboarding_stores_answers_in_preferences(self):
        profile = profiles.complete_onboarding(
            self.user,
            {
                "date_of_birth": date(1995, 4, 12),
                "goals": ["sleep", "focus"],
                "current_stress_level": 6,
                "sleep_hours": 7.5,
                "notification_preferences": {"reminders": True},
                "preferences": {"theme": "dark"},
            },
        )

        profile.refresh_from_db()
        self.assertTrue(profile.onboarding_completed)
        self.assertEqual(profile.date_of_birth, date(1995, 4, 12))
        self.assertEqual(profile.goals, ["sleep", "focus"])
        self.assertEqual(
            profile.preferences,
            {
                "theme": "dark",
                "currentStressLevel": 6,
                "sleepHours": 7.5,
                "notificationPreferences": {"reminders": True},
            },
        )

    def test_complete_onboarding_keeps_existing_preferences(self):
        UserProfile.objects.create(user=self.user, preferences={"theme": "dark"})

        profile = profiles.complete_onboarding(self.user, {"exercise_frequency": "weekly"})

        self.assertEqual(profile.preferences, {"theme": "dark", "exerciseFrequency": "weekly"})
