"""DRF serializers for the user profile and the onboarding form."""

from rest_framework import serializers

from pulsezen.models import UserProfile

from .device import JSONObjectField


class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer for UserProfile model"""

    userId = serializers.UUIDField(source='user_id', read_only=True)
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    displayName = serializers.CharField(source='display_name', read_only=True)
    fullName = serializers.CharField(source='full_name', read_only=True)
    experienceLevel = serializers.CharField(source='experience_level', read_only=True)
    avatarUrl = serializers.CharField(source='avatar_url', read_only=True)
    onboardingCompleted = serializers.BooleanField(source='onboarding_completed', read_only=True)
    isOnboardingComplete = serializers.BooleanField(source='is_onboarding_complete', read_only=True)
    dateOfBirth = serializers.DateField(source='date_of_birth', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = UserProfile
        fields = [
            'id',
            'userId',
            'firstName',
            'lastName',
            'displayName',
            'fullName',
            'sex',
            'age',
            'goals',
            'experienceLevel',
            'avatarUrl',
            'timezone',
            'language',
            'onboardingCompleted',
            'isOnboardingComplete',
            'preferences',
            'dateOfBirth',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    """Every field is optional; only the ones sent are changed."""

    firstName = serializers.CharField(source='first_name', max_length=100, required=False, allow_null=True, allow_blank=True)
    lastName = serializers.CharField(source='last_name', max_length=100, required=False, allow_null=True, allow_blank=True)
    displayName = serializers.CharField(source='display_name', max_length=255, required=False, allow_null=True, allow_blank=True)
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    sex = serializers.ChoiceField(choices=UserProfile.SEX_CHOICES, required=False, allow_null=True)
    age = serializers.IntegerField(min_value=1, max_value=120, required=False, allow_null=True)
    goals = serializers.ListField(child=serializers.CharField(max_length=100), required=False, allow_null=True)
    experienceLevel = serializers.ChoiceField(
        source='experience_level',
        choices=UserProfile.EXPERIENCE_LEVEL_CHOICES,
        required=False,
        allow_null=True,
    )
    avatarUrl = serializers.URLField(source='avatar_url', max_length=500, required=False, allow_null=True)
    timezone = serializers.CharField(max_length=50, required=False)
    language = serializers.CharField(max_length=10, required=False)
    preferences = JSONObjectField(required=False, allow_null=True)


class NotificationPreferencesSerializer(serializers.Serializer):
    reminders = serializers.BooleanField(required=False)
    progress = serializers.BooleanField(required=False)
    tips = serializers.BooleanField(required=False)


class OnboardingSerializer(serializers.Serializer):
    firstName = serializers.CharField(source='first_name', max_length=100, required=False, allow_blank=True)
    lastName = serializers.CharField(source='last_name', max_length=100, required=False, allow_blank=True)
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False)
    goals = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    sex = serializers.ChoiceField(choices=UserProfile.SEX_CHOICES, required=False)
    age = serializers.IntegerField(min_value=1, max_value=120, required=False)
    experienceLevel = serializers.ChoiceField(
        source='experience_level',
        choices=UserProfile.EXPERIENCE_LEVEL_CHOICES,
        required=False,
    )
    preferences = JSONObjectField(required=False)

    # Answers kept in `preferences`
    mentalHealthConcerns = serializers.ListField(
        source='mental_health_concerns',
        child=serializers.CharField(max_length=100),
        required=False,
    )
    preferredActivities = serializers.ListField(
        source='preferred_activities',
        child=serializers.CharField(max_length=100),
        required=False,
    )
    currentStressLevel = serializers.IntegerField(source='current_stress_level', min_value=1, max_value=10, required=False)
    sleepHours = serializers.FloatField(source='sleep_hours', min_value=1, max_value=24, required=False)
    exerciseFrequency = serializers.CharField(source='exercise_frequency', max_length=50, required=False)
    preferredContactMethod = serializers.CharField(source='preferred_contact_method', max_length=50, required=False)
    notificationPreferences = NotificationPreferencesSerializer(source='notification_preferences', required=False)
