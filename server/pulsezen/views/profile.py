from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from pulsezen.serializers import (
    OnboardingSerializer,
    ProfileUpdateSerializer,
    UserProfileSerializer,
    UserSerializer,
)
from pulsezen.services import profiles
from pulsezen.utils import format_error, format_success


def _validation_error(serializer):
    return Response(
        format_error(
            code="validation_error",
            message="Invalid profile data",
            details=serializer.errors,
        ),
        status=status.HTTP_400_BAD_REQUEST,
    )


@api_view(["GET", "PUT"])
@permission_classes([IsAuthenticated])
def auth_profile(request):
    """
    GET returns the account with its profile, creating an empty profile on first access.
    PUT changes the profile fields present in the body.

    PUT /api/auth/profile/
    {
        "displayName": "Ana",
        "dateOfBirth": "1995-04-12",
        "sex": "MENINA",
        "avatarUrl": "https://cdn.example.com/ana.png"
    }
    """
    if request.method == "PUT":
        serializer = ProfileUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return _validation_error(serializer)

        profile = profiles.update_profile(request.user, serializer.validated_data)
        return Response(
            format_success(
                {
                    "user": UserSerializer(request.user).data,
                    "profile": UserProfileSerializer(profile).data,
                },
                message="Profile updated successfully",
            )
        )

    profile = profiles.get_profile(request.user)
    return Response(
        format_success(
            {
                "id": str(request.user.id),
                "email": request.user.email,
                "emailVerified": request.user.email_verified,
                "profile": UserProfileSerializer(profile).data,
            }
        )
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def complete_onboarding(request):
    """
    Save the onboarding answers from the mobile app and flag onboarding as done.

    POST /api/auth/complete-onboarding/
    {
        "dateOfBirth": "1995-04-12",
        "goals": ["sleep", "focus"],
        "currentStressLevel": 6,
        "sleepHours": 7,
        "notificationPreferences": {"reminders": true}
    }
    """
    serializer = OnboardingSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    profile = profiles.complete_onboarding(request.user, serializer.validated_data)
    return Response(
        format_success(
            {"profile": UserProfileSerializer(profile).data},
            message="Onboarding completed successfully",
        )
    )
