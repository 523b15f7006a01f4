from django.conf import settings
from django.utils import timezone
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from pulsezen.models import BackupCode
from pulsezen.serializers import (
    BackupCodeLoginSerializer,
    BackupCodeSerializer,
    UsedBackupCodeSerializer,
    UserSerializer,
)
from pulsezen.services import biometric_auth
from pulsezen.utils import (
    PulsezenError,
    client_ip,
    error_response,
    format_error,
    format_success,
    user_agent,
)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def backup_codes_generate(request):
    """
    Replace the user's backup codes with a fresh set.

    Raw codes are only returned by this call.
    """
    codes, raw_codes = BackupCode.generate_codes_for_user(request.user)
    return Response(
        format_success(
            {
                "codes": BackupCodeSerializer(codes, many=True).data,
                "rawCodes": raw_codes,
            },
            message="Save these backup codes in a secure location. They will not be shown again.",
        )
    )


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def backup_codes_list(request):
    valid_codes = list(BackupCode.objects.valid_for_user(request.user))
    used_codes = list(BackupCode.objects.used_for_user(request.user))
    return Response(
        format_success(
            {
                "validCodes": BackupCodeSerializer(valid_codes, many=True).data,
                "usedCodes": UsedBackupCodeSerializer(used_codes, many=True).data,
                "totalValid": len(valid_codes),
                "totalUsed": len(used_codes),
            }
        )
    )


@ratelimit(group="backup_code_login", key="ip", rate="5/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def backup_code_login(request):
    """
    Log in with a one-time backup code.

    POST /api/auth/backup-code/login/
    { "userId": "<uuid>", "code": "AB3DE7GH" }
    """
    serializer = BackupCodeLoginSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            format_error(
                code="validation_error",
                message="Missing required fields",
                details=serializer.errors,
            ),
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        user, tokens = biometric_auth.authenticate_with_backup_code(
            serializer.validated_data["user_id"],
            serializer.validated_data["code"],
            ip_address=client_ip(request),
            user_agent=user_agent(request),
        )
    except PulsezenError as exc:
        return error_response(exc)

    expires_at = timezone.now() + settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
    return Response(
        format_success(
            {
                "token": tokens["access"],
                "refreshToken": tokens["refresh"],
                "method": "backupCode",
                "expiresAt": expires_at.isoformat(),
                "user": UserSerializer(user).data,
            }
        )
    )
