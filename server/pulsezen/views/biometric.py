from django.conf import settings
from django.utils import timezone
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from pulsezen.serializers import (
    BiometricEnableSerializer,
    BiometricLoginSerializer,
    BiometricRotateSerializer,
    BiometricTokenSerializer,
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


def _validation_error(serializer):
    return Response(
        format_error(
            code="validation_error",
            message="Missing required fields",
            details=serializer.errors,
        ),
        status=status.HTTP_400_BAD_REQUEST,
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def biometric_enable(request):
    """
    Enrol a biometric on one of the user's devices.

    POST /api/auth/biometric/enable/
    {
        "deviceFingerprint": "abc123",
        "biometricType": "faceId",
        "biometricData": {"publicKey": "..."}
    }

    The raw `biometricToken` in the response is returned once and must be
    stored by the client.
    """
    serializer = BiometricEnableSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    data = serializer.validated_data
    try:
        token, raw_token = biometric_auth.enable_biometric_auth(
            request.user,
            data["device_fingerprint"],
            data["biometric_type"],
            data.get("biometric_data"),
        )
    except PulsezenError as exc:
        return error_response(exc)

    return Response(
        format_success(
            {
                "biometricEnabled": True,
                "biometricType": token.biometric_type,
                "token": BiometricTokenSerializer(token).data,
                "biometricToken": raw_token,
            }
        )
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def biometric_rotate(request):
    serializer = BiometricRotateSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    data = serializer.validated_data
    try:
        token, raw_token = biometric_auth.rotate_biometric_token(
            request.user,
            data["device_fingerprint"],
            data["biometric_type"],
        )
    except PulsezenError as exc:
        return error_response(exc)

    return Response(
        format_success(
            {
                "token": BiometricTokenSerializer(token).data,
                "biometricToken": raw_token,
            }
        )
    )


@ratelimit(group="biometric_login", key="ip", rate="10/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def biometric_login(request):
    """
    Log in with a previously enrolled biometric.

    POST /api/auth/biometric/login/
    {
        "deviceFingerprint": "abc123",
        "biometricType": "faceId",
        "biometricToken": "<raw token from enable>",
        "biometricSignature": "<optional hex signature>"
    }

    Failures answer 401 with `fallbackMethods` in the error details when the
    device can offer another way in.
    """
    serializer = BiometricLoginSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    result = biometric_auth.authenticate_with_biometric(
        serializer.validated_data,
        ip_address=client_ip(request),
        user_agent=user_agent(request),
    )

    if not result.success:
        return Response(
            format_error(
                code="biometric_auth_failed",
                message=result.error,
                details=result.error_details(),
            ),
            status=status.HTTP_401_UNAUTHORIZED,
        )

    expires_at = timezone.now() + settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
    return Response(
        format_success(
            {
                "token": result.tokens["access"],
                "refreshToken": result.tokens["refresh"],
                "method": result.method,
                "trustScore": result.trust_score,
                "deviceId": str(result.device.id),
                "expiresAt": expires_at.isoformat(),
                "user": UserSerializer(result.user).data,
            }
        )
    )
