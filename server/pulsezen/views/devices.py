from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from pulsezen.serializers import (
    DeviceCapabilitiesSerializer,
    DeviceRegistrationSerializer,
    UserDeviceSerializer,
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
def device_register(request):
    """
    Register the calling device, or refresh it if the fingerprint is known.

    POST /api/auth/device/register/
    {
        "fingerprint": "abc123",
        "deviceName": "iPhone",
        "deviceType": "mobile",
        "platform": "ios",
        "capabilities": {"hasBiometrics": true, "hasDevicePasscode": true}
    }
    """
    serializer = DeviceRegistrationSerializer(data=request.data)
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
        device, created = biometric_auth.register_device(
            request.user,
            serializer.validated_data,
            ip_address=client_ip(request),
            user_agent=user_agent(request),
        )
    except PulsezenError as exc:
        return error_response(exc)

    payload = {
        "device": UserDeviceSerializer(device).data,
        "securityLevel": device.security_level,
        "canUseBiometrics": device.can_use_biometrics(),
        "trustScore": float(device.trust_score.final_score),
    }
    return Response(
        format_success(payload),
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def device_list(request):
    devices = biometric_auth.get_user_devices(request.user)
    return Response(
        format_success(
            {
                "devices": UserDeviceSerializer(devices, many=True).data,
                "totalDevices": len(devices),
                "trustedDevices": sum(1 for device in devices if device.is_trusted),
                "biometricEnabledDevices": sum(1 for device in devices if device.biometric_enabled),
            }
        )
    )


@api_view(["DELETE"])
@permission_classes([IsAuthenticated])
def device_revoke(request, device_id):
    try:
        biometric_auth.revoke_device(request.user, device_id)
    except PulsezenError as exc:
        return error_response(exc)

    return Response(format_success(None, message="Device revoked successfully"))


@ratelimit(group="device_capabilities", key="ip", rate="30/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def device_capabilities(request):
    """
    Report the security level and recommendations for a capability set.

    POST /api/auth/device/capabilities/
    { "capabilities": {"hasScreenLock": true} }
    """
    serializer = DeviceCapabilitiesSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            format_error(
                code="validation_error",
                message="Device capabilities are required",
                details=serializer.errors,
            ),
            status=status.HTTP_400_BAD_REQUEST,
        )

    return Response(
        format_success(biometric_auth.describe_capabilities(serializer.validated_data["capabilities"]))
    )
