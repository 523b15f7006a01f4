"""DRF serializers for devices and capability checks."""

from rest_framework import serializers

from pulsezen.models import UserDevice


class JSONObjectField(serializers.JSONField):
    """JSON field that only accepts an object"""

    default_error_messages = {
        "not_an_object": "Must be an object",
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value is not None and not isinstance(value, dict):
            self.fail("not_an_object")
        return value


class CapabilitiesField(JSONObjectField):
    """JSON object of capability flags reported by the mobile app"""

    default_error_messages = {
        "not_an_object": "Capabilities must be an object",
    }


class UserDeviceSerializer(serializers.ModelSerializer):
    """Serializer for UserDevice model"""

    deviceName = serializers.CharField(source='device_name')
    deviceType = serializers.CharField(source='device_type')
    osVersion = serializers.CharField(source='os_version')
    appVersion = serializers.CharField(source='app_version')
    securityLevel = serializers.CharField(source='security_level')
    isTrusted = serializers.BooleanField(source='is_trusted')
    biometricEnabled = serializers.BooleanField(source='biometric_enabled')
    canUseBiometrics = serializers.BooleanField(source='can_use_biometrics')
    trustScore = serializers.SerializerMethodField()
    lastSeenAt = serializers.DateTimeField(source='last_seen_at')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = UserDevice
        fields = [
            'id',
            'fingerprint',
            'deviceName',
            'deviceType',
            'platform',
            'osVersion',
            'appVersion',
            'capabilities',
            'securityLevel',
            'isTrusted',
            'biometricEnabled',
            'canUseBiometrics',
            'trustScore',
            'lastSeenAt',
            'createdAt',
        ]
        read_only_fields = fields

    def get_trustScore(self, obj) -> float:
        trust_score = getattr(obj, 'trust_score', None)
        return float(trust_score.final_score) if trust_score is not None else 0.0


class DeviceRegistrationSerializer(serializers.Serializer):
    fingerprint = serializers.CharField(max_length=255)
    deviceName = serializers.CharField(source='device_name', max_length=100)
    deviceType = serializers.ChoiceField(source='device_type', choices=UserDevice.DEVICE_TYPE_CHOICES)
    platform = serializers.ChoiceField(choices=UserDevice.PLATFORM_CHOICES)
    osVersion = serializers.CharField(source='os_version', max_length=50, required=False, allow_null=True, allow_blank=True)
    appVersion = serializers.CharField(source='app_version', max_length=50, required=False, allow_null=True, allow_blank=True)
    capabilities = CapabilitiesField()
    geolocation = JSONObjectField(required=False, allow_null=True)
    deviceInfo = JSONObjectField(source='device_info', required=False, allow_null=True)


class DeviceCapabilitiesSerializer(serializers.Serializer):
    capabilities = CapabilitiesField()
