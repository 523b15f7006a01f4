"""DRF serializers for biometric enrolment and login."""

from rest_framework import serializers

from pulsezen.models import BiometricToken

from .device import JSONObjectField


class BiometricTokenSerializer(serializers.ModelSerializer):
    """Serializer for BiometricToken model, never exposes the hash"""

    deviceId = serializers.UUIDField(source='device_id', read_only=True)
    biometricType = serializers.CharField(source='biometric_type', read_only=True)
    successCount = serializers.IntegerField(source='success_count', read_only=True)
    challengeAttempts = serializers.IntegerField(source='challenge_attempts', read_only=True)
    lastUsedAt = serializers.DateTimeField(source='last_used_at', read_only=True)
    expiresAt = serializers.DateTimeField(source='expires_at', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = BiometricToken
        fields = [
            'id',
            'deviceId',
            'biometricType',
            'successCount',
            'challengeAttempts',
            'lastUsedAt',
            'expiresAt',
            'isActive',
            'createdAt',
        ]
        read_only_fields = fields


class BiometricEnableSerializer(serializers.Serializer):
    deviceFingerprint = serializers.CharField(source='device_fingerprint', max_length=255)
    biometricType = serializers.ChoiceField(source='biometric_type', choices=BiometricToken.BIOMETRIC_TYPE_CHOICES)
    biometricData = serializers.JSONField(source='biometric_data', required=False, allow_null=True)

    def validate_biometricData(self, value):
        if value is not None and not isinstance(value, dict):
            raise serializers.ValidationError("Biometric data must be an object")
        return value


class BiometricRotateSerializer(serializers.Serializer):
    deviceFingerprint = serializers.CharField(source='device_fingerprint', max_length=255)
    biometricType = serializers.ChoiceField(source='biometric_type', choices=BiometricToken.BIOMETRIC_TYPE_CHOICES)


class BiometricLoginSerializer(serializers.Serializer):
    userId = serializers.UUIDField(source='user_id', required=False, allow_null=True)
    deviceFingerprint = serializers.CharField(source='device_fingerprint', max_length=255)
    biometricType = serializers.ChoiceField(source='biometric_type', choices=BiometricToken.BIOMETRIC_TYPE_CHOICES)
    biometricToken = serializers.CharField(source='biometric_token', required=False, allow_blank=True)
    biometricSignature = serializers.CharField(source='biometric_signature', required=False, allow_blank=True)
    challengeResponse = serializers.CharField(source='challenge_response', required=False, allow_blank=True)
    geolocation = JSONObjectField(required=False, allow_null=True)
    deviceInfo = JSONObjectField(source='device_info', required=False, allow_null=True)
