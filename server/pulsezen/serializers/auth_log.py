"""DRF serializer for auth log entries."""

from rest_framework import serializers

from pulsezen.models import AuthLog


class AuthLogSerializer(serializers.ModelSerializer):
    """Serializer for AuthLog model"""

    authMethod = serializers.CharField(source='auth_method', read_only=True)
    biometricType = serializers.CharField(source='biometric_type', read_only=True)
    failureReason = serializers.CharField(source='failure_reason', read_only=True)
    ipAddress = serializers.CharField(source='ip_address', read_only=True)
    trustScoreAtTime = serializers.DecimalField(
        source='trust_score_at_time', max_digits=5, decimal_places=2, read_only=True
    )
    responseTimeMs = serializers.IntegerField(source='response_time_ms', read_only=True)
    requiredFallback = serializers.BooleanField(source='required_fallback', read_only=True)
    attemptedAt = serializers.DateTimeField(source='attempted_at', read_only=True)

    class Meta:
        model = AuthLog
        fields = [
            'id',
            'authMethod',
            'biometricType',
            'result',
            'failureReason',
            'ipAddress',
            'geolocation',
            'trustScoreAtTime',
            'responseTimeMs',
            'requiredFallback',
            'attemptedAt',
        ]
        read_only_fields = fields
