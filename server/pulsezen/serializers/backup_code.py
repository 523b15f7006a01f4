"""DRF serializers for backup codes."""

from rest_framework import serializers

from pulsezen.models import BackupCode


class BackupCodeSerializer(serializers.ModelSerializer):
    """Serializer for BackupCode model, shows the partial code only"""

    codePartial = serializers.CharField(source='code_partial', read_only=True)
    isUsed = serializers.BooleanField(source='is_used', read_only=True)
    usedAt = serializers.DateTimeField(source='used_at', read_only=True)
    expiresAt = serializers.DateTimeField(source='expires_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = BackupCode
        fields = [
            'id',
            'codePartial',
            'isUsed',
            'usedAt',
            'expiresAt',
            'createdAt',
        ]
        read_only_fields = fields


class UsedBackupCodeSerializer(BackupCodeSerializer):
    usedFromIp = serializers.CharField(source='used_from_ip', read_only=True)

    class Meta(BackupCodeSerializer.Meta):
        fields = BackupCodeSerializer.Meta.fields + ['usedFromIp']
        read_only_fields = fields


class BackupCodeLoginSerializer(serializers.Serializer):
    userId = serializers.UUIDField(source='user_id')
    code = serializers.CharField(max_length=32)
