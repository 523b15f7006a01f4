from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from pulsezen.models import AuthLog, BackupCode, BiometricToken, DeviceTrustScore, User, UserDevice, UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    readonly_fields = ["onboarding_completed", "created_at", "updated_at"]


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for custom User model."""

    list_display = ["email", "email_verified", "is_active", "deleted_at", "created_at"]
    list_filter = ["email_verified", "is_active", "created_at"]
    search_fields = ["email", "first_name", "last_name"]
    readonly_fields = ["created_at", "updated_at", "deleted_at"]
    inlines = [UserProfileInline]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal Info", {"fields": ("first_name", "last_name", "email_verified")}),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
        ("Important Dates", {"fields": ("last_login", "created_at", "updated_at", "deleted_at")}),
    )

    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "password1", "password2")}),
    )

    ordering = ["-created_at"]


class DeviceTrustScoreInline(admin.StackedInline):
    model = DeviceTrustScore
    can_delete = False
    readonly_fields = [
        "base_score",
        "behavior_score",
        "location_score",
        "time_score",
        "final_score",
        "successful_auths",
        "failed_auths",
        "login_frequency",
        "last_calculated_at",
    ]
    exclude = ["location_history", "usage_patterns"]


@admin.register(UserDevice)
class UserDeviceAdmin(admin.ModelAdmin):
    """Admin for UserDevice model."""

    list_display = [
        "device_name",
        "user",
        "platform",
        "security_level",
        "is_trusted",
        "biometric_enabled",
        "last_seen_at",
    ]
    list_filter = ["platform", "device_type", "security_level", "is_trusted", "biometric_enabled"]
    search_fields = ["device_name", "fingerprint", "user__email"]
    readonly_fields = ["fingerprint", "security_level", "created_at", "updated_at", "last_seen_at"]
    inlines = [DeviceTrustScoreInline]

    actions = ["revoke_devices"]

    def revoke_devices(self, request, queryset):
        """Untrust devices and deactivate their biometric tokens."""
        BiometricToken.objects.filter(device__in=queryset).update(is_active=False)
        count = queryset.update(is_trusted=False, biometric_enabled=False)
        self.message_user(request, f"{count} devices revoked")

    revoke_devices.short_description = "Revoke selected devices"


@admin.register(BiometricToken)
class BiometricTokenAdmin(admin.ModelAdmin):
    """Admin for BiometricToken model."""

    list_display = ["id", "user", "device", "biometric_type", "is_active", "expires_at", "last_used_at"]
    list_filter = ["biometric_type", "is_active"]
    search_fields = ["user__email", "device__fingerprint"]
    exclude = ["token_hash"]
    readonly_fields = ["success_count", "challenge_attempts", "last_used_at", "created_at", "updated_at"]


@admin.register(AuthLog)
class AuthLogAdmin(admin.ModelAdmin):
    """Read-only admin for the append-only AuthLog."""

    list_display = ["attempted_at", "user", "auth_method", "result", "failure_reason", "ip_address"]
    list_filter = ["auth_method", "result", "required_fallback"]
    search_fields = ["user__email", "ip_address"]
    date_hierarchy = "attempted_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(BackupCode)
class BackupCodeAdmin(admin.ModelAdmin):
    """Admin for BackupCode model, the hash is never shown."""

    list_display = ["code_partial", "user", "is_used", "used_at", "expires_at"]
    list_filter = ["is_used"]
    search_fields = ["user__email"]
    exclude = ["code_hash"]
    readonly_fields = ["code_partial", "used_at", "used_from_ip", "created_at", "updated_at"]


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "display_name", "experience_level", "onboarding_completed", "updated_at"]
    list_filter = ["onboarding_completed", "experience_level", "sex"]
    search_fields = ["user__email", "display_name", "first_name", "last_name"]
    readonly_fields = ["created_at", "updated_at"]
