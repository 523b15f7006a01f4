"""
pulsezen/urls.py: app-level URL routing.
All routes are prefixed with /api/ from the root urls.py
"""

from django.urls import path

from pulsezen import views

urlpatterns = [
    path("", views.api_root, name="api_root"),
    path("health/", views.health_check, name="health_check"),

    # Accounts
    path("auth/register/", views.auth_register, name="auth_register"),
    path("auth/login/", views.auth_login, name="auth_login"),
    path("auth/token/refresh/", views.token_refresh, name="token_refresh"),
    path("auth/validate-password/", views.validate_password, name="validate_password"),
    path("auth/me/", views.auth_me, name="auth_me"),
    path("auth/profile/", views.auth_profile, name="auth_profile"),
    path("auth/complete-onboarding/", views.complete_onboarding, name="complete_onboarding"),
    path("auth/logout/", views.auth_logout, name="auth_logout"),
    path("auth/stats/", views.auth_stats, name="auth_stats"),

    # Devices
    path("auth/device/capabilities/", views.device_capabilities, name="device_capabilities"),
    path("auth/device/register/", views.device_register, name="device_register"),
    path("auth/device/<uuid:device_id>/", views.device_revoke, name="device_revoke"),
    path("auth/devices/", views.device_list, name="device_list"),

    # Biometrics
    path("auth/biometric/enable/", views.biometric_enable, name="biometric_enable"),
    path("auth/biometric/rotate/", views.biometric_rotate, name="biometric_rotate"),
    path("auth/biometric/login/", views.biometric_login, name="biometric_login"),

    # Backup codes
    path("auth/backup-codes/", views.backup_codes_list, name="backup_codes_list"),
    path("auth/backup-codes/generate/", views.backup_codes_generate, name="backup_codes_generate"),
    path("auth/backup-code/login/", views.backup_code_login, name="backup_code_login"),
]
