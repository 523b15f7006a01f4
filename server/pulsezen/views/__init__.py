from pulsezen.views.api_root import api_root
from pulsezen.views.auth import (
    auth_login,
    auth_logout,
    auth_me,
    auth_register,
    token_refresh,
    validate_password,
)
from pulsezen.views.backup_codes import backup_code_login, backup_codes_generate, backup_codes_list
from pulsezen.views.biometric import biometric_enable, biometric_login, biometric_rotate
from pulsezen.views.devices import device_capabilities, device_list, device_register, device_revoke
from pulsezen.views.health import health_check
from pulsezen.views.profile import auth_profile, complete_onboarding
from pulsezen.views.stats import auth_stats

__all__ = [
    "api_root",
    "auth_login",
    "auth_logout",
    "auth_me",
    "auth_register",
    "token_refresh",
    "validate_password",
    "backup_code_login",
    "backup_codes_generate",
    "backup_codes_list",
    "biometric_enable",
    "biometric_login",
    "biometric_rotate",
    "device_capabilities",
    "device_list",
    "device_register",
    "device_revoke",
    "health_check",
    "auth_profile",
    "complete_onboarding",
    "auth_stats",
]
