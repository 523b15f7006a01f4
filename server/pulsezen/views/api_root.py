from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

from pulsezen.utils import format_success


@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """
    API root endpoint to make the browsable API navigable.
    """
    def link(name):
        return reverse(name, request=request, format=format)

    return Response(
        format_success(
            {
                "health": link("health_check"),
                "schema": link("schema"),
                "auth_register": link("auth_register"),
                "auth_login": link("auth_login"),
                "auth_token_refresh": link("token_refresh"),
                "auth_validate_password": link("validate_password"),
                "auth_me": link("auth_me"),
                "auth_profile": link("auth_profile"),
                "auth_complete_onboarding": link("complete_onboarding"),
                "auth_logout": link("auth_logout"),
                "auth_stats": link("auth_stats"),
                "device_register": link("device_register"),
                "device_capabilities": link("device_capabilities"),
                "devices": link("device_list"),
                "device_revoke_template": "/api/auth/device/{device_id}/",
                "biometric_enable": link("biometric_enable"),
                "biometric_rotate": link("biometric_rotate"),
                "biometric_login": link("biometric_login"),
                "backup_codes": link("backup_codes_list"),
                "backup_codes_generate": link("backup_codes_generate"),
                "backup_code_login": link("backup_code_login"),
            }
        )
    )
