from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from pulsezen.models import AuthLog
from pulsezen.serializers import AuthLogSerializer, UserDeviceSerializer
from pulsezen.services import biometric_auth
from pulsezen.utils import format_success

RECENT_AUTH_LOG_LIMIT = 10


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def auth_stats(request):
    """
    Authentication overview for the current user: device counts, success rate
    over 30 days, failures in the last hour and backup code availability.
    """
    stats = biometric_auth.get_user_auth_stats(request.user)
    stats["devices"] = UserDeviceSerializer(stats["devices"], many=True).data
    stats["recentActivity"] = AuthLogSerializer(
        AuthLog.objects.for_user(request.user)[:RECENT_AUTH_LOG_LIMIT],
        many=True,
    ).data
    return Response(format_success(stats))
