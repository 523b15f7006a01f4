import logging

from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from pulsezen.serializers import (
    LoginSerializer,
    PasswordCheckSerializer,
    RefreshTokenSerializer,
    RegisterSerializer,
    UserSerializer,
)
from pulsezen.services import accounts
from pulsezen.utils import (
    PulsezenError,
    client_ip,
    error_response,
    format_error,
    format_success,
    user_agent,
)

logger = logging.getLogger(__name__)


def _validation_error(serializer):
    return Response(
        format_error(
            code="validation_error",
            message="Invalid request data",
            details=serializer.errors,
        ),
        status=status.HTTP_400_BAD_REQUEST,
    )


def _auth_payload(user, tokens):
    return {
        "user": UserSerializer(user).data,
        "token": tokens["access"],
        "refreshToken": tokens["refresh"],
    }


@ratelimit(group="auth_register", key="ip", rate="5/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def auth_register(request):
    """
    Create an email/password account.

    POST /api/auth/register/
    {
        "email": "user@example.com",
        "password": "Secret123",
        "firstName": "Ana",
        "lastName": "Silva"
    }
    """
    serializer = RegisterSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    data = serializer.validated_data
    try:
        user, tokens = accounts.register_user(
            email=data["email"],
            password=data["password"],
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            ip_address=client_ip(request),
        )
    except PulsezenError as exc:
        return error_response(exc)

    return Response(
        format_success(_auth_payload(user, tokens), message="Account created"),
        status=status.HTTP_201_CREATED,
    )


@ratelimit(group="auth_login", key="ip", rate="10/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def auth_login(request):
    """
    Email/password login.

    POST /api/auth/login/
    {
        "email": "user@example.com",
        "password": "Secret123"
    }
    """
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    try:
        user, tokens = accounts.authenticate_user(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
            ip_address=client_ip(request),
            user_agent=user_agent(request),
        )
    except PulsezenError as exc:
        return error_response(exc)

    return Response(format_success(_auth_payload(user, tokens)))


@ratelimit(group="auth_token_refresh", key="ip", rate="30/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def token_refresh(request):
    """
    Exchange a refresh token for a new token pair.

    The submitted refresh token is blacklisted, so it works only once.

    POST /api/auth/token/refresh/
    { "refresh": "<refresh_token>" }
    """
    serializer = TokenRefreshSerializer(data=request.data)
    try:
        valid = serializer.is_valid()
    except (TokenError, AuthenticationFailed):
        return Response(
            format_error(code="invalid_refresh", message="Invalid refresh token"),
            status=status.HTTP_401_UNAUTHORIZED,
        )
    if not valid:
        return _validation_error(serializer)

    return Response(
        format_success(
            {
                "token": serializer.validated_data["access"],
                "refreshToken": serializer.validated_data["refresh"],
            },
            message="Token refreshed",
        )
    )


@ratelimit(group="auth_validate_password", key="ip", rate="30/m", block=True)
@api_view(["POST"])
@permission_classes([AllowAny])
def validate_password(request):
    serializer = PasswordCheckSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    valid, message = accounts.validate_password_strength(serializer.validated_data["password"])
    return Response(format_success({"valid": valid, "message": message}))


@api_view(["GET", "DELETE"])
@permission_classes([IsAuthenticated])
def auth_me(request):
    """
    GET returns the authenticated user's profile.
    DELETE soft-deletes the account; its tokens stop working immediately.
    """
    if request.method == "DELETE":
        accounts.delete_account(request.user)
        return Response(format_success(None, message="Account deleted"))

    return Response(format_success(UserSerializer(request.user).data))


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def auth_logout(request):
    """
    Blacklist the refresh token sent in the body.

    POST /api/auth/logout/
    { "refresh": "<refresh_token>" }
    """
    serializer = RefreshTokenSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    try:
        refresh = RefreshToken(serializer.validated_data["refresh"])
        if str(refresh.get("user_id")) != str(request.user.id):
            return Response(
                format_error(code="invalid_refresh", message="Invalid refresh token"),
                status=status.HTTP_400_BAD_REQUEST,
            )
        refresh.blacklist()
    except TokenError:
        return Response(
            format_error(code="invalid_refresh", message="Invalid refresh token"),
            status=status.HTTP_400_BAD_REQUEST,
        )

    logger.info("User %s logged out", request.user.id)
    return Response(format_success(None, message="Successfully logged out"))
