from django.apps import AppConfig
from django.conf import settings
from django.core.checks import Tags, Warning, register

MIN_SIGNING_KEY_LENGTH = 32


class PulsezenConfig(AppConfig):
    name = "pulsezen"
    verbose_name = "PulseZen"

    def ready(self) -> None:
        @register(Tags.security)
        def _check_jwt_signing_key(app_configs, **kwargs):
            """
            Warn when the HS256 signing key is shorter than 32 characters.
            """
            simple_jwt = getattr(settings, "SIMPLE_JWT", {}) or {}
            signing_key = simple_jwt.get("SIGNING_KEY") or ""
            if len(signing_key) >= MIN_SIGNING_KEY_LENGTH:
                return []
            return [
                Warning(
                    "The JWT signing key is shorter than 32 characters.",
                    hint="Set DJANGO_SECRET_KEY to a long random value.",
                    id="pulsezen.W001",
                )
            ]
