import logging

from celery import shared_task
from django.utils import timezone

from pulsezen.models import BiometricToken, DeviceTrustScore

logger = logging.getLogger(__name__)


@shared_task(name="pulsezen.tasks.deactivate_expired_biometric_tokens")
def deactivate_expired_biometric_tokens():
    """
    Hourly task: switch off active biometric tokens whose expiry has passed.
    """
    count = BiometricToken.objects.expired().update(
        is_active=False,
        updated_at=timezone.now(),
    )
    logger.info(f"Deactivated {count} expired biometric tokens")
    return count


def recalculate_scores(queryset=None):
    """Recompute and persist trust scores, returning how many were updated."""
    if queryset is None:
        queryset = DeviceTrustScore.objects.all()

    count = 0
    for trust_score in queryset.select_related("device").iterator():
        try:
            trust_score.calculate_final_score()
            count += 1
        except Exception:
            logger.exception(f"Error recalculating trust score {trust_score.id}")
    return count


@shared_task(name="pulsezen.tasks.recalculate_trust_scores")
def recalculate_trust_scores():
    """
    Daily task: rerun the trust score formulas for every device.
    """
    count = recalculate_scores()
    logger.info(f"Recalculated {count} device trust scores")
    return count
