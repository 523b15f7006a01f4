"""Django management command to recompute device trust scores on demand.

Runs the same recalculation as the daily Celery task, synchronously. Pass
``--device <uuid>`` to limit it to a single device.
"""

import uuid

from django.core.management.base import BaseCommand, CommandError

from pulsezen.models import DeviceTrustScore
from pulsezen.tasks import recalculate_scores


class Command(BaseCommand):
    """Recalculate `DeviceTrustScore` rows."""

    help = "Recalculate device trust scores"

    def add_arguments(self, parser):
        parser.add_argument(
            "--device",
            dest="device_id",
            help="Only recalculate the score of this device (UUID)",
        )

    def handle(self, *args, **options):
        queryset = DeviceTrustScore.objects.all()
        device_id = options.get("device_id")

        if device_id:
            try:
                uuid.UUID(device_id)
            except ValueError:
                raise CommandError(f"Invalid device id: {device_id}")
            queryset = queryset.filter(device_id=device_id)
            if not queryset.exists():
                raise CommandError(f"No trust score found for device {device_id}")

        count = recalculate_scores(queryset)

        if device_id:
            score = queryset.get()
            self.stdout.write(
                self.style.SUCCESS(
                    f"Device {device_id}: final score {score.final_score} ({score.trust_level()})"
                )
            )
        self.stdout.write(self.style.SUCCESS(f"Recalculated {count} trust scores"))
