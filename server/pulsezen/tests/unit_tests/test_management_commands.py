from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from pulsezen.models import DeviceTrustScore, User, UserDevice


class RecalculateTrustScoresCommandTest(TestCase):
    def setUp(self):
        user = User.objects.create(email="test@example.com", username="test@example.com")
        self.device = UserDevice.objects.create(
            user=user,
            fingerprint="fp-1",
            device_name="Phone",
            device_type="mobile",
            platform="ios",
            capabilities={"hasBiometrics": True, "hasDevicePasscode": True, "hasScreenLock": True},
        )
        self.score = DeviceTrustScore.objects.create(device=self.device)

    def test_recalculates_all_scores(self):
        out = StringIO()

        call_command("recalculate_trust_scores", stdout=out)

        self.assertIn("Recalculated 1 trust scores", out.getvalue())
        self.score.refresh_from_db()
        self.assertIsNotNone(self.score.last_calculated_at)

    def test_single_device(self):
        out = StringIO()

        call_command("recalculate_trust_scores", "--device", str(self.device.id), stdout=out)

        self.assertIn(f"Device {self.device.id}: final score 65.00 (medium)", out.getvalue())

    def test_invalid_device_id(self):
        with self.assertRaises(CommandError):
            call_command("recalculate_trust_scores", "--device", "not-a-uuid")

    def test_unknown_device(self):
        with self.assertRaises(CommandError):
            call_command("recalculate_trust_scores", "--device", "00000000-0000-0000-0000-000000000000")
