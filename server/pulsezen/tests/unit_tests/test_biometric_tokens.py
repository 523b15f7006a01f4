from datetime import timedelta

from django.test import TestCase, override_settings
from django.utils import timezone

from pulsezen.models import BiometricToken, User, UserDevice

FAST_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class BiometricTokenModelTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="test@example.com", username="test@example.com")
        self.device = UserDevice.objects.create(
            user=self.user,
            fingerprint="fp-1",
            device_name="Test phone",
            device_type="mobile",
            platform="ios",
            capabilities={"hasBiometrics": True, "hasDevicePasscode": True},
        )

    def test_create_for_device_stores_only_the_hash(self):
        token, raw_token = BiometricToken.create_for_device(self.user, self.device, "faceId")

        self.assertTrue(raw_token)
        self.assertNotEqual(token.token_hash, raw_token)
        self.assertNotIn(raw_token, token.token_hash)
        self.assertTrue(token.verify_token(raw_token))
        self.assertFalse(token.verify_token("wrong"))
        self.assertFalse(token.verify_token(""))

    def test_create_for_device_sets_thirty_day_expiry_and_zero_counters(self):
        token, _ = BiometricToken.create_for_device(self.user, self.device, "faceId")

        remaining = token.expires_at - timezone.now()
        self.assertGreater(remaining, timedelta(days=29, hours=23))
        self.assertLessEqual(remaining, timedelta(days=30))
        self.assertEqual(token.success_count, 0)
        self.assertEqual(token.challenge_attempts, 0)
        self.assertTrue(token.is_active)

    def test_is_valid_false_once_expired(self):
        token, _ = BiometricToken.create_for_device(self.user, self.device, "faceId")
        self.assertTrue(token.is_valid())

        token.expires_at = timezone.now() - timedelta(seconds=1)
        token.save()

        self.assertTrue(token.is_expired())
        self.assertFalse(token.is_valid())

    def test_is_valid_without_expiry(self):
        token, _ = BiometricToken.create_for_device(self.user, self.device, "touchId")
        token.expires_at = None

        self.assertFalse(token.is_expired())
        self.assertTrue(token.is_valid())

    def test_deactivated_token_is_invalid(self):
        token, _ = BiometricToken.create_for_device(self.user, self.device, "faceId")

        token.deactivate()
        token.refresh_from_db()

        self.assertFalse(token.is_active)
        self.assertFalse(token.is_valid())

    def test_rotate_replaces_hash_and_resets_attempts(self):
        token, old_raw = BiometricToken.create_for_device(self.user, self.device, "faceId")
        token.record_attempt()
        token.record_attempt()
        self.assertEqual(token.challenge_attempts, 2)

        new_raw = token.rotate()
        token.refresh_from_db()

        self.assertNotEqual(new_raw, old_raw)
        self.assertTrue(token.verify_token(new_raw))
        self.assertFalse(token.verify_token(old_raw))
        self.assertEqual(token.challenge_attempts, 0)

    def test_record_usage_increments_success_count(self):
        token, _ = BiometricToken.create_for_device(self.user, self.device, "faceId")

        token.record_usage()
        token.record_usage()

        self.assertEqual(token.success_count, 2)
        self.assertIsNotNone(token.last_used_at)
        self.assertEqual(BiometricToken.objects.get(pk=token.pk).success_count, 2)

    def test_valid_queryset_excludes_expired_and_inactive(self):
        valid, _ = BiometricToken.create_for_device(self.user, self.device, "faceId")
        expired, _ = BiometricToken.create_for_device(self.user, self.device, "touchId")
        expired.expires_at = timezone.now() - timedelta(days=1)
        expired.save()
        inactive, _ = BiometricToken.create_for_device(self.user, self.device, "fingerprint")
        inactive.deactivate()

        self.assertEqual(list(BiometricToken.objects.valid()), [valid])
        self.assertEqual(list(BiometricToken.objects.expired()), [expired])

    def test_public_key_reads_biometric_data(self):
        token, _ = BiometricToken.create_for_device(
            self.user, self.device, "faceId", {"publicKey": "pk-123"}
        )

        self.assertEqual(token.public_key, "pk-123")
