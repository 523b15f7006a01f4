from django.db import IntegrityError
from django.test import TestCase

from pulsezen.models import DeviceTrustScore, User, UserDevice


def make_user(email="test@example.com"):
    return User.objects.create(email=email, username=email)


def make_device(user, fingerprint="fp-1", capabilities=None, **extra):
    return UserDevice.objects.create(
        user=user,
        fingerprint=fingerprint,
        device_name="Test phone",
        device_type="mobile",
        platform=extra.pop("platform", "ios"),
        capabilities=capabilities if capabilities is not None else {},
        **extra,
    )


class UserModelTest(TestCase):
    def test_email_is_normalized_and_used_as_username(self):
        user = User.objects.create(email="  Ana@Example.COM ")

        self.assertEqual(user.email, "ana@example.com")
        self.assertEqual(user.username, "ana@example.com")
        self.assertFalse(user.email_verified)

    def test_unique_email_is_enforced(self):
        make_user("dup@example.com")

        with self.assertRaises(IntegrityError):
            User.objects.create(email="dup@example.com", username="other")

    def test_soft_delete_deactivates_user(self):
        user = make_user()

        user.soft_delete()
        user.refresh_from_db()

        self.assertTrue(user.is_deleted)
        self.assertIsNotNone(user.deleted_at)
        self.assertFalse(user.is_active)
        self.assertTrue(User.objects.filter(pk=user.pk).exists())


class UserDeviceModelTest(TestCase):
    def setUp(self):
        self.user = make_user()

    def test_biometrics_and_passcode_yield_premium_on_create(self):
        device = make_device(
            self.user,
            capabilities={"hasBiometrics": True, "hasDevicePasscode": True},
        )

        self.assertEqual(device.security_level, "premium")

    def test_explicit_security_level_is_kept_on_create(self):
        device = make_device(
            self.user,
            capabilities={"hasBiometrics": True, "hasDevicePasscode": True},
            security_level="basic",
        )

        self.assertEqual(device.security_level, "basic")

    def test_update_security_level_persists_derived_level(self):
        device = make_device(self.user, capabilities={"hasScreenLock": True})
        self.assertEqual(device.security_level, "basic")

        device.capabilities = {"hasDevicePasscode": True, "hasScreenLock": True}
        device.update_security_level()
        device.refresh_from_db()

        self.assertEqual(device.security_level, "protected")

    def test_fingerprint_is_globally_unique(self):
        make_device(self.user, fingerprint="same")
        other = make_user("other@example.com")

        with self.assertRaises(IntegrityError):
            make_device(other, fingerprint="same")

    def test_can_use_biometrics_requires_hardware_opt_in_and_level(self):
        device = make_device(
            self.user,
            capabilities={"hasBiometrics": True, "hasDevicePasscode": True},
        )
        self.assertFalse(device.can_use_biometrics())

        device.biometric_enabled = True
        self.assertTrue(device.can_use_biometrics())

        device.security_level = "basic"
        self.assertFalse(device.can_use_biometrics())

    def test_can_use_biometrics_false_without_hardware(self):
        device = make_device(
            self.user,
            capabilities={"hasDevicePasscode": True, "hasScreenLock": True},
            biometric_enabled=True,
        )

        self.assertEqual(device.security_level, "protected")
        self.assertFalse(device.can_use_biometrics())

    def test_is_high_trust(self):
        device = make_device(
            self.user,
            capabilities={"hasBiometrics": True, "hasDevicePasscode": True},
        )
        self.assertFalse(device.is_high_trust())

        device.is_trusted = True
        self.assertTrue(device.is_high_trust())

    def test_update_last_seen(self):
        device = make_device(self.user)
        self.assertIsNone(device.last_seen_at)

        device.update_last_seen()
        device.refresh_from_db()

        self.assertIsNotNone(device.last_seen_at)

    def test_deleting_user_cascades_to_devices_and_scores(self):
        device = make_device(self.user)
        DeviceTrustScore.objects.create(device=device)

        self.user.delete()

        self.assertFalse(UserDevice.objects.exists())
        self.assertFalse(DeviceTrustScore.objects.exists())
