import hashlib
from unittest.mock import patch
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings

from pulsezen.models import AuthLog, BackupCode, DeviceTrustScore, User, UserDevice
from pulsezen.services import accounts, biometric_auth
from pulsezen.utils import (
    AuthenticationError,
    BackupCodeInvalidError,
    BiometricNotSupportedError,
    DeviceConflictError,
    DeviceNotFoundError,
    RegistrationError,
)

FAST_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

PREMIUM_CAPABILITIES = {
    "hasBiometrics": True,
    "biometricTypes": ["faceId"],
    "hasDevicePasscode": True,
    "hasScreenLock": True,
}


def device_payload(fingerprint="fp-1", capabilities=None, **extra):
    payload = {
        "fingerprint": fingerprint,
        "device_name": "Ana's iPhone",
        "device_type": "mobile",
        "platform": "ios",
        "os_version": "17.2",
        "app_version": "1.0.0",
        "capabilities": capabilities if capabilities is not None else dict(PREMIUM_CAPABILITIES),
    }
    payload.update(extra)
    return payload


class PasswordStrengthTest(SimpleTestCase):
    def test_rules(self):
        cases = [
            ("Short1", False),
            ("alllowercase1", False),
            ("ALLUPPERCASE1", False),
            ("NoDigitsHere", False),
            ("Valid123", True),
        ]
        for password, expected in cases:
            with self.subTest(password=password):
                valid, message = accounts.validate_password_strength(password)
                self.assertEqual(valid, expected)
                self.assertEqual(message is None, expected)

    def test_none_password(self):
        valid, message = accounts.validate_password_strength(None)

        self.assertFalse(valid)
        self.assertIn("8 characters", message)


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class AccountServiceTest(TestCase):
    def test_register_user_returns_tokens(self):
        user, tokens = accounts.register_user("Ana@Example.com", "Secret123", "Ana", "Lima")

        self.assertEqual(user.email, "ana@example.com")
        self.assertTrue(user.check_password("Secret123"))
        self.assertEqual(set(tokens), {"access", "refresh"})

    def test_register_rejects_weak_password(self):
        with self.assertRaises(RegistrationError) as ctx:
            accounts.register_user("ana@example.com", "weak")

        self.assertIn("password", ctx.exception.details)
        self.assertFalse(User.objects.exists())

    def test_register_rejects_duplicate_email(self):
        accounts.register_user("ana@example.com", "Secret123")

        with self.assertRaises(RegistrationError) as ctx:
            accounts.register_user("ANA@example.com", "Secret123")

        self.assertEqual(str(ctx.exception), "Email already registered")

    def test_authenticate_user_logs_attempts(self):
        user, _ = accounts.register_user("ana@example.com", "Secret123")

        with self.assertRaises(AuthenticationError):
            accounts.authenticate_user("ana@example.com", "Wrong123", ip_address="10.0.0.1")
        authenticated, tokens = accounts.authenticate_user("ana@example.com", "Secret123")

        self.assertEqual(authenticated, user)
        self.assertIn("access", tokens)
        results = list(AuthLog.objects.for_user(user).values_list("result", flat=True))
        self.assertEqual(sorted(results), ["failed", "success"])

    def test_unknown_and_deleted_accounts_get_generic_error(self):
        user, _ = accounts.register_user("ana@example.com", "Secret123")
        accounts.delete_account(user)

        for email in ["ana@example.com", "nobody@example.com"]:
            with self.subTest(email=email):
                with self.assertRaises(AuthenticationError) as ctx:
                    accounts.authenticate_user(email, "Secret123")
                self.assertEqual(str(ctx.exception), "Invalid email or password")

        self.assertTrue(AuthLog.objects.filter(user=user, result="blocked").exists())


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class DeviceServiceTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="ana@example.com", username="ana@example.com")

    def test_register_new_device_creates_trust_score(self):
        device, created = biometric_auth.register_device(self.user, device_payload(), ip_address="10.0.0.1")

        self.assertTrue(created)
        self.assertEqual(device.security_level, "premium")
        self.assertEqual(device.trust_score.final_score, Decimal("50.00"))
        self.assertTrue(AuthLog.objects.filter(device=device, result="success").exists())

    def test_register_same_fingerprint_updates_in_place(self):
        device, _ = biometric_auth.register_device(self.user, device_payload())

        updated, created = biometric_auth.register_device(
            self.user,
            device_payload(device_name="Renamed", capabilities={"hasScreenLock": True}),
        )

        self.assertFalse(created)
        self.assertEqual(updated.pk, device.pk)
        self.assertEqual(updated.device_name, "Renamed")
        self.assertEqual(updated.security_level, "basic")
        self.assertEqual(UserDevice.objects.count(), 1)
        self.assertEqual(DeviceTrustScore.objects.count(), 1)

    def test_fingerprint_owned_by_another_user_conflicts(self):
        biometric_auth.register_device(self.user, device_payload())
        other = User.objects.create(email="other@example.com", username="other@example.com")

        with self.assertRaises(DeviceConflictError):
            biometric_auth.register_device(other, device_payload())

    def test_enable_requires_biometric_hardware(self):
        biometric_auth.register_device(
            self.user, device_payload(capabilities={"hasDevicePasscode": True, "hasScreenLock": True})
        )

        with self.assertRaises(BiometricNotSupportedError):
            biometric_auth.enable_biometric_auth(self.user, "fp-1", "faceId")

    def test_enable_on_unknown_device(self):
        with self.assertRaises(DeviceNotFoundError):
            biometric_auth.enable_biometric_auth(self.user, "missing", "faceId")

    def test_enable_marks_device_and_returns_raw_token(self):
        biometric_auth.register_device(self.user, device_payload())

        token, raw_token = biometric_auth.enable_biometric_auth(self.user, "fp-1", "faceId")

        self.assertTrue(token.verify_token(raw_token))
        self.assertTrue(token.device.biometric_enabled)
        self.assertTrue(UserDevice.objects.get(fingerprint="fp-1").can_use_biometrics())

    def test_rotate_without_token(self):
        biometric_auth.register_device(self.user, device_payload())

        with self.assertRaises(DeviceNotFoundError):
            biometric_auth.rotate_biometric_token(self.user, "fp-1", "faceId")

    def test_revoke_device(self):
        biometric_auth.register_device(self.user, device_payload())
        token, _ = biometric_auth.enable_biometric_auth(self.user, "fp-1", "faceId")
        device = token.device
        device.is_trusted = True
        device.save()

        biometric_auth.revoke_device(self.user, device.id)
        device.refresh_from_db()
        token.refresh_from_db()

        self.assertFalse(device.is_trusted)
        self.assertFalse(device.biometric_enabled)
        self.assertFalse(token.is_active)

    def test_revoke_device_of_another_user(self):
        device, _ = biometric_auth.register_device(self.user, device_payload())
        other = User.objects.create(email="other@example.com", username="other@example.com")

        with self.assertRaises(DeviceNotFoundError):
            biometric_auth.revoke_device(other, device.id)

    def test_auth_stats(self):
        biometric_auth.register_device(self.user, device_payload())
        BackupCode.generate_codes_for_user(self.user, count=4)

        stats = biometric_auth.get_user_auth_stats(self.user)

        self.assertEqual(stats["totalDevices"], 1)
        self.assertEqual(stats["biometricEnabledDevices"], 0)
        self.assertEqual(stats["authSuccessRate"], 100.0)
        self.assertEqual(stats["recentFailuresCount"], 0)
        self.assertTrue(stats["hasBackupCodes"])
        self.assertEqual(stats["backupCodesCount"], 4)


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class BiometricLoginServiceTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="ana@example.com", username="ana@example.com")
        self.device, _ = biometric_auth.register_device(self.user, device_payload())
        self.token, self.raw_token = biometric_auth.enable_biometric_auth(
            self.user, "fp-1", "faceId", {"publicKey": "pk-abc"}
        )

    def login(self, **overrides):
        data = {"device_fingerprint": "fp-1", "biometric_type": "faceId"}
        data.update(overrides)
        return biometric_auth.authenticate_with_biometric(data, ip_address="10.0.0.1")

    def test_successful_login(self):
        result = self.login(user_id=self.user.id, biometric_token=self.raw_token)

        self.assertTrue(result.success)
        self.assertEqual(result.user, self.user)
        self.assertEqual(result.trust_score, 50.0)
        self.assertIn("access", result.tokens)
        self.token.refresh_from_db()
        self.assertEqual(self.token.success_count, 1)
        score = DeviceTrustScore.objects.get(device=self.device)
        self.assertEqual(score.successful_auths, 1)
        self.assertEqual(score.location_history[-1]["ip"], "10.0.0.1")

    def test_success_bookkeeping_is_all_or_nothing(self):
        log_count = AuthLog.objects.count()

        with patch.object(DeviceTrustScore, "add_location_data", side_effect=RuntimeError("boom")):
            with self.assertRaises(RuntimeError):
                self.login(biometric_token=self.raw_token)

        self.token.refresh_from_db()
        self.assertEqual(self.token.success_count, 0)
        self.assertEqual(DeviceTrustScore.objects.get(device=self.device).successful_auths, 0)
        self.assertEqual(AuthLog.objects.count(), log_count)

    def test_unknown_device(self):
        result = self.login(device_fingerprint="unknown")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Device not registered")

    def test_biometrics_not_enabled(self):
        UserDevice.objects.filter(pk=self.device.pk).update(biometric_enabled=False)

        result = self.login(user_id=self.user.id)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Biometric authentication not enabled")
        self.assertEqual(result.fallback_methods, ["devicePin", "appPin", "email"])

    def test_no_token_for_requested_type(self):
        result = self.login(biometric_type="touchId")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "No valid biometric token found")

    def test_low_trust_score(self):
        DeviceTrustScore.objects.filter(device=self.device).update(final_score=Decimal("29.99"))

        result = self.login()

        self.assertFalse(result.success)
        self.assertTrue(result.requires_additional_verification)
        self.assertEqual(result.error_details()["trustScore"], 29.99)
        self.assertTrue(AuthLog.objects.filter(failure_reason="Low trust score").exists())

    def test_wrong_raw_token(self):
        result = self.login(biometric_token="not-the-token")

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Invalid biometric token")
        self.token.refresh_from_db()
        self.assertEqual(self.token.challenge_attempts, 1)
        self.assertEqual(DeviceTrustScore.objects.get(device=self.device).failed_auths, 1)

    def test_signature(self):
        expected = hashlib.sha256(f"{self.device.id}pk-abcfaceId".encode("utf-8")).hexdigest()

        self.assertTrue(biometric_auth.validate_biometric_signature(self.token, expected))
        self.assertFalse(biometric_auth.validate_biometric_signature(self.token, "0" * 64))
        self.assertFalse(self.login(biometric_signature="bad").success)
        self.assertTrue(self.login(biometric_signature=expected).success)

    def test_signature_without_public_key(self):
        self.token.biometric_data = None

        self.assertFalse(biometric_auth.validate_biometric_signature(self.token, "anything"))

    def test_deleted_account_cannot_log_in(self):
        self.user.soft_delete()

        result = self.login(user_id=self.user.id)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Device not registered")


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class BackupCodeLoginServiceTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="ana@example.com", username="ana@example.com")
        _, self.raw_codes = BackupCode.generate_codes_for_user(self.user, count=2)

    def test_login_consumes_code(self):
        user, tokens = biometric_auth.authenticate_with_backup_code(self.user.id, self.raw_codes[0])

        self.assertEqual(user, self.user)
        self.assertIn("refresh", tokens)
        with self.assertRaises(BackupCodeInvalidError):
            biometric_auth.authenticate_with_backup_code(self.user.id, self.raw_codes[0])
        self.assertTrue(AuthLog.objects.filter(auth_method="backupCode", result="failed").exists())

    def test_unknown_user(self):
        with self.assertRaises(BackupCodeInvalidError):
            biometric_auth.authenticate_with_backup_code(
                "00000000-0000-0000-0000-000000000000", self.raw_codes[0]
            )


class CapabilityDescriptionTest(SimpleTestCase):
    def test_describe_capabilities(self):
        summary = biometric_auth.describe_capabilities({"hasScreenLock": True})

        self.assertEqual(summary["securityLevel"], "basic")
        self.assertFalse(summary["canUseBiometrics"])
        self.assertEqual(summary["fallbackMethods"], ["appPin", "email"])
        self.assertEqual(summary["recommendations"], ["Enable device passcode for additional security"])
