from datetime import timedelta
from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase, override_settings
from django.utils import timezone

from pulsezen.models import BackupCode, User
from pulsezen.models.backup_code import CODE_ALPHABET

FAST_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class BackupCodeModelTest(TestCase):
    def setUp(self):
        self.user = User.objects.create(email="test@example.com", username="test@example.com")

    def test_generate_codes_returns_raw_codes_once(self):
        codes, raw_codes = BackupCode.generate_codes_for_user(self.user)

        self.assertEqual(len(codes), 10)
        self.assertEqual(len(set(raw_codes)), 10)
        for code, raw in zip(codes, raw_codes):
            self.assertEqual(len(raw), 8)
            self.assertTrue(set(raw) <= set(CODE_ALPHABET))
            self.assertNotIn(raw, code.code_hash)
            self.assertEqual(code.code_partial, f"{raw[:2]}****{raw[-2:]}")
            self.assertTrue(code.is_valid())

    def test_generating_again_retires_unused_codes(self):
        first, _ = BackupCode.generate_codes_for_user(self.user, count=3)

        BackupCode.generate_codes_for_user(self.user, count=2)

        self.assertEqual(BackupCode.valid_code_count(self.user), 2)
        for code in first:
            code.refresh_from_db()
            self.assertTrue(code.is_used)

    def test_failed_regeneration_keeps_previous_codes(self):
        BackupCode.generate_codes_for_user(self.user, count=3)
        real_create = BackupCode.objects.create
        calls = []

        def create_then_fail(**kwargs):
            calls.append(kwargs)
            if len(calls) == 2:
                raise IntegrityError("duplicate code")
            return real_create(**kwargs)

        with patch.object(BackupCode.objects, "create", side_effect=create_then_fail):
            with self.assertRaises(IntegrityError):
                BackupCode.generate_codes_for_user(self.user, count=3)

        self.assertEqual(BackupCode.valid_code_count(self.user), 3)

    def test_code_is_redeemed_exactly_once(self):
        _, raw_codes = BackupCode.generate_codes_for_user(self.user, count=3)

        used = BackupCode.validate_and_use_code(self.user, raw_codes[1], ip_address="10.0.0.1")

        self.assertIsNotNone(used)
        self.assertTrue(used.is_used)
        self.assertEqual(used.used_from_ip, "10.0.0.1")
        self.assertIsNone(BackupCode.validate_and_use_code(self.user, raw_codes[1]))
        self.assertEqual(BackupCode.valid_code_count(self.user), 2)

    def test_redemption_is_case_insensitive(self):
        _, raw_codes = BackupCode.generate_codes_for_user(self.user, count=1)

        self.assertIsNotNone(BackupCode.validate_and_use_code(self.user, f" {raw_codes[0].lower()} "))

    def test_wrong_code_or_wrong_user_is_rejected(self):
        _, raw_codes = BackupCode.generate_codes_for_user(self.user, count=2)
        other = User.objects.create(email="other@example.com", username="other@example.com")

        self.assertIsNone(BackupCode.validate_and_use_code(self.user, "ZZZZZZZZ"))
        self.assertIsNone(BackupCode.validate_and_use_code(other, raw_codes[0]))
        self.assertEqual(BackupCode.valid_code_count(self.user), 2)

    def test_expired_code_is_rejected(self):
        codes, raw_codes = BackupCode.generate_codes_for_user(self.user, count=1)
        code = codes[0]
        code.expires_at = timezone.now() - timedelta(minutes=1)
        code.save()

        self.assertFalse(code.is_valid())
        self.assertFalse(BackupCode.has_valid_codes(self.user))
        self.assertIsNone(BackupCode.validate_and_use_code(self.user, raw_codes[0]))

    def test_extend_pushes_expiry_forward(self):
        codes, _ = BackupCode.generate_codes_for_user(self.user, count=1)
        code = codes[0]
        code.expires_at = timezone.now() - timedelta(days=1)

        code.extend(days=5)

        self.assertTrue(code.is_valid())
        self.assertGreater(code.expires_at, timezone.now() + timedelta(days=4))

    def test_mark_as_used(self):
        codes, _ = BackupCode.generate_codes_for_user(self.user, count=1)

        codes[0].mark_as_used("10.1.1.1")

        self.assertEqual(list(BackupCode.objects.used_for_user(self.user)), [codes[0]])
        self.assertFalse(BackupCode.has_valid_codes(self.user))

    def test_code_partial_of_short_code(self):
        self.assertEqual(BackupCode.get_code_partial("ABC"), "ABC")
        self.assertEqual(BackupCode.get_code_partial("ABCDEFGH"), "AB****GH")
