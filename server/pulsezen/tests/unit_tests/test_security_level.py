from itertools import product

from django.test import SimpleTestCase

from pulsezen.models import calculate_security_level
from pulsezen.services.biometric_auth import get_security_recommendations


class CalculateSecurityLevelTest(SimpleTestCase):
    def test_all_capability_combinations(self):
        table = {
            (False, False, False): "insecure",
            (False, False, True): "basic",
            (False, True, False): "insecure",
            (False, True, True): "protected",
            (True, False, False): "insecure",
            (True, False, True): "basic",
            (True, True, False): "premium",
            (True, True, True): "premium",
        }

        for flags in product([False, True], repeat=3):
            with self.subTest(flags=flags):
                capabilities = {
                    "hasBiometrics": flags[0],
                    "hasDevicePasscode": flags[1],
                    "hasScreenLock": flags[2],
                }
                self.assertEqual(calculate_security_level(capabilities), table[flags])

    def test_missing_flags_count_as_false(self):
        self.assertEqual(calculate_security_level({}), "insecure")
        self.assertEqual(calculate_security_level(None), "insecure")
        self.assertEqual(calculate_security_level({"hasScreenLock": True}), "basic")

    def test_extra_keys_are_ignored(self):
        capabilities = {
            "hasBiometrics": True,
            "hasDevicePasscode": True,
            "biometricTypes": ["faceId"],
            "supportsKeychain": True,
        }

        self.assertEqual(calculate_security_level(capabilities), "premium")


class SecurityRecommendationsTest(SimpleTestCase):
    def test_insecure_device_gets_lock_advice(self):
        recommendations = get_security_recommendations("insecure", {})

        self.assertEqual(len(recommendations), 2)
        self.assertIn("screen lock", recommendations[0])

    def test_basic_device_with_biometrics(self):
        recommendations = get_security_recommendations("basic", {"hasBiometrics": True})

        self.assertEqual(len(recommendations), 2)

    def test_premium_device(self):
        self.assertEqual(
            get_security_recommendations("premium", {"hasBiometrics": True}),
            ["Your device has optimal security configuration"],
        )
