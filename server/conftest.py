"""
Run the pulsezen Django test cases under plain pytest.

Rate limiting is off unless a test enables it, and the test database is built
from the app migrations once per run.
"""

import os

import django
import pytest
from django.test.utils import (
    setup_databases,
    setup_test_environment,
    teardown_databases,
    teardown_test_environment,
)


def pytest_configure():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
    os.environ.setdefault("RATELIMIT_ENABLE", "false")
    django.setup()


@pytest.fixture(scope="session", autouse=True)
def django_test_databases():
    setup_test_environment()
    old_config = setup_databases(verbosity=0, interactive=False, keepdb=False)
    yield
    teardown_databases(old_config, verbosity=0)
    teardown_test_environment()
