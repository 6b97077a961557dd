"""
Test settings.

In-memory SQLite and a fast password hasher.
"""

from apps.core.logging import configure_logging

from .base import *  # noqa: F403

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

configure_logging(json_format=False, log_level="WARNING")
