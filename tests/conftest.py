"""
Test-wide settings.

Environment overrides must be in place before `app.core.config` is first
imported, so they live at the top of the root conftest.
"""

import os

os.environ.setdefault("PYTHON_ENV", "test")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests")
os.environ.setdefault("RESEND_API_KEY", "")

import app.models  # noqa: E402,F401  (resolve every mapper before tests build ORM objects)
