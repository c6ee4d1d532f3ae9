"""Settings for the test suite: in-memory sqlite, uncached loggers."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")

import structlog  # noqa: E402

from config.settings import *  # noqa: E402,F401,F403

# structlog.testing.capture_logs swaps processors per test; cached
# loggers would keep the old chain.
structlog.configure(cache_logger_on_first_use=False)
