"""
Music Vote Manager - Configuration
All settings loaded from environment variables with sensible defaults.

The application keeps every record in process memory, so there are no
database or storage settings here: only the HTTP listener, the session
cookie and logging.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
_ = load_dotenv()

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
APP_NAME = "Music Vote Manager"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
APP_ENV = os.getenv("APP_ENV", "development")
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("PORT", "10000"))
DEBUG = os.getenv("DEBUG", str(APP_ENV != "production")).lower() == "true"

# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------
_DEFAULT_SECRET = "fallback-secret-key-change-in-production"
SECRET_KEY = os.getenv("SESSION_SECRET", _DEFAULT_SECRET)

if APP_ENV == "production" and SECRET_KEY == _DEFAULT_SECRET:
    raise RuntimeError(
        "SESSION_SECRET must be changed from the default value in production. "
        "Set the SESSION_SECRET environment variable to a random secret."
    )

SESSION_COOKIE_NAME = "music_session"
# Session lifetime in seconds — default 24 hours
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24)))
# Only send the cookie over HTTPS when deployed
SESSION_COOKIE_SECURE = APP_ENV == "production"

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent

TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

# ---------------------------------------------------------------------------
# Logging — stdout only
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
