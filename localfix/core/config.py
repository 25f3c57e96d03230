# localfix/core/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

PROJECT_NAME = os.getenv("PROJECT_NAME", "LocalFix API")
API_VERSION = os.getenv("API_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./localfix.db")
DB_ECHO = os.getenv("DB_ECHO", "false").lower() == "true"

# Sessions are stored server-side; the cookie only carries the opaque token
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "localfix_session")
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

# bcrypt work factor; tests lower it to keep hashing fast
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Shared admin-login secret. The admin account itself is seeded, never registered.
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@localfix.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
if not ADMIN_PASSWORD:
    import warnings

    warnings.warn(
        "ADMIN_PASSWORD not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    ADMIN_PASSWORD = "INSECURE-DEV-ADMIN-SECRET"
ADMIN_SEED_PASSWORD = os.getenv("ADMIN_SEED_PASSWORD") or ADMIN_PASSWORD

SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "true").lower() == "true"

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
