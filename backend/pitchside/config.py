"""
Runtime configuration read from the environment (.env supported).

Every value has a development default so the API boots against a local
SQLite file with no setup.
"""
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pitchside.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    CORS_ORIGINS.extend(o.strip() for o in _extra.split(",") if o.strip())

# Fallback promotion: conditional update retried on conflict
PROMOTION_MAX_ATTEMPTS = int(os.getenv("PROMOTION_MAX_ATTEMPTS", "3"))
PROMOTION_RETRY_DELAY_MS = int(os.getenv("PROMOTION_RETRY_DELAY_MS", "200"))

# Registration: slot-number insert retried on unique-constraint conflict
REGISTRATION_MAX_ATTEMPTS = int(os.getenv("REGISTRATION_MAX_ATTEMPTS", "3"))
REGISTRATION_RETRY_DELAY_MS = int(os.getenv("REGISTRATION_RETRY_DELAY_MS", "100"))
