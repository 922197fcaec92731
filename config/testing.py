import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret-key-of-at-least-32-bytes"
TOKEN_TTL_HOURS = 1

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_test"),
}

SMTP_CONFIG = {"host": ""}

# No outbound geocoding in tests; addresses fall back to coordinates.
GEOCODER_URL = ""
GEOCODER_TIMEOUT = 1.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
