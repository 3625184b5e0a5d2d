import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "church_attendance"),
}

# "memory" runs without a database (demo mode); data is lost on restart.
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "120"))
READY_RETRIES = int(os.getenv("READY_RETRIES", "5"))
READY_BACKOFF_SECONDS = float(os.getenv("READY_BACKOFF_SECONDS", "1.0"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
