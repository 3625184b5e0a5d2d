import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "church"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "church_attendance"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "120"))
READY_RETRIES = int(os.getenv("READY_RETRIES", "5"))
READY_BACKOFF_SECONDS = float(os.getenv("READY_BACKOFF_SECONDS", "1.0"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
