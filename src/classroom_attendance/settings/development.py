import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance"),
}

# SQLite file holding the per-class local cache
LOCAL_CACHE_PATH = os.getenv("LOCAL_CACHE_PATH", "instance/local_cache.sqlite3")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo classes for DEMO_USER_ID on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
DEMO_USER_ID = os.getenv("DEMO_USER_ID", "demo-teacher")
