import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "time_accounting"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Operating timezone for day boundaries, clock times and the day-end close
TIMEZONE = os.getenv("TIMEZONE", "Asia/Tokyo")

AUTO_CLOSE_TIME = os.getenv("AUTO_CLOSE_TIME", "23:59")
AUTO_CLOSE_CATCHUP_DAYS = int(os.getenv("AUTO_CLOSE_CATCHUP_DAYS", "3"))

DISCREPANCY_THRESHOLD_MINUTES = int(os.getenv("DISCREPANCY_THRESHOLD_MINUTES", "60"))
ISSUE_LOOKBACK_DAYS = int(os.getenv("ISSUE_LOOKBACK_DAYS", "4"))
ISSUE_CLEAR_RETENTION_DAYS = int(os.getenv("ISSUE_CLEAR_RETENTION_DAYS", "7"))

# "sum" subtracts every rule on its own, "merge" unions overlapping rules first
BREAK_OVERLAP_MODE = os.getenv("BREAK_OVERLAP_MODE", "sum")

ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
