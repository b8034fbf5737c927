import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "time_accounting"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Tokyo")

AUTO_CLOSE_TIME = os.getenv("AUTO_CLOSE_TIME", "23:59")
AUTO_CLOSE_CATCHUP_DAYS = int(os.getenv("AUTO_CLOSE_CATCHUP_DAYS", "3"))

DISCREPANCY_THRESHOLD_MINUTES = int(os.getenv("DISCREPANCY_THRESHOLD_MINUTES", "60"))
ISSUE_LOOKBACK_DAYS = int(os.getenv("ISSUE_LOOKBACK_DAYS", "4"))
ISSUE_CLEAR_RETENTION_DAYS = int(os.getenv("ISSUE_CLEAR_RETENTION_DAYS", "7"))

BREAK_OVERLAP_MODE = os.getenv("BREAK_OVERLAP_MODE", "sum")

ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
