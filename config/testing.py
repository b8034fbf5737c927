import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "time_accounting_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "Asia/Tokyo"
AUTO_CLOSE_TIME = "23:59"
AUTO_CLOSE_CATCHUP_DAYS = 3
DISCREPANCY_THRESHOLD_MINUTES = 60
ISSUE_LOOKBACK_DAYS = 4
ISSUE_CLEAR_RETENTION_DAYS = 7
BREAK_OVERLAP_MODE = "sum"

# Tests drive the jobs by hand
ENABLE_SCHEDULER = False
AUTO_INIT_DB = False
