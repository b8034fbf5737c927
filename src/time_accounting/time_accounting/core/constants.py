"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

DEFAULT_TIMEZONE = "Asia/Tokyo"

# Day-end auto close
AUTO_CLOSE_TIME = "23:59"
AUTO_CLOSE_DEVICE = "auto"
AUTO_CLOSE_CATCHUP_DAYS = 3
AUTO_CLOSE_FALLBACK_SECONDS = 60

# Discrepancy detection
DISCREPANCY_THRESHOLD_MINUTES = 60
ISSUE_LOOKBACK_DAYS = 4
ISSUE_CLEAR_RETENTION_DAYS = 7
RETENTION_SWEEP_SECONDS = 60 * 60

# Clock-out normalisation when neither time is usable
DEFAULT_CLOCK_IN = "08:30"
DEFAULT_CLOCK_OUT = "17:30"
