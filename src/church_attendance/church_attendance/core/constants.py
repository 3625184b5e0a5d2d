"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

ATTENDANCE_FIELD_PREFIX = "attendance_"

REGULAR_STREAK = 3
MEMBER_MIN_PRESENT = 2
NEWCOMER_WINDOW_DAYS = 30

# Outreach thresholds (percent / days)
LOW_ATTENDANCE_RATE = 50
FOLLOWUP_ATTENDANCE_RATE = 75
LONG_ABSENT_DAYS = 30
FOLLOWUP_WINDOW_DAYS = 60

DEFAULT_CACHE_TTL_SECONDS = 120
DEFAULT_READY_RETRIES = 5
DEFAULT_READY_BACKOFF_SECONDS = 1.0
DEFAULT_ACTIVITY_LIMIT = 50

MONTHS_TABLE = "months"
ACTIVITY_TABLE = "activity_logs"
MEMBER_TEMPLATE_TABLE = "member_template"

REASON_NOT_CONSECUTIVE = "did not attend 3 consecutive Sundays"
REASON_ALREADY_REGULAR = "already has regular or higher badge"
REASON_OVERRIDE_RETAINED = "manual badge override retained"
