"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

HOURS_PRECISION = 2

LUNCH_DEDUCTION_THRESHOLD_HOURS = 5
LUNCH_DEDUCTION_HOURS = 1

MORNING_END_HOUR = 12
EVENING_START_HOUR = 17

STATS_WEEK_DAYS = 7
MAX_NOTE_LENGTH = 1000
DEFAULT_HISTORY_LIMIT = 500
