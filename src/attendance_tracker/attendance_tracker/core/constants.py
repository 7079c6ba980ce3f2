"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

# Time-of-day values are attached to this date before subtracting.
REFERENCE_DATE = date(2000, 1, 1)

HISTORY_LIMIT = 100
DEFAULT_PAGE_SIZE = 50
DAYS_PER_WEEK = 7

# Worked hours beyond this count as overtime.
STANDARD_WORK_HOURS = 8.0
