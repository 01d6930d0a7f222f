"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SUNDAY = 7

DEFAULT_LOOKBACK_DAYS = 7
DEFAULT_PARTITION_WORKERS = 4

# Academic year convention: [Sep 1 Y1, Aug 31 Y2]
ACADEMIC_YEAR_START_MONTH = 9
ACADEMIC_YEAR_END_MONTH = 8
ACADEMIC_YEAR_END_DAY = 31

HOURS_DECIMALS = 2

UNKNOWN_LABEL = "—"

MONTH_NAMES_FR = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)
