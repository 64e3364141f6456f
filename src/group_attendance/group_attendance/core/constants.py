"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_HOURS = 24
TOKEN_ALGORITHM = "HS256"
MIN_PASSWORD_LENGTH = 6
# Ids are stored in signed INT columns
MAX_DB_ID = 2**31 - 1
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
