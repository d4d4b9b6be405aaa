"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EXPECTED_DAILY_MINUTES = 480
DEFAULT_PROGRESS_CAP_PERCENT = 150
DEFAULT_TIMEZONE = "America/Sao_Paulo"
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_REQUEST_LIST_LIMIT = 200
DEFAULT_SESSION_DAYS = 7
