"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_INICIAL_HOUR = "08:30"
DEFAULT_FINAL_HOUR = "17:30"
DEFAULT_MAX_CAPACITY = 30

TOP_USERS_LIMIT = 5

HEARTBEAT_INTERVAL_SECONDS = 15
HEARTBEAT_TIMEOUT_SECONDS = 10
HEARTBEAT_HISTORY_SIZE = 50
HEARTBEAT_RECENT_WINDOW = 10
HEARTBEAT_HEALTHY_MINUTES = 5

DEFAULT_TOKEN_TTL_HOURS = 8
DEFAULT_DB_CONNECT_TIMEOUT = 10

AUTO_CHECKOUT_JOB_ID = "attendance_auto_checkout"
HEARTBEAT_JOB_ID = "instance_heartbeat"
