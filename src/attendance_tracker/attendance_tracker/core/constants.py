"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000
GEOFENCE_RADIUS_M = 50

DEFAULT_FACIAL_STATUS = "not verified"

# Column widths in database/schema.sql
MAX_LOCATION_LENGTH = 255
MAX_BRANCH_LENGTH = 255
MAX_FACIAL_STATUS_LENGTH = 32
