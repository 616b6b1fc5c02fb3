"""Constants and defaults.

Note: Keep policy numbers here to avoid magic numbers spread across code.
"""

from datetime import time

EARTH_RADIUS_M = 6_371_000.0

POLICY_TIMEZONE = "America/La_Paz"

ACCURACY_CEILING_M = 60.0
DEFAULT_SITE_RADIUS_M = 100.0

SCHED_START = time(8, 30)
SCHED_END = time(18, 30)

QR_DEFAULT_TTL_SECONDS = 60
QR_MAX_TTL_SECONDS = 300

NO_SITE_NAME = "Sin sucursal"
NO_PERSON_NAME = "(sin nombre)"

REPORT_MAX_DAYS = 366
