"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MILLIS_PER_HOUR = 3_600_000
HOURS_PRECISION = 2

OTP_LENGTH = 6
OTP_TTL_MINUTES = 5

DEFAULT_TOKEN_TTL_HOURS = 24
MIN_PASSWORD_LENGTH = 6

DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_GEOCODER_TIMEOUT = 10
DEFAULT_SMTP_TIMEOUT = 10

DATE_FORMAT = "%Y-%m-%d"
