from decouple import config

# Held reservations a member may own for one event, unless the event overrides it.
RESERVATION_MAX_PER_MEMBER = config("RESERVATION_MAX_PER_MEMBER", default=2, cast=int)

# Check-in opens this many minutes before the event starts and closes when it ends.
CHECK_IN_OPENS_MINUTES_BEFORE_START = config("CHECK_IN_OPENS_MINUTES_BEFORE_START", default=60, cast=int)

# Seconds advertised in Retry-After when a backing dependency is unavailable.
DEPENDENCY_RETRY_AFTER_SECONDS = config("DEPENDENCY_RETRY_AFTER_SECONDS", default=5, cast=int)
