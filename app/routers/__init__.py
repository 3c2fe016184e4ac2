# =============================================================================
# app/routers/ - Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - pages.py: Landing page, environment name, static files
# - events.py: Ticketmaster event search
#
# Each router is mounted in main.py.
# =============================================================================

from . import pages
from . import events

__all__ = [
    "pages",
    "events",
]
