# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the event domain:
# - models/: Pydantic schemas for event searches and results
# - services/: The Ticketmaster response adapter
#
# Nothing here performs I/O, which keeps the logic testable in isolation.
# =============================================================================
