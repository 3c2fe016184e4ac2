# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# - event.py: Event search parameters and parsed event records
# =============================================================================

from .event import (
    Event,
    EventImage,
    EventLocation,
    EventResult,
    EventSearchParams,
)

__all__ = [
    "Event",
    "EventImage",
    "EventLocation",
    "EventResult",
    "EventSearchParams",
]
