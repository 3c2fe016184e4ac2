# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .event_parser import parse_event_response

__all__ = [
    "parse_event_response",
]
