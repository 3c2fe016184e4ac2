# =============================================================================
# core/services/event_parser.py - Ticketmaster Response Adapter
# =============================================================================
# Translates the loosely-typed JSON returned by the Discovery API event
# search into EventResult / Event models.
#
# Missing optional fields become None. Missing required structure
# (`_embedded.events`, or an event's name/id/url) raises
# TicketmasterParseError; no partial result is ever returned.
# =============================================================================

import logging
from typing import Any, Mapping

from app.exceptions import EVENT_PARSE_ERROR, TicketmasterParseError
from core.models.event import Event, EventImage, EventLocation, EventResult

logger = logging.getLogger(__name__)

REQUIRED_EVENT_FIELDS = ("name", "id", "url")


# =============================================================================
# Field Access Helpers
# =============================================================================

def _object(value: Any) -> Mapping[str, Any] | None:
    """Return `value` if it is a JSON object, else None."""
    return value if isinstance(value, Mapping) else None


def _string(container: Mapping[str, Any] | None, key: str) -> str | None:
    """String at `container[key]`, or None if absent or not a string."""
    if container is None:
        return None
    value = container.get(key)
    return value if isinstance(value, str) else None


def _nested_string(container: Mapping[str, Any] | None, *keys: str) -> str | None:
    """Follow objects along `keys`; None as soon as a level is missing."""
    *path, last = keys
    for key in path:
        if container is None:
            return None
        container = _object(container.get(key))
    return _string(container, last)


def _integer(container: Mapping[str, Any], key: str) -> int | None:
    value = container.get(key)
    # bool is an int subclass but never a valid dimension
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


# =============================================================================
# Parsing
# =============================================================================

def parse_event_response(document: Mapping[str, Any]) -> EventResult:
    """
    Build an EventResult from an event search response body.

    Args:
        document: The deserialized JSON response

    Returns:
        EventResult with pagination links and parsed events

    Raises:
        TicketmasterParseError: If `_embedded.events` is missing, or an
            event lacks a required field
    """
    next_page, prev_page = parse_links(document.get("_links"))

    embedded = _object(document.get("_embedded"))
    if embedded is None:
        logger.error("Ticketmaster response has no _embedded container")
        raise TicketmasterParseError(details={"missing": "_embedded"})

    events_array = embedded.get("events")
    if not isinstance(events_array, list):
        logger.error("Ticketmaster response has no _embedded.events array")
        raise TicketmasterParseError(details={"missing": "_embedded.events"})

    events = parse_events_array(events_array)

    return EventResult(next_page=next_page, prev_page=prev_page, events=events)


def parse_links(links: Any) -> tuple[str | None, str | None]:
    """Extract (next, prev) page hrefs; either may be None."""
    links_obj = _object(links)
    return (
        _nested_string(links_obj, "next", "href"),
        _nested_string(links_obj, "prev", "href"),
    )


def parse_events_array(events_array: list[Any]) -> list[Event]:
    """Parse every entry of `_embedded.events`, in order."""
    return [parse_event(index, raw) for index, raw in enumerate(events_array)]


def parse_event(index: int, raw: Any) -> Event:
    """
    Parse one event object.

    Args:
        index: Position in the events array (for error details)
        raw: The event JSON

    Raises:
        TicketmasterParseError: If the entry isn't an object or lacks a
            string name, id or url
    """
    event = _object(raw)
    if event is None:
        logger.error(f"Event {index} is not a JSON object")
        raise TicketmasterParseError(details={"event_index": index})

    required = {field: _string(event, field) for field in REQUIRED_EVENT_FIELDS}
    missing = [field for field, value in required.items() if value is None]
    if missing:
        logger.error(f"Event {index} is missing required fields: {', '.join(missing)}")
        raise TicketmasterParseError(
            message=f"{EVENT_PARSE_ERROR}: event {index} is missing {', '.join(missing)}",
            details={"event_index": index, "missing": missing},
        )

    dates = _object(event.get("dates"))

    return Event(
        name=required["name"],
        id=required["id"],
        url=required["url"],
        images=parse_event_images(event),
        description=_string(event, "description"),
        additional_info=_string(event, "additionalInfo"),
        start=parse_event_date(dates, "start"),
        end=parse_event_date(dates, "end"),
        info=_string(event, "info"),
        please_note=_string(event, "pleaseNote"),
        location=parse_event_location(event),
    )


def parse_event_date(dates: Mapping[str, Any] | None, which: str) -> str | None:
    """
    Prefer `dates.<which>.dateTime`, fall back to `dates.<which>.localDate`.

    The value is passed through untouched; no parsing or timezone handling.
    """
    if dates is None:
        return None
    boundary = _object(dates.get(which))
    return _string(boundary, "dateTime") or _string(boundary, "localDate")


def parse_event_location(event: Mapping[str, Any]) -> EventLocation | None:
    """Build the venue location from `place`; None when there is no place."""
    place = _object(event.get("place"))
    if place is None:
        return None

    return EventLocation(
        name=_string(place, "name"),
        area_name=_nested_string(place, "area", "name"),
        address_line_1=_nested_string(place, "address", "line1"),
        address_line_2=_nested_string(place, "address", "line2"),
        address_line_3=_nested_string(place, "address", "line3"),
        city=_nested_string(place, "city", "name"),
        state=_nested_string(place, "state", "name"),
        country=(
            _nested_string(place, "country", "name"),
            _nested_string(place, "country", "countryCode"),
        ),
        postal_code=_string(place, "postalCode") or _string(place, "postal_code"),
    )


def parse_event_images(event: Mapping[str, Any]) -> list[EventImage]:
    """Images with a url, in their original order; the rest are skipped."""
    images_array = event.get("images")
    if not isinstance(images_array, list):
        return []

    images = []
    for raw in images_array:
        image = _object(raw)
        link = _string(image, "url")
        if link is None:
            continue
        images.append(
            EventImage(
                link=link,
                width=_integer(image, "width"),
                height=_integer(image, "height"),
            )
        )
    return images
