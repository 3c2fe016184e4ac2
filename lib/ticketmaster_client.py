# =============================================================================
# lib/ticketmaster_client.py - Ticketmaster Discovery API Client
# =============================================================================
# Issues event searches against the Discovery API and hands the JSON body
# to the event parser.
#
# One GET per search, bounded by the client's timeout. No retries.
#
# Usage:
#   from lib.ticketmaster_client import get_events
#   async with httpx.AsyncClient(timeout=10) as client:
#       result = await get_events(client, EventSearchParams(api_key=key, location="Denver"))
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.exceptions import TicketmasterRequestError
from core.models.event import EventResult, EventSearchParams
from core.services.event_parser import parse_event_response

logger = logging.getLogger(__name__)

API_PREFIX = "https://app.ticketmaster.com/discovery/v2/"
EVENT_ENDPOINT = "events.json"


def build_event_url(params: EventSearchParams) -> str:
    """
    Event search URL for `params`, without the API key.

    Example:
        "https://app.ticketmaster.com/discovery/v2/events.json?keyword=jazz"
    """
    return f"{API_PREFIX}{EVENT_ENDPOINT}?{params.build_query()}"


async def get_events(client: httpx.AsyncClient, params: EventSearchParams) -> EventResult:
    """
    Search for events.

    Args:
        client: Shared HTTP client (its timeout bounds the request)
        params: Validated search criteria

    Returns:
        The parsed page of events

    Raises:
        TicketmasterRequestError: On transport errors, error statuses or
            a body that isn't a JSON object
        TicketmasterParseError: If the body lacks the expected structure
    """
    endpoint = build_event_url(params)
    logger.info(f"Making request to {endpoint}")

    try:
        # All parameters go through `params`; httpx replaces any query
        # already present in the URL
        response = await client.get(
            f"{API_PREFIX}{EVENT_ENDPOINT}",
            params={**params.query_params(), "apikey": params.api_key},
        )
        response.raise_for_status()
        body: Any = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"Ticketmaster returned {e.response.status_code} for {endpoint}")
        raise TicketmasterRequestError(
            f"HTTP {e.response.status_code}",
            status=e.response.status_code,
        ) from e
    except httpx.HTTPError as e:
        logger.error(f"Ticketmaster request to {endpoint} failed: {e}")
        raise TicketmasterRequestError(str(e) or type(e).__name__) from e
    except ValueError as e:
        logger.error(f"Ticketmaster returned invalid JSON for {endpoint}")
        raise TicketmasterRequestError(f"invalid JSON: {e}") from e

    if not isinstance(body, dict):
        logger.error(f"Ticketmaster returned a {type(body).__name__} instead of an object")
        raise TicketmasterRequestError("response body is not a JSON object")

    result = parse_event_response(body)
    logger.info(f"Parsed {len(result.events)} events from Ticketmaster")
    return result
