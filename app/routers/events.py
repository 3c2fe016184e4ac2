# =============================================================================
# app/routers/events.py - Event Search Endpoint
# =============================================================================
# Searches Ticketmaster and renders the results page.
#
# Failures are handled by the app's exception handlers: parse errors
# become a 500 page, unreachable upstream a 502 page. Missing criteria
# are shown on the results page itself with a 400.
# =============================================================================

import logging
from typing import Annotated
from urllib.parse import parse_qs, urlencode, urlsplit

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from app.dependencies import HttpClientDep, SettingsDep, TemplatesDep
from app.exceptions import NoSearchCriteriaError
from core.models.event import EventSearchParams
from lib.templates import render_template
from lib.ticketmaster_client import get_events

logger = logging.getLogger(__name__)

router = APIRouter()


def _blank_to_none(value: str | None) -> str | None:
    """Empty form fields count as not provided."""
    if value is None or not value.strip():
        return None
    return value.strip()


def local_page_link(provider_href: str | None, params: EventSearchParams) -> str | None:
    """
    Turn a Ticketmaster `_links` href into a link to this app's /events.

    Only the `page` number is taken from the provider href; the criteria
    come from the current search. Returns None when the href has no
    usable page.

    Example:
        "/discovery/v2/events.json?page=2" -> "/events?keyword=jazz&page=2"
    """
    if not provider_href:
        return None
    pages = parse_qs(urlsplit(provider_href).query).get("page")
    if not pages or not pages[0].isdigit():
        return None

    query = {}
    if params.search_terms is not None:
        query["keyword"] = params.search_terms
    if params.location is not None:
        query["location"] = params.location
    query["page"] = int(pages[0])
    return f"/events?{urlencode(query)}"


@router.get("/events", response_class=HTMLResponse)
async def search_events(
    settings: SettingsDep,
    templates: TemplatesDep,
    client: HttpClientDep,
    keyword: Annotated[str | None, Query(description="Free-text search")] = None,
    location: Annotated[str | None, Query(description="City to search in")] = None,
    page: Annotated[int | None, Query(ge=0, description="Zero-based result page")] = None,
):
    """
    Search events by keyword and/or city and render them.
    """
    logger.debug(f"Event search: keyword={keyword!r} location={location!r} page={page}")

    try:
        params = EventSearchParams(
            api_key=settings.ticketmaster.token,
            search_terms=_blank_to_none(keyword),
            location=_blank_to_none(location),
            page=page,
        )
    except NoSearchCriteriaError as e:
        status, text = render_template(
            templates, "events.j2", {"error": e.message, "suggestion": e.suggestion}
        )
        return HTMLResponse(text, status_code=e.status_code if status == 200 else status)

    result = await get_events(client, params)

    status, text = render_template(
        templates,
        "events.j2",
        {
            "result": result,
            "next_link": local_page_link(result.next_page, params),
            "prev_link": local_page_link(result.prev_page, params),
        },
    )
    return HTMLResponse(text, status_code=status)
