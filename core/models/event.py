# =============================================================================
# core/models/event.py - Event Search Schemas
# =============================================================================
# These models define the internal shape of Ticketmaster event data:
# - EventSearchParams: One search request (validated on construction)
# - EventResult: One page of search results
# - Event / EventLocation / EventImage: Records built by the event parser
#
# All models are frozen value objects living for one request.
# =============================================================================

from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.exceptions import NoSearchCriteriaError


class EventSearchParams(BaseModel):
    """
    Criteria for one event search.

    At least one of `search_terms` or `location` must be set; otherwise
    construction raises NoSearchCriteriaError.

    Example:
        EventSearchParams(api_key="abc", search_terms="jazz", location="Denver")
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., description="Ticketmaster API consumer key")

    search_terms: str | None = Field(
        default=None,
        description="Free-text search sent as the `keyword` parameter"
    )

    location: str | None = Field(
        default=None,
        description="City name sent as the `city` parameter"
    )

    page: int | None = Field(
        default=None,
        ge=0,
        description="Zero-based result page sent as the `page` parameter"
    )

    @model_validator(mode="after")
    def require_criteria(self) -> "EventSearchParams":
        if self.search_terms is None and self.location is None:
            raise NoSearchCriteriaError()
        return self

    def query_params(self) -> dict[str, str | int]:
        """
        Query parameters for the provided criteria, without the API key.

        Example:
            {"keyword": "jazz", "city": "Denver"}
        """
        query: dict[str, str | int] = {}
        if self.search_terms is not None:
            query["keyword"] = self.search_terms
        if self.location is not None:
            query["city"] = self.location
        if self.page is not None:
            query["page"] = self.page
        return query

    def build_query(self) -> str:
        """
        Query string for the provided criteria.

        Joined by "&" only when more than one parameter is present. The API
        key is not part of it so the query can be logged.

        Example:
            "keyword=jazz&city=Denver"
        """
        return urlencode(self.query_params())


class EventImage(BaseModel):
    """An image attached to an event."""

    model_config = ConfigDict(frozen=True)

    link: str
    width: int | None = None
    height: int | None = None


class EventLocation(BaseModel):
    """
    Where an event takes place.

    Every field is optional; the API omits whatever it doesn't know.
    `country` is a (name, country code) pair.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, description="Venue name")
    area_name: str | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    address_line_3: str | None = None
    city: str | None = None
    state: str | None = None
    country: tuple[str | None, str | None] = (None, None)
    postal_code: str | None = None


class Event(BaseModel):
    """
    A single event.

    `start` and `end` are carried as the API sends them: an exact
    date-time when known, otherwise a local date.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    url: str
    images: list[EventImage] = Field(default_factory=list)
    description: str | None = None
    additional_info: str | None = None
    start: str | None = None
    end: str | None = None
    info: str | None = None
    please_note: str | None = None
    location: EventLocation | None = None


class EventResult(BaseModel):
    """One page of events plus links to the neighbouring pages."""

    model_config = ConfigDict(frozen=True)

    next_page: str | None = None
    prev_page: str | None = None
    events: list[Event] = Field(default_factory=list)
