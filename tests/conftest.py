# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Selects the Testing environment before any imports
# - Provides sample Ticketmaster documents and app/template fixtures
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ["SERVER_ENV"] = "Testing"
os.environ.pop("CONFIG_DIR", None)

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings


# =============================================================================
# Ticketmaster Documents
# =============================================================================

@pytest.fixture
def sample_event():
    """A fully populated event as returned by the Discovery API."""
    return {
        "name": "Jazz Night",
        "id": "vvG1zZ4Jk5kJ2n",
        "url": "https://www.ticketmaster.com/event/vvG1zZ4Jk5kJ2n",
        "description": "An evening of jazz",
        "additionalInfo": "Doors at 7pm",
        "info": "All ages",
        "pleaseNote": "No re-entry",
        "images": [
            {"url": "https://s1.ticketm.net/img/16_9.jpg", "width": 640, "height": 360},
            {"url": "https://s1.ticketm.net/img/3_2.jpg", "width": 305},
        ],
        "dates": {
            "start": {"localDate": "2024-06-01", "dateTime": "2024-06-02T02:00:00Z"},
            "end": {"localDate": "2024-06-02"},
        },
        "place": {
            "name": "Dazzle",
            "area": {"name": "Downtown"},
            "address": {"line1": "1512 Curtis St", "line2": "Suite 1"},
            "city": {"name": "Denver"},
            "state": {"name": "Colorado"},
            "country": {"name": "United States Of America", "countryCode": "US"},
            "postalCode": "80202",
        },
    }


@pytest.fixture
def sample_response(sample_event):
    """A search response page containing one event and both page links."""
    return {
        "_links": {
            "self": {"href": "/discovery/v2/events.json?page=1"},
            "next": {"href": "/discovery/v2/events.json?page=2"},
            "prev": {"href": "/discovery/v2/events.json?page=0"},
        },
        "_embedded": {"events": [sample_event]},
        "page": {"size": 20, "totalElements": 41, "totalPages": 3, "number": 1},
    }


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def test_settings(tmp_path):
    """
    Testing settings with a private static root.

    The static root holds one stylesheet and sits next to a file that
    must never be reachable through /static.
    """
    static_dir = tmp_path / "static"
    (static_dir / "css").mkdir(parents=True)
    (static_dir / "css" / "site.css").write_text("body { color: black; }")
    (static_dir / "notes.unknownext").write_text("plain notes")
    (tmp_path / "secret.txt").write_text("top secret")

    return get_settings().model_copy(update={"static_dir": static_dir})


@pytest.fixture
def app(test_settings):
    from app.main import create_app

    return create_app(test_settings)


@pytest.fixture
def client(app):
    return TestClient(app)
