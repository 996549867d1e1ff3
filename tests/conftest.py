# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Shared fixtures: small zip datasets, a fake HTTP session standing in for
# requests.Session, and photographer listings.
# =============================================================================

import os

os.environ.setdefault("ZIP_DATA_BASE_URL", "http://test.local/data")

import pytest
import requests

from lensmatch.collectors.zip_dataset import ZipDatasetLoader
from lensmatch.core.zip_search import ZipSearchEngine
from lensmatch.models.photographer import ProfileRecord


BASE_URL = "http://test.local/data"
QUICK_URL = f"{BASE_URL}/uszips-quick.json"
FULL_URL = f"{BASE_URL}/uszips.json"


# =============================================================================
# Fake HTTP
# =============================================================================

class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.payload


class FakeSession:
    """
    Maps url -> payload. A list of FakeResponse objects is served in order,
    one per request; anything else is served as a 200 JSON body.
    Unknown urls return 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404)
        if isinstance(route, list) and route and isinstance(route[0], FakeResponse):
            return route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)

    def count(self, url):
        return self.calls.count(url)


def zip_entry(zip_code, city, state, population, lat=0.0, lng=0.0):
    return {
        "zip": zip_code,
        "city": city,
        "state": state,
        "latitude": lat,
        "longitude": lng,
        "population": population,
    }


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def full_payload():
    """Full dataset, deliberately out of zip order"""
    return [
        zip_entry("94102", "San Francisco", "CA", 28000, 37.78, -122.42),
        zip_entry("90002", "Los Angeles", "CA", 30000, 33.95, -118.25),
        zip_entry("90001", "Los Angeles", "CA", 50000, 33.97, -118.25),
        zip_entry("90210", "Beverly Hills", "CA", 21000, 34.10, -118.41),
        zip_entry("92305", "Angelus Oaks", "CA", 500, 34.15, -116.98),
        zip_entry("10001", "New York", "NY", 21102, 40.75, -73.99),
        zip_entry("10002", "New York", "NY", 81000, 40.72, -73.99),
        zip_entry("11201", "Brooklyn", "NY", 50000, 40.69, -73.99),
        zip_entry("97201", "Portland", "OR", 15000, 45.50, -122.69),
        zip_entry("04101", "Portland", "ME", 20000, 43.66, -70.26),
        zip_entry("78701", "Austin", "TX", 10000, 30.27, -97.74),
    ]


@pytest.fixture
def quick_payload():
    """Population-ranked subset"""
    return [
        zip_entry("10002", "New York", "NY", 81000),
        zip_entry("90001", "Los Angeles", "CA", 50000),
        zip_entry("11201", "Brooklyn", "NY", 50000),
    ]


@pytest.fixture
def session(full_payload, quick_payload):
    return FakeSession({QUICK_URL: quick_payload, FULL_URL: full_payload})


@pytest.fixture
def loader(session):
    return ZipDatasetLoader(base_url=BASE_URL, session=session)


@pytest.fixture
def engine(loader):
    return ZipSearchEngine(loader)


@pytest.fixture
def profiles():
    """Photographer listings in page-load order"""
    return [
        ProfileRecord(
            id="1", display_name="Ana", specialties=["Wedding Photography", "Portrait Photography"],
            languages=["English", "Spanish"], hourly_rate=150, average_rating=4.8,
            location_city="Los Angeles", location_state="California",
        ),
        ProfileRecord(
            id="2", display_name="Ben", specialties=["Event Photography"],
            languages=["English"], hourly_rate=300, average_rating=4.2,
            location_city="Austin", location_state="Texas",
        ),
        ProfileRecord(
            id="3", display_name="Chloe", specialties=["Videography", "Wedding Films"],
            languages=["French", "English"], hourly_rate=500, average_rating=4.9,
            location_city="Little Rock", location_state="Arkansas",
        ),
        ProfileRecord(
            id="4", display_name="Dev", specialties=["Corporate"],
            languages=["Hindi"], hourly_rate=600, average_rating=3.9,
            location_city=None, location_state="Kansas",
        ),
        ProfileRecord(
            id="5", display_name="Eli", specialties=["Newborn", "Family Portrait"],
            languages=["Korean", "English"], hourly_rate=100, average_rating=4.5,
            location_city="San Francisco", location_state="California",
        ),
    ]
