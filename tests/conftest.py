import copy
import json
from pathlib import Path

import httpx
import pytest

from planyo_connector.clients import PlanyoAPIClient

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SITE_ID = "4321"
API_KEY = "test-api-key"
HASH_KEY = "test-hash-key"


def load_fixture(name: str) -> dict:
    with open(FIXTURES_DIR / "planyo_api" / name) as f:
        return json.load(f)


@pytest.fixture
def reservation_response():
    """Load Planyo single reservation response from fixture."""
    return load_fixture("reservation_response.json")


@pytest.fixture
def reservation_data(reservation_response):
    """The reservation object inside the single reservation response."""
    return copy.deepcopy(reservation_response["data"])


@pytest.fixture
def reservation_list_response():
    """Load Planyo reservation list response from fixture."""
    return load_fixture("reservation_list_response.json")


@pytest.fixture
def error_response():
    """Load Planyo error response from fixture."""
    return load_fixture("error_response.json")


@pytest.fixture
def requests_sent():
    """Requests captured by the mock transport."""
    return []


@pytest.fixture
def make_client(requests_sent):
    """Build a PlanyoAPIClient whose transport is served by ``handler``."""

    def _make_client(handler, **kwargs) -> PlanyoAPIClient:
        def _capture(request: httpx.Request) -> httpx.Response:
            requests_sent.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_capture))
        return PlanyoAPIClient(
            site_id=SITE_ID,
            api_key=API_KEY,
            hash_key=HASH_KEY,
            http_client=http_client,
            **kwargs,
        )

    return _make_client


@pytest.fixture
def json_handler():
    """Build a handler that always answers with a JSON document."""

    def _json_handler(document: dict, status_code: int = 200):
        def _handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, content=json.dumps(document).encode("utf-8"))

        return _handler

    return _json_handler
