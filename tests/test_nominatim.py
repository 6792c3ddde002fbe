import pytest
import requests

from src.geo.models import Coordinate
from src.vendors import nominatim


class DummyResponse:
    def __init__(self, status_code=200, payload=None, json_error=None):
        self.status_code = status_code
        self._payload = payload or {}
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._json_error:
            raise self._json_error
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()
        self.error = None

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, headers, timeout))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(nominatim, "_SESSION", session)
    return session


VARANASI = Coordinate(25.3176, 82.9739)


def test_lookup_sends_identifying_request(patch_session):
    patch_session.response = DummyResponse(
        payload={"display_name": "Varanasi, Uttar Pradesh, India", "address": {"state_district": "Varanasi", "state": "Uttar Pradesh"}}
    )

    guess = nominatim.lookup(VARANASI, user_agent="Tester/2.0", timeout=15)

    assert guess.district == "Varanasi"
    assert guess.state == "Uttar Pradesh"
    assert guess.formatted_address == "Varanasi, Uttar Pradesh, India"
    url, params, headers, timeout = patch_session.calls[0]
    assert url == nominatim.DEFAULT_URL
    assert params["lat"] == 25.3176 and params["lon"] == 82.9739
    assert params["format"] == "json"
    assert params["addressdetails"] == 1
    assert params["zoom"] == 8
    assert params["accept-language"] == "en"
    assert headers == {"User-Agent": "Tester/2.0"}
    assert timeout == 15


def test_parse_address_uses_field_priority():
    payload = {"address": {"city": "Pune City", "county": "Haveli", "village": "Wagholi", "state": "Maharashtra"}}
    assert nominatim.parse_address(payload).district == "Haveli"

    payload = {"address": {"town": "Sawantwadi", "municipality": "Sindhudurg", "state": "Maharashtra"}}
    assert nominatim.parse_address(payload).district == "Sawantwadi"

    payload = {"address": {"state_district": "", "village": "Wagholi", "state": "Maharashtra"}}
    assert nominatim.parse_address(payload).district == "Wagholi"


def test_parse_address_strips_district_suffix_and_builds_address():
    guess = nominatim.parse_address({"address": {"state_district": "Varanasi district", "state": "Uttar Pradesh"}})
    assert guess.district == "Varanasi"
    assert guess.formatted_address == "Varanasi, Uttar Pradesh, India"


@pytest.mark.parametrize(
    "payload",
    [
        {"address": {"county": "Haveli"}},
        {"address": {"state": "Maharashtra"}},
        {"address": {"county": "  ", "state": "Maharashtra"}},
        {"display_name": "Somewhere"},
        {"address": "not-a-dict"},
    ],
)
def test_parse_address_requires_district_and_state(payload):
    assert nominatim.parse_address(payload) is None


def test_lookup_returns_none_on_network_error(patch_session):
    patch_session.error = requests.Timeout("timed out")
    assert nominatim.lookup(VARANASI) is None


def test_lookup_returns_none_on_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=429)
    assert nominatim.lookup(VARANASI) is None


def test_lookup_returns_none_on_bad_json(patch_session):
    patch_session.response = DummyResponse(json_error=ValueError("no json"))
    assert nominatim.lookup(VARANASI) is None


def test_lookup_returns_none_on_error_payload(patch_session):
    patch_session.response = DummyResponse(payload={"error": "Unable to geocode"})
    assert nominatim.lookup(VARANASI) is None


def test_reverse_raises_on_error_payload(patch_session):
    patch_session.response = DummyResponse(payload={"error": "Unable to geocode"})
    with pytest.raises(nominatim.NominatimError):
        nominatim.reverse(VARANASI)
