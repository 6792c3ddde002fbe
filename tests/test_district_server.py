import pytest

from src.geo.cache import ResultCache
from src.geo.fallback import resolve_fallback
from src.geo.matcher import CatalogMatcher
from src.geo.resolver import CoordinateResolver
from src.jobs import district_server


class DummyCatalog:
    def __init__(self, records=None):
        self.records = records or []

    def find_by_name(self, name):
        return next((r for r in self.records if r["name"].lower() == name.lower()), None)

    def find_by_name_in_state(self, name, state, exact=False):
        return None

    def find_in_state(self, state, limit=3):
        return [r for r in self.records if state.lower() in r["state"].lower()][:limit]


class CountingUpstream:
    def __init__(self):
        self.calls = 0

    def __call__(self, coord):
        self.calls += 1
        return None


@pytest.fixture
def upstream():
    return CountingUpstream()


@pytest.fixture
def client(monkeypatch, upstream):
    resolver = CoordinateResolver([upstream, resolve_fallback], cache=ResultCache())
    monkeypatch.setattr(district_server, "_resolver", resolver)
    monkeypatch.setattr(
        district_server,
        "_matcher",
        CatalogMatcher(DummyCatalog([{"name": "Central Delhi", "state": "Delhi", "code": "DL01"}])),
    )
    return district_server.app.test_client()


def test_health_endpoint(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_detect_requires_coordinates(client):
    assert client.post("/api/location/detect", json={}).status_code == 400
    assert client.post("/api/location/detect", json={"latitude": 28.6}).status_code == 400
    assert client.post("/api/location/detect", json={"latitude": "north", "longitude": 77.2}).status_code == 400
    assert client.post("/api/location/detect", json=[28.6, 77.2]).status_code == 400
    assert client.post("/api/location/detect", json={"latitude": 10**400, "longitude": 77.2}).status_code == 400


def test_detect_out_of_domain_never_calls_upstream(client, upstream):
    response = client.post("/api/location/detect", json={"latitude": 0, "longitude": 0})

    assert response.status_code == 404
    assert response.get_json()["error"] == "Coordinates are outside the supported area"
    assert upstream.calls == 0


def test_detect_unmapped_region(client):
    response = client.post("/api/location/detect", json={"latitude": 34.0837, "longitude": 74.7973})

    assert response.status_code == 404
    assert response.get_json()["error"] == "Could not determine district from coordinates"


def test_detect_matches_catalog_record(client, upstream):
    response = client.post("/api/location/detect", json={"latitude": 28.6139, "longitude": 77.2090})

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["matched"] is True
    assert data["district"] == "Central Delhi"
    assert data["matched_record"]["code"] == "DL01"
    assert data["guess"] == {
        "district": "Central Delhi",
        "state": "Delhi",
        "formatted_address": "Central Delhi, Delhi, India",
    }
    assert data["coordinates"] == {"latitude": 28.6139, "longitude": 77.209}

    client.post("/api/location/detect", json={"latitude": 28.6139, "longitude": 77.2090})
    assert upstream.calls == 1


def test_detect_reports_unmatched_guess(client):
    response = client.post("/api/location/detect", json={"latitude": 19.0760, "longitude": 72.8777})

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["matched"] is False
    assert data["matched_district"] is None
    assert data["district"] == "Mumbai Suburban"
    assert data["state"] == "Maharashtra"


def test_debug_reports_matching_tier(client):
    response = client.get("/api/location/debug/28.6139/77.2090")

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["tier"] == "exact"
    assert data["matched"] is True
    assert data["matched_record"]["code"] == "DL01"
    assert data["guess"]["district"] == "Central Delhi"


def test_debug_reports_unmatched_guess(client):
    data = client.get("/api/location/debug/19.0760/72.8777").get_json()["data"]

    assert data["tier"] is None
    assert data["matched_record"] is None
    assert data["guess"]["district"] == "Mumbai Suburban"


def test_debug_validates_coordinates(client, upstream):
    assert client.get("/api/location/debug/north/77.2").status_code == 400
    assert client.get("/api/location/debug/nan/77.2").status_code == 400

    response = client.get("/api/location/debug/0/0")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Coordinates are outside the supported area"
    assert upstream.calls == 0


def test_list_endpoints(client, monkeypatch):
    monkeypatch.setattr(district_server.db, "list_district_names", lambda state=None: ["Agra"] if state in (None, "Uttar Pradesh") else [])
    monkeypatch.setattr(district_server.db, "list_states", lambda: ["Uttar Pradesh"])

    assert client.get("/api/districts").get_json() == {"data": ["Agra"]}
    assert client.get("/api/districts/state/Uttar%20Pradesh").get_json() == {"data": ["Agra"]}
    assert client.get("/api/districts/state/Goa").status_code == 404
    assert client.get("/api/states").get_json() == {"data": ["Uttar Pradesh"]}


def test_empty_catalog_returns_sync_hint(client, monkeypatch):
    monkeypatch.setattr(district_server.db, "list_district_names", lambda state=None: [])
    response = client.get("/api/districts")
    assert response.status_code == 404
    assert "sync" in response.get_json()["message"]


def test_get_district(client, monkeypatch):
    monkeypatch.setattr(
        district_server.db, "get_district", lambda name: {"name": name, "state": "Goa"} if name == "North Goa" else None
    )

    assert client.get("/api/districts/North%20Goa").get_json()["data"]["state"] == "Goa"
    assert client.get("/api/districts/Nowhere").status_code == 404


def test_catalog_failure_becomes_500(client, monkeypatch):
    def broken(name):
        raise RuntimeError("db down")

    monkeypatch.setattr(district_server.db, "get_district", broken)

    response = client.get("/api/districts/Agra")
    assert response.status_code == 500
    assert response.get_json() == {"error": "internal server error"}


def test_sync_is_queued(client, monkeypatch):
    submitted = []

    class DummyExecutor:
        def submit(self, fn):
            submitted.append(fn)

    monkeypatch.setattr(district_server, "_executor", DummyExecutor())

    response = client.post("/api/sync")

    assert response.status_code == 202
    assert response.get_json() == {"data": {"status": "queued"}}
    assert submitted == [district_server._run_sync_safe]


def test_run_sync_safe_logs_failures(monkeypatch, caplog):
    def failing_sync():
        raise RuntimeError("api down")

    monkeypatch.setattr(district_server, "run_sync", failing_sync)

    with caplog.at_level("ERROR"):
        district_server._run_sync_safe()

    assert "District sync failed" in " ".join(caplog.messages)
