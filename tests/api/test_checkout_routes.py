from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from checkout_gate.api.auth import require_api_key
from checkout_gate.core import messages
from checkout_gate.core import state_machine as sm
from checkout_gate.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def service(memory_repo, make_store):
    store = make_store()
    app.dependency_overrides[require_api_key] = lambda: None
    app.state.can_update_attributes = True
    with patch("checkout_gate.core.orchestrator.get_attribute_store", return_value=store), \
         patch("checkout_gate.core.orchestrator.metrics"):
        yield store
    app.dependency_overrides = {}
    app.state.can_update_attributes = True


def _fill(session_id, first, last, phone):
    for field, value in (("firstName", first), ("lastName", last), ("phone", phone)):
        resp = client.put(f"/api/checkout/{session_id}/fields/{field}", json={"value": value})
        assert resp.status_code == 200


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_gate_blocks_until_valid_submit(service, memory_repo):
    resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": True})
    assert resp.json() == {"behavior": "block", "errors": [{"message": messages.GATE_REQUIRED_DATA}]}

    form = client.get("/api/checkout/s1").json()
    # empty fields show errors once the buyer has tried to continue
    assert form["errors"]["firstName"] == messages.NAME_LETTERS_ONLY
    assert form["attemptedSubmit"] is True


def test_invalid_last_name_scenario(service, memory_repo):
    _fill("s1", "Анна", "O'Brien", "+1234567890123")

    out = client.post("/api/checkout/s1/submit").json()

    assert out["accepted"] is False
    assert out["field"] == "lastName"
    assert service.calls == []
    resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": True})
    assert resp.json()["behavior"] == "block"


def test_valid_submit_scenario(service, memory_repo):
    _fill("s1", "Anna", "Smith", "+123456789012")

    out = client.post("/api/checkout/s1/submit").json()

    assert out["accepted"] is True
    assert out["state"] == sm.CAPTURED
    # background run has finished by the time TestClient returns
    assert service.calls == [
        ("customer_first_name", "Anna"),
        ("customer_last_name", "Smith"),
        ("customer_phone", "+123456789012"),
    ]
    assert memory_repo["s1"].lastSync.status == sm.SYNC_SUCCEEDED
    resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": True})
    assert resp.json() == {"behavior": "allow"}

    form = client.get("/api/checkout/s1").json()
    assert {"key": "customer_phone", "value": "+123456789012"} in form["attributes"]


def test_second_write_failure_scenario(service, memory_repo):
    service.fail_on = "customer_last_name"

    out = client.post("/api/checkout/s1/submit",
                      json={"firstName": "Anna", "lastName": "Smith", "phone": "+123456789012"}).json()

    assert out["accepted"] is True
    assert [k for k, _ in service.calls] == ["customer_first_name", "customer_last_name"]
    assert memory_repo["s1"].lastSync.status == sm.SYNC_FAILED
    resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": True})
    assert resp.json() == {"behavior": "allow"}


def test_host_override_allows(service):
    resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": False})
    assert resp.json() == {"behavior": "allow"}


def test_unknown_field_is_404(service):
    resp = client.put("/api/checkout/s1/fields/email", json={"value": "a@b.c"})
    assert resp.status_code == 404


def test_capability_unavailable_replaces_form(service):
    app.state.can_update_attributes = False

    form = client.get("/api/checkout/s1").json()
    assert form["status"] == "warning"
    assert form["banner"]["title"] == messages.BANNER_TITLE

    resp = client.put("/api/checkout/s1/fields/firstName", json={"value": "Anna"})
    assert resp.status_code == 409
    resp = client.post("/api/checkout/s1/submit")
    assert resp.status_code == 409
    resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": True})
    assert resp.json() == {"behavior": "allow"}


def test_api_key_enforced_when_configured():
    app.dependency_overrides = {}
    with patch("checkout_gate.api.auth.settings") as mock_settings:
        mock_settings.API_KEY = "secret"
        resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": False})
        assert resp.status_code == 401
        resp = client.post("/api/checkout/s1/intercept", json={"canBlockProgress": False},
                           headers={"x-api-key": "secret"})
        assert resp.status_code == 200


def test_submit_with_partial_body_merges_stored_values(service, memory_repo):
    _fill("s1", "Anna", "Smith", "+12")

    out = client.post("/api/checkout/s1/submit", json={"phone": "+123456789012"}).json()

    assert out["accepted"] is True
    assert memory_repo["s1"].captured.lastName == "Smith"
