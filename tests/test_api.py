"""
HTTP API tests: identity headers, CRUD, the report workflow, forms and
analysis endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from core.storage import Storage, set_storage
from web.app import create_app
from utils.config import Config


def headers(role: str, user_id: int = 1) -> dict:
    return {"X-User-Role": role, "X-User-Id": str(user_id)}


APPRAISER = headers("appraiser", 2)
REVIEWER = headers("reviewer", 3)
CLIENT = headers("client", 4)
ADMIN = headers("admin", 1)


@pytest.fixture
def client():
    set_storage(Storage())
    with TestClient(create_app(Config(debug=True))) as test_client:
        yield test_client
    set_storage(None)


@pytest.fixture
def subject_property(client):
    response = client.post(
        "/properties",
        json={
            "address": "12 Oak Lane",
            "city": "Austin",
            "state": "TX",
            "zipCode": "78701",
            "propertyType": "residential",
            "buildingSize": "2500",
            "bedrooms": 4,
            "bathrooms": 3,
            "yearBuilt": 2000,
            "lotSize": "0.3",
        },
        headers=APPRAISER,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def draft_report(client, subject_property):
    response = client.post(
        "/reports",
        json={"propertyId": subject_property["id"], "clientId": 4, "purpose": "Purchase"},
        headers=APPRAISER,
    )
    assert response.status_code == 201
    return response.json()


def move(client, report_id, status, who):
    return client.post(f"/reports/{report_id}/status", json={"status": status}, headers=who)


# =============================================================================
# Health & Identity
# =============================================================================

class TestHealthAndIdentity:

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/").status_code == 200

    def test_missing_role_is_401(self, client):
        assert client.get("/properties").status_code == 401

    def test_unknown_role_is_401(self, client):
        assert client.get("/properties", headers={"X-User-Role": "owner"}).status_code == 401

    def test_non_integer_user_id_is_401(self, client):
        response = client.get("/properties", headers={"X-User-Role": "admin", "X-User-Id": "abc"})

        assert response.status_code == 401


# =============================================================================
# Users & Properties
# =============================================================================

class TestUsersAndProperties:

    def test_create_and_list_users(self, client):
        response = client.post(
            "/users",
            json={"email": "ana@example.com", "firstName": "Ana", "lastName": "Ruiz", "role": "reviewer"},
            headers=ADMIN,
        )

        assert response.status_code == 201
        assert response.json()["role"] == "reviewer"
        assert len(client.get("/users?role=reviewer", headers=ADMIN).json()) == 1

    def test_duplicate_email(self, client):
        body = {"email": "ana@example.com", "firstName": "Ana", "lastName": "Ruiz"}
        client.post("/users", json=body, headers=ADMIN)

        assert client.post("/users", json=body, headers=ADMIN).status_code == 409

    def test_only_admin_deletes_users(self, client):
        client.post("/users", json={"email": "a@b.co", "firstName": "A", "lastName": "B"}, headers=ADMIN)

        assert client.delete("/users/1", headers=APPRAISER).status_code == 403
        assert client.delete("/users/1", headers=ADMIN).status_code == 204

    def test_property_fields_round_trip(self, client, subject_property):
        fetched = client.get(f"/properties/{subject_property['id']}", headers=CLIENT).json()

        assert fetched["buildingSize"] == "2500"
        assert fetched["propertyType"] == "residential"
        assert fetched["createdById"] == 2

    def test_client_cannot_create_property(self, client):
        response = client.post(
            "/properties",
            json={"address": "1 A St", "city": "X", "state": "TX", "zipCode": "78701", "propertyType": "land"},
            headers=CLIENT,
        )

        assert response.status_code == 403

    def test_filter_properties(self, client, subject_property):
        assert len(client.get("/properties?city=Austin", headers=ADMIN).json()) == 1
        assert client.get("/properties?city=Dallas", headers=ADMIN).json() == []

    def test_missing_property_is_404(self, client):
        response = client.get("/properties/99", headers=ADMIN)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


# =============================================================================
# Reports
# =============================================================================

class TestReportWorkflow:

    def test_new_report_is_draft(self, draft_report):
        assert draft_report["status"] == "draft"
        assert draft_report["appraiserId"] == 2

    def test_report_needs_existing_property(self, client):
        response = client.post("/reports", json={"propertyId": 42}, headers=APPRAISER)

        assert response.status_code == 404

    def test_client_cannot_create_report(self, client, subject_property):
        response = client.post("/reports", json={"propertyId": subject_property["id"]}, headers=CLIENT)

        assert response.status_code == 403

    def test_status_cannot_change_through_patch(self, client, draft_report):
        response = client.patch(
            f"/reports/{draft_report['id']}", json={"status": "approved"}, headers=APPRAISER
        )

        assert response.status_code == 400

    def test_patch_updates_fields(self, client, draft_report):
        response = client.patch(f"/reports/{draft_report['id']}", json={"value": 432500}, headers=APPRAISER)

        assert response.json()["value"] == 432500

    def test_full_status_workflow(self, client, draft_report):
        report_id = draft_report["id"]

        submitted = move(client, report_id, "pending_review", APPRAISER).json()
        assert submitted["status"] == "pending_review"
        assert submitted["submittedAt"] is not None

        picked_up = move(client, report_id, "in_review", REVIEWER).json()
        assert picked_up["reviewerId"] == 3

        approved = move(client, report_id, "approved", REVIEWER).json()
        assert approved["approvedAt"] is not None

        finalized = move(client, report_id, "finalized", APPRAISER).json()
        assert finalized["status"] == "finalized"
        assert finalized["finalizedAt"] is not None

    def test_forbidden_transition_is_409(self, client, draft_report):
        report_id = draft_report["id"]
        move(client, report_id, "pending_review", APPRAISER)
        move(client, report_id, "in_review", REVIEWER)

        response = move(client, report_id, "approved", APPRAISER)

        assert response.status_code == 409
        assert response.json() == {
            "error": "invalid_status_transition",
            "message": "Invalid status transition from 'in_review' to 'approved' for role 'appraiser'",
            "role": "appraiser",
            "fromStatus": "in_review",
            "toStatus": "approved",
        }
        assert client.get(f"/reports/{report_id}", headers=ADMIN).json()["status"] == "in_review"

    def test_client_cannot_change_status(self, client, draft_report):
        assert move(client, draft_report["id"], "pending_review", CLIENT).status_code == 409

    def test_unknown_status_is_422(self, client, draft_report):
        assert move(client, draft_report["id"], "published", ADMIN).status_code == 422

    def test_clients_see_only_their_reports(self, client, draft_report):
        other_client = headers("client", 9)

        assert len(client.get("/reports", headers=CLIENT).json()) == 1
        assert client.get("/reports", headers=other_client).json() == []
        assert client.get(f"/reports/{draft_report['id']}", headers=other_client).status_code == 404

    def test_client_without_user_id_is_401(self, client, draft_report):
        anonymous_client = {"X-User-Role": "client"}

        assert client.get("/reports", headers=anonymous_client).status_code == 401
        assert client.get(f"/reports/{draft_report['id']}", headers=anonymous_client).status_code == 401

    def test_client_cannot_open_unassigned_report(self, client, subject_property):
        response = client.post("/reports", json={"propertyId": subject_property["id"]}, headers=APPRAISER)
        report_id = response.json()["id"]

        assert client.get(f"/reports/{report_id}", headers=CLIENT).status_code == 404
        assert client.get("/reports", headers=CLIENT).json() == []

    def test_filter_by_status(self, client, draft_report):
        assert len(client.get("/reports?status=draft", headers=ADMIN).json()) == 1
        assert client.get("/reports?status=approved", headers=ADMIN).json() == []

    def test_admin_deletes_report_and_comparables(self, client, draft_report):
        report_id = draft_report["id"]
        client.post(
            f"/reports/{report_id}/comparables",
            json={"address": "5 Elm St", "salePrice": 400000},
            headers=APPRAISER,
        )

        assert client.delete(f"/reports/{report_id}", headers=APPRAISER).status_code == 403
        assert client.delete(f"/reports/{report_id}", headers=ADMIN).status_code == 204
        assert client.get(f"/reports/{report_id}", headers=ADMIN).status_code == 404


class TestComparables:

    def test_adjusted_against_subject(self, client, draft_report):
        response = client.post(
            f"/reports/{draft_report['id']}/comparables",
            json={
                "address": "5 Elm St",
                "salePrice": 400000,
                "buildingSize": "2300",
                "bedrooms": 3,
                "bathrooms": 2,
                "yearBuilt": 1995,
                "lotSize": "0.25",
            },
            headers=APPRAISER,
        )

        assert response.status_code == 201
        comp = response.json()
        assert comp["adjustments"] == {"buildingSize": 20000, "bedrooms": 5000, "bathrooms": 7500, "lotSize": 0}
        assert comp["totalAdjustment"] == 32500
        assert comp["adjustedPrice"] == 432500
        assert comp["reportId"] == draft_report["id"]

    def test_list_and_remove(self, client, draft_report):
        report_id = draft_report["id"]
        created = client.post(
            f"/reports/{report_id}/comparables",
            json={"address": "5 Elm St", "salePrice": 400000},
            headers=APPRAISER,
        ).json()

        assert len(client.get(f"/reports/{report_id}/comparables", headers=CLIENT).json()) == 1
        assert client.delete(f"/reports/{report_id}/comparables/{created['id']}", headers=APPRAISER).status_code == 204
        assert client.get(f"/reports/{report_id}/comparables", headers=CLIENT).json() == []

    def test_locked_after_approval(self, client, draft_report):
        report_id = draft_report["id"]
        move(client, report_id, "approved", ADMIN)

        response = client.post(
            f"/reports/{report_id}/comparables",
            json={"address": "5 Elm St", "salePrice": 400000},
            headers=APPRAISER,
        )

        assert response.status_code == 409

    def test_pdf_download(self, client, draft_report):
        report_id = draft_report["id"]
        client.post(
            f"/reports/{report_id}/comparables",
            json={"address": "5 Elm St", "salePrice": 400000, "bedrooms": 3},
            headers=APPRAISER,
        )

        response = client.get(f"/reports/{report_id}/pdf", headers=CLIENT)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")


# =============================================================================
# Forms
# =============================================================================

class TestForms:

    @pytest.fixture
    def form(self, client):
        response = client.post(
            "/forms",
            json={
                "name": "Site inspection",
                "type": "site_inspection",
                "schema": {
                    "type": "object",
                    "properties": {"inspector": {"type": "string"}, "notes": {"type": "string"}},
                    "required": ["inspector"],
                },
            },
            headers=ADMIN,
        )
        assert response.status_code == 201
        return response.json()

    def test_only_admin_creates_forms(self, client):
        response = client.post(
            "/forms",
            json={"name": "x", "type": "valuation", "schema": {"type": "object"}},
            headers=APPRAISER,
        )

        assert response.status_code == 403

    def test_invalid_schema_is_400(self, client):
        response = client.post(
            "/forms",
            json={"name": "x", "type": "valuation", "schema": {"type": 12}},
            headers=ADMIN,
        )

        assert response.status_code == 400

    def test_schema_as_json_string(self, client):
        response = client.post(
            "/forms",
            json={"name": "x", "type": "valuation", "schema": '{"type": "object"}'},
            headers=ADMIN,
        )

        assert response.json()["schema"] == {"type": "object"}

    def test_validate(self, client, form):
        result = client.post(f"/forms/{form['id']}/validate", json={"data": {}}, headers=APPRAISER).json()

        assert result["valid"] is False
        assert result["completionStatus"] == 0.0

    def test_submission_upserts_per_report(self, client, form, draft_report):
        url = f"/forms/{form['id']}/submissions"

        first = client.post(url, json={"reportId": draft_report["id"], "data": {}}, headers=APPRAISER).json()
        second = client.post(
            url,
            json={"reportId": draft_report["id"], "data": {"inspector": "J. Ortiz"}},
            headers=APPRAISER,
        ).json()

        assert first["id"] == second["id"]
        assert second["isValid"] is True
        assert second["completionStatus"] == 0.7
        assert len(client.get(url, headers=ADMIN).json()) == 1

    def test_submission_needs_report(self, client, form):
        response = client.post(
            f"/forms/{form['id']}/submissions", json={"reportId": 99, "data": {}}, headers=APPRAISER
        )

        assert response.status_code == 404


# =============================================================================
# Analysis
# =============================================================================

class TestAnalysis:

    def test_adjustments(self, client):
        response = client.post(
            "/analysis/adjustments",
            json={
                "subject": {"buildingSize": "2500", "bedrooms": 4, "bathrooms": 3, "yearBuilt": 2000, "lotSize": "0.3"},
                "comparable": {
                    "buildingSize": "2300",
                    "bedrooms": 3,
                    "bathrooms": 2,
                    "yearBuilt": 1995,
                    "lotSize": "0.25",
                    "salePrice": 400000,
                },
            },
            headers=CLIENT,
        )

        assert response.json()["adjustedPrice"] == 432500

    def test_comparable_selection(self, client):
        response = client.post(
            "/analysis/comparables/select",
            json={
                "subject": {"bedrooms": 3},
                "comparables": [{"bedrooms": 3, "salePrice": 300000}, {"bedrooms": 2, "salePrice": 290000}],
                "maxResults": 1,
            },
            headers=APPRAISER,
        )

        data = response.json()
        assert len(data["comparables"]) == 1
        assert data["recommendedValue"] == 300000

    def test_market(self, client):
        response = client.post(
            "/analysis/market",
            json={"location": {"city": "Austin", "state": "TX"}, "salesData": []},
            headers=APPRAISER,
        )

        assert response.json()["trends"]["trend"] == "Insufficient data"

    def test_agent(self, client):
        response = client.post(
            "/analysis/agents/data-validator",
            json={"data": {"address": "1 A St"}},
            headers=APPRAISER,
        )

        assert response.json()["isValid"] is False

    def test_unknown_agent_is_400(self, client):
        response = client.post("/analysis/agents/nope", json={"data": {}}, headers=APPRAISER)

        assert response.status_code == 400
        assert response.json()["error"] == "unknown_agent"

    def test_bad_agent_input_is_400(self, client):
        response = client.post("/analysis/agents/comp-selector", json={"data": {}}, headers=APPRAISER)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_agent_input"

    @pytest.mark.parametrize("agent_type,body", [
        ("market-analyzer", {"data": {"location": "Austin", "salesData": []}}),
        ("comp-selector", {"data": {"subject": {}, "comparables": ["x"]}}),
        ("comp-selector", {
            "data": {"subject": {}, "comparables": []},
            "options": {"adjustments": {"bedroomValue": "abc"}},
        }),
    ])
    def test_malformed_agent_payload_is_400(self, client, agent_type, body):
        response = client.post(f"/analysis/agents/{agent_type}", json=body, headers=APPRAISER)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_agent_input"
