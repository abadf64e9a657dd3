# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# End-to-end tests through FastAPI's TestClient:
# - success envelopes {message, data, token?}
# - the single error envelope {errors: [...]}
# - status codes per route
# =============================================================================

from unittest.mock import MagicMock

import pytest

from lib.contact_store import ContactStoreError

MISSING_ID = "6f1c1a3e-4b7d-4c11-9a39-0d5f2c7b8e01"


def update_body(payload, **changes):
    body = {k: v for k, v in payload.items() if k != "password"}
    body.update(changes)
    return body


@pytest.fixture
def created(client, contact_payload):
    """A contact created through the API; returns the response JSON."""
    response = client.post("/", json=contact_payload)
    assert response.status_code == 200
    return response.json()


# =============================================================================
# POST /
# =============================================================================

class TestCreateEndpoint:
    """Tests for POST /."""

    def test_create_then_repeat(self, client):
        """Test the create example: 200 with a token, then a 400 duplicate."""
        body = {"firstName": "A", "lastName": "B", "email": "a@b.com", "phone": "123", "password": "secret1"}

        first = client.post("/", json=body)
        second = client.post("/", json=body)

        assert first.status_code == 200
        assert first.json()["message"] == "New contact created"
        assert first.json()["data"]["email"] == "a@b.com"
        assert first.json()["token"]

        assert second.status_code == 400
        assert second.json() == {
            "errors": [
                {
                    "msg": "Email-id already exists",
                    "code": "EMAIL_EXISTS",
                    "suggestion": "Use a different email",
                }
            ]
        }

    def test_reserved_domain_email_accepted(self, client, contact_payload):
        contact_payload["email"] = "ada@corp.local"

        response = client.post("/", json=contact_payload)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "ada@corp.local"

    def test_response_is_camel_case_without_password(self, created):
        data = created["data"]

        assert data["firstName"] == "Ada"
        assert data["middleName"] == "King"
        assert "id" in data
        assert "password" not in data
        assert "passwordHash" not in data

    def test_duplicate_phone(self, client, created, contact_payload, other_payload):
        other_payload["phone"] = contact_payload["phone"]

        response = client.post("/", json=other_payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "PHONE_EXISTS"
        assert len(client.get("/").json()["data"]) == 1

    def test_validation_errors_listed_together(self, client):
        response = client.post("/", json={"email": "nope", "password": "123"})

        assert response.status_code == 400
        errors = response.json()["errors"]
        assert [e["param"] for e in errors] == ["firstName", "lastName", "email", "phone", "password"]
        assert all(e["code"] == "VALIDATION_ERROR" for e in errors)
        assert all(e["location"] == "body" for e in errors)

    def test_unknown_field_rejected(self, client, contact_payload):
        contact_payload["isAdmin"] = True

        response = client.post("/", json=contact_payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["msg"] == "Unknown field: isAdmin"

    def test_mistyped_field_rejected(self, client, contact_payload):
        contact_payload["phone"] = 5550100

        response = client.post("/", json=contact_payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "phone"

    def test_store_failure_is_generic(self, client, service, contact_payload):
        service.store = MagicMock()
        service.store.find_by_field.side_effect = ContactStoreError("socket closed")

        response = client.post("/", json=contact_payload)

        assert response.status_code == 500
        assert response.json()["errors"][0]["msg"] == "Error creating contact"
        assert "socket" not in response.text


# =============================================================================
# GET / and GET /{id}
# =============================================================================

class TestReadEndpoints:
    """Tests for listing and fetching."""

    def test_list(self, client, created, other_payload):
        client.post("/", json=other_payload)

        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Contacts retrieved"
        assert [c["email"] for c in body["data"]] == ["ada@analytical.io", "charles@analytical.io"]

    def test_list_empty(self, client):
        assert client.get("/").json() == {"message": "Contacts retrieved", "data": []}

    def test_get_returns_supplied_values(self, client, created, contact_payload):
        contact_id = created["data"]["id"]

        response = client.get(f"/{contact_id}")

        assert response.status_code == 200
        assert response.json()["message"] == "Contact retrieved"
        data = response.json()["data"]
        for key, value in contact_payload.items():
            if key != "password":
                assert data[key] == value

    @pytest.mark.parametrize("contact_id", [MISSING_ID, "not-a-uuid"])
    def test_get_missing(self, client, contact_id):
        response = client.get(f"/{contact_id}")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "CONTACT_NOT_FOUND"


# =============================================================================
# PUT /{id}
# =============================================================================

class TestUpdateEndpoint:
    """Tests for PUT /{id}."""

    def test_update_first_name_only(self, client, created, contact_payload):
        contact_id = created["data"]["id"]

        response = client.put(f"/{contact_id}", json=update_body(contact_payload, firstName="Augusta"))

        assert response.status_code == 200
        assert response.json()["message"] == "Contact updated"
        data = response.json()["data"]
        assert data["firstName"] == "Augusta"
        assert {k: v for k, v in data.items() if k != "firstName"} == {
            k: v for k, v in created["data"].items() if k != "firstName"
        }

    def test_omitted_optional_fields_are_kept(self, client, created):
        contact_id = created["data"]["id"]
        body = {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "ada@analytical.io",
            "phone": "+44 20 7946 0000",
            "company": "",
        }

        data = client.put(f"/{contact_id}", json=body).json()["data"]

        assert data["company"] == "Analytical Engines Ltd"
        assert data["dob"] == "1815-12-10"

    def test_password_cannot_be_updated(self, client, created, contact_payload):
        contact_id = created["data"]["id"]

        response = client.put(f"/{contact_id}", json=contact_payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "password"
        login = client.post("/login", json={"email": "ada@analytical.io", "password": "secret1"})
        assert login.status_code == 200

    def test_update_validation(self, client, created):
        contact_id = created["data"]["id"]

        response = client.put(f"/{contact_id}", json={"firstName": "Ada"})

        assert response.status_code == 400
        assert [e["param"] for e in response.json()["errors"]] == ["lastName", "email", "phone"]

    def test_update_missing(self, client, contact_payload):
        response = client.put(f"/{MISSING_ID}", json=update_body(contact_payload))
        assert response.status_code == 404

    def test_update_to_taken_phone(self, client, created, contact_payload, other_payload):
        other = client.post("/", json=other_payload).json()["data"]

        response = client.put(
            f"/{other['id']}",
            json=update_body(other_payload, phone=contact_payload["phone"]),
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "PHONE_EXISTS"


# =============================================================================
# DELETE /{id}
# =============================================================================

class TestDeleteEndpoint:
    """Tests for DELETE /{id}."""

    def test_delete(self, client, created):
        contact_id = created["data"]["id"]

        response = client.delete(f"/{contact_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Contact deleted"}
        assert client.get(f"/{contact_id}").status_code == 404

    def test_delete_twice(self, client, created):
        contact_id = created["data"]["id"]
        client.delete(f"/{contact_id}")

        response = client.delete(f"/{contact_id}")

        assert response.status_code == 404


# =============================================================================
# POST /login
# =============================================================================

class TestLoginEndpoint:
    """Tests for POST /login."""

    def test_login(self, client, created, tokens):
        response = client.post("/login", json={"email": "ada@analytical.io", "password": "secret1"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Logged in"
        assert body["data"]["id"] == created["data"]["id"]
        assert tokens.decode(body["token"])["id"] == created["data"]["id"]

    @pytest.mark.parametrize("credentials", [
        {"email": "ada@analytical.io", "password": "wrong-password"},
        {"email": "nobody@analytical.io", "password": "secret1"},
    ])
    def test_bad_credentials(self, client, created, credentials):
        response = client.post("/login", json=credentials)

        assert response.status_code == 400
        assert response.json() == {
            "errors": [{"msg": "Invalid credentials", "code": "INVALID_CREDENTIALS"}]
        }

    def test_login_validation(self, client):
        response = client.post("/login", json={"email": "not-an-email"})

        assert response.status_code == 400
        assert [e["msg"] for e in response.json()["errors"]] == [
            "Please include a valid email",
            "Password is required",
        ]


# =============================================================================
# Health
# =============================================================================

class TestHealthEndpoints:
    """Health routes are not swallowed by GET /{id}."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        assert client.get("/health/ready").json()["status"] == "ready"

    def test_ready_degraded(self, client, service):
        service.store = MagicMock()
        service.store.ping.side_effect = ContactStoreError("down")

        body = client.get("/health/ready").json()

        assert body["status"] == "degraded"
        assert body["store"].startswith("unhealthy")

    def test_live(self, client):
        assert client.get("/health/live").json()["status"] == "alive"
