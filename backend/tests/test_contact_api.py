"""
Tests for the contact submission and listing endpoints.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from freesip.core.config import settings
from freesip.db.session import get_db
from freesip.models.contact_submission import ContactSubmission

SUBMIT_URL = "/api/contact/submit"
LIST_URL = "/api/contacts"


def _count(db) -> int:
    db.expire_all()
    return db.execute(select(func.count()).select_from(ContactSubmission)).scalar_one()


class TestContactSubmission:
    def test_valid_submission_stores_one_record(self, client, db, valid_form):
        response = client.post(
            SUBMIT_URL,
            json=valid_form,
            headers={"User-Agent": "pytest-agent", "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Thank you for your message! We'll get back to you soon."
        assert body["submissionId"]

        stored = db.execute(select(ContactSubmission)).scalars().all()
        assert len(stored) == 1
        record = stored[0]
        assert record.id == body["submissionId"]
        assert record.email == "ada@example.com"
        assert record.name == "Ada Lovelace"
        assert record.company == "Analytical Engines"
        assert record.ip_address == "203.0.113.7"
        assert record.user_agent == "pytest-agent"

    def test_fields_are_trimmed_and_company_defaults_to_empty(self, client, db):
        response = client.post(
            SUBMIT_URL,
            json={"name": "  Grace  ", "email": "grace@navy.mil", "message": "  Hello there  "},
        )

        assert response.status_code == 200
        record = db.execute(select(ContactSubmission)).scalar_one()
        assert record.name == "Grace"
        assert record.message == "Hello there"
        assert record.company == ""

    @pytest.mark.parametrize(
        "changes, expected",
        [
            ({"name": ""}, "Name, email, and message are required fields."),
            ({"email": None}, "Name, email, and message are required fields."),
            ({"message": ""}, "Name, email, and message are required fields."),
            ({"email": "not-an-email"}, "Please enter a valid email address."),
            ({"email": "a b@example.com"}, "Please enter a valid email address."),
            ({"name": "n" * 101}, "Name must be less than 100 characters."),
            ({"message": "m" * 1001}, "Message must be less than 1000 characters."),
            ({"company": "c" * 101}, "Company name must be less than 100 characters."),
        ],
    )
    def test_invalid_fields_are_rejected(self, client, db, valid_form, changes, expected):
        response = client.post(SUBMIT_URL, json={**valid_form, **changes})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": expected}
        assert _count(db) == 0

    def test_lengths_are_measured_after_trimming(self, client, valid_form):
        response = client.post(SUBMIT_URL, json={**valid_form, "name": "  " + "n" * 100 + "  "})

        assert response.status_code == 200

    def test_non_string_field_is_rejected_generically(self, client, db, valid_form):
        response = client.post(SUBMIT_URL, json={**valid_form, "name": 42})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid form data. Please check your inputs and try again."
        assert _count(db) == 0

    @pytest.mark.parametrize("kwargs", [{}, {"content": b""}, {"json": None}])
    def test_empty_body_reports_missing_fields(self, client, db, kwargs):
        response = client.post(SUBMIT_URL, **kwargs)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Name, email, and message are required fields.",
        }
        assert _count(db) == 0

    def test_store_rejection_maps_to_invalid_form_data(self, client, db, valid_form):
        # Whitespace passes the presence check but the store refuses an empty name.
        response = client.post(SUBMIT_URL, json={**valid_form, "name": "   "})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Invalid form data. Please check your inputs and try again.",
        }
        assert _count(db) == 0

    def test_store_failure_returns_generic_error(self, app, client, valid_form):
        broken = MagicMock()
        broken.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
        app.dependency_overrides[get_db] = lambda: broken

        response = client.post(SUBMIT_URL, json=valid_form)

        assert response.status_code == 500
        body = response.json()
        assert body == {"success": False, "message": "Something went wrong. Please try again later."}
        assert "connection refused" not in response.text


class TestDuplicateSubmissions:
    def test_same_email_within_window_is_rejected(self, client, db, valid_form):
        first = client.post(SUBMIT_URL, json=valid_form)
        second = client.post(SUBMIT_URL, json={**valid_form, "email": "ADA@example.com"})

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.json()["message"] == (
            "You have already submitted a message recently. Please wait before submitting again."
        )
        assert _count(db) == 1

    def test_recent_stored_submission_blocks(self, client, add_submission, valid_form):
        add_submission("ada@example.com", minutes_ago=4)

        response = client.post(SUBMIT_URL, json=valid_form)

        assert response.status_code == 429

    def test_same_email_after_window_is_accepted(self, client, db, add_submission, valid_form):
        add_submission("ada@example.com", minutes_ago=6)

        response = client.post(SUBMIT_URL, json=valid_form)

        assert response.status_code == 200
        assert _count(db) == 2


class TestContactRateLimit:
    def test_sixth_submission_from_same_ip_is_rejected(self, client, clock, db, valid_form):
        headers = {"X-Forwarded-For": "198.51.100.1"}
        for i in range(5):
            response = client.post(SUBMIT_URL, json={**valid_form, "email": f"user{i}@example.com"}, headers=headers)
            assert response.status_code == 200

        response = client.post(SUBMIT_URL, json={**valid_form, "email": "fresh@example.com"}, headers=headers)

        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "message": "Too many contact form submissions. Please try again later.",
        }
        assert int(response.headers["Retry-After"]) > 0
        assert _count(db) == 5

    def test_limit_applies_before_validation(self, client):
        headers = {"X-Forwarded-For": "198.51.100.2"}
        for _ in range(5):
            assert client.post(SUBMIT_URL, json={}, headers=headers).status_code == 400

        assert client.post(SUBMIT_URL, json={}, headers=headers).status_code == 429

    def test_other_ips_are_unaffected(self, client, valid_form):
        for i in range(6):
            client.post(SUBMIT_URL, json={}, headers={"X-Forwarded-For": "198.51.100.3"})

        response = client.post(SUBMIT_URL, json=valid_form, headers={"X-Forwarded-For": "198.51.100.4"})

        assert response.status_code == 200

    def test_window_resets_after_an_hour(self, client, clock, valid_form):
        headers = {"X-Forwarded-For": "198.51.100.5"}
        for _ in range(6):
            client.post(SUBMIT_URL, json={}, headers=headers)

        clock.advance(60 * 60)
        response = client.post(SUBMIT_URL, json=valid_form, headers=headers)

        assert response.status_code == 200


class TestContactListing:
    @pytest.fixture
    def stored(self, add_submission):
        return [
            add_submission(f"person{i}@example.com", minutes_ago=100 - i, name=f"Person {i}")
            for i in range(25)
        ]

    def test_second_page(self, client, stored):
        response = client.get(LIST_URL, params={"page": 2, "limit": 10})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["pagination"] == {
            "currentPage": 2,
            "totalPages": 3,
            "totalContacts": 25,
            "limit": 10,
        }
        assert len(body["data"]) == 10
        assert [c["name"] for c in body["data"]] == [f"Person {i}" for i in range(14, 4, -1)]
        for contact in body["data"]:
            assert "ipAddress" not in contact
            assert "userAgent" not in contact
            assert "ip_address" not in contact
            assert set(contact) == {"id", "name", "email", "company", "message", "submittedAt"}

    def test_last_page_is_partial(self, client, stored):
        body = client.get(LIST_URL, params={"page": 3, "limit": 10}).json()

        assert len(body["data"]) == 5

    def test_defaults(self, client, stored):
        body = client.get(LIST_URL).json()

        assert body["pagination"]["currentPage"] == 1
        assert body["pagination"]["limit"] == 10
        assert body["data"][0]["name"] == "Person 24"

    @pytest.mark.parametrize("page, limit", [("abc", "xyz"), ("0", "0"), ("-2", "-5")])
    def test_unusable_query_values_fall_back_to_defaults(self, client, stored, page, limit):
        body = client.get(LIST_URL, params={"page": page, "limit": limit}).json()

        assert body["pagination"]["currentPage"] == 1
        assert body["pagination"]["limit"] == 10

    @pytest.mark.parametrize("page, limit", [("1", str(10**20)), (str(10**20), str(10**20)), ("1", "9" * 5000)])
    def test_huge_query_values_are_served(self, client, stored, page, limit):
        response = client.get(LIST_URL, params={"page": page, "limit": limit})

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_huge_limit_returns_everything_on_one_page(self, client, stored):
        body = client.get(LIST_URL, params={"limit": str(10**20)}).json()

        assert len(body["data"]) == 25
        assert body["pagination"]["totalPages"] == 1

    def test_empty_store(self, client):
        body = client.get(LIST_URL).json()

        assert body["data"] == []
        assert body["pagination"]["totalPages"] == 0
        assert body["pagination"]["totalContacts"] == 0

    def test_store_failure(self, app, client):
        broken = MagicMock()
        broken.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        app.dependency_overrides[get_db] = lambda: broken

        response = client.get(LIST_URL)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Error fetching contacts"}

    def test_admin_key_is_enforced_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_API_KEY", "s3cret")

        assert client.get(LIST_URL).status_code == 401
        assert client.get(LIST_URL, headers={"X-API-Key": "wrong"}).status_code == 401
        assert client.get(LIST_URL, headers={"X-API-Key": "s3cret"}).status_code == 200
