"""API tests for shift exchange requests and the approval flow."""

from __future__ import annotations

import pytest

REQUEST_DAY = "2024-07-01"
TARGET_DAY = "2024-07-02"


@pytest.fixture
def people(make_profile):
    make_profile("alice", "Alice", "Able", schedule=[(REQUEST_DAY, "09:00", "17:00"), ("2024-07-05", "09:00", "17:00")])
    make_profile("bob", "Bob", "Baker", schedule=[(TARGET_DAY, "13:00", "21:00")])
    make_profile("carol", "Carol", "Chief", is_admin=True)
    make_profile("dave", "Dave", "Doe")
    return {"requester": "alice", "target": "bob", "admin": "carol", "outsider": "dave"}


def open_request(client, acting_as, people, **overrides):
    acting_as(people["requester"])
    payload = {
        "target_user_id": people["target"],
        "requester_date": REQUEST_DAY,
        "target_date": TARGET_DAY,
        "message": "Doctor's appointment",
        **overrides,
    }
    response = client.post("/shift-exchanges", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def decide(client, acting_as, who, request_id, status):
    acting_as(who)
    return client.patch(f"/shift-exchanges/{request_id}", json={"status": status})


class TestCreate:
    def test_snapshots_both_shifts(self, client, acting_as, people):
        request = open_request(client, acting_as, people)
        assert request["status"] == "pending"
        assert request["requester_shift"] == {"date": REQUEST_DAY, "start": "09:00", "end": "17:00"}
        assert request["target_shift"] == {"date": TARGET_DAY, "start": "13:00", "end": "21:00"}
        assert request["user_approved"] is False
        assert request["admin_approved"] is False
        assert request["approval_status"] == "Awaiting approval"
        assert request["requester_profile"]["first_name"] == "Alice"
        assert request["target_profile"]["first_name"] == "Bob"

    def test_missing_fields(self, client, acting_as, people):
        acting_as(people["requester"])
        response = client.post("/shift-exchanges", json={"target_user_id": people["target"]})
        assert response.status_code == 400
        assert response.json()["detail"] == "Please fill in all required fields"

    def test_requester_without_shift(self, client, acting_as, people):
        acting_as(people["requester"])
        response = client.post(
            "/shift-exchanges",
            json={"target_user_id": "bob", "requester_date": "2024-07-20", "target_date": TARGET_DAY},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "You don't have a shift scheduled for the selected date"

    def test_target_without_shift(self, client, acting_as, people):
        acting_as(people["requester"])
        response = client.post(
            "/shift-exchanges",
            json={"target_user_id": "bob", "requester_date": REQUEST_DAY, "target_date": "2024-07-20"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Target user doesn't have a shift scheduled for the selected date"

    def test_unknown_target(self, client, acting_as, people):
        acting_as(people["requester"])
        response = client.post(
            "/shift-exchanges",
            json={"target_user_id": "ghost", "requester_date": REQUEST_DAY, "target_date": TARGET_DAY},
        )
        assert response.status_code == 404

    def test_cannot_exchange_with_self(self, client, acting_as, people):
        acting_as(people["requester"])
        response = client.post(
            "/shift-exchanges",
            json={"target_user_id": "alice", "requester_date": REQUEST_DAY, "target_date": "2024-07-05"},
        )
        assert response.status_code == 400


class TestVisibility:
    def test_participants_and_admin_see_request(self, client, acting_as, people):
        request = open_request(client, acting_as, people)

        for who in ("alice", "bob", "carol"):
            acting_as(who)
            assert [r["id"] for r in client.get("/shift-exchanges").json()] == [request["id"]]
            assert client.get(f"/shift-exchanges/{request['id']}").status_code == 200

        acting_as("dave")
        assert client.get("/shift-exchanges").json() == []
        assert client.get(f"/shift-exchanges/{request['id']}").status_code == 404


class TestApproval:
    def test_target_then_admin_swaps_shifts(self, client, acting_as, people, load_profile):
        request = open_request(client, acting_as, people)

        response = decide(client, acting_as, "bob", request["id"], "approved")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "pending"
        assert body["user_approved"] is True
        assert body["admin_notified"] is True
        assert body["approval_status"] == "Approved by: user"
        # Nothing swapped yet
        assert load_profile("alice").work_schedule[0]["start"] == "09:00"

        response = decide(client, acting_as, "carol", request["id"], "approved")
        body = response.json()
        assert body["status"] == "approved"
        assert body["approval_status"] == "Fully approved"

        alice = load_profile("alice").work_schedule
        bob = load_profile("bob").work_schedule
        assert alice[0] == {"date": TARGET_DAY, "start": "13:00", "end": "21:00"}
        assert alice[1] == {"date": "2024-07-05", "start": "09:00", "end": "17:00"}
        assert bob == [{"date": REQUEST_DAY, "start": "09:00", "end": "17:00"}]

    def test_admin_then_target(self, client, acting_as, people, load_profile):
        request = open_request(client, acting_as, people)

        body = decide(client, acting_as, "carol", request["id"], "approved").json()
        assert body["status"] == "pending"
        assert body["admin_approved"] is True
        assert body["admin_notified"] is False

        body = decide(client, acting_as, "bob", request["id"], "approved").json()
        assert body["status"] == "approved"
        assert load_profile("bob").work_schedule[0]["date"] == REQUEST_DAY

    def test_requester_cannot_approve(self, client, acting_as, people):
        request = open_request(client, acting_as, people)
        response = decide(client, acting_as, "alice", request["id"], "approved")
        assert response.status_code == 403

    def test_outsider_cannot_see_or_decide(self, client, acting_as, people):
        request = open_request(client, acting_as, people)
        assert decide(client, acting_as, "dave", request["id"], "approved").status_code == 404

    def test_reject_clears_approvals(self, client, acting_as, people, load_profile):
        request = open_request(client, acting_as, people)
        decide(client, acting_as, "carol", request["id"], "approved")

        body = decide(client, acting_as, "bob", request["id"], "rejected").json()
        assert body["status"] == "rejected"
        assert body["admin_approved"] is False
        assert body["user_approved"] is False
        assert load_profile("bob").work_schedule[0]["date"] == TARGET_DAY

    def test_requester_cancels(self, client, acting_as, people):
        request = open_request(client, acting_as, people)
        body = decide(client, acting_as, "alice", request["id"], "cancelled").json()
        assert body["status"] == "cancelled"

    def test_decided_request_is_final(self, client, acting_as, people):
        request = open_request(client, acting_as, people)
        decide(client, acting_as, "alice", request["id"], "cancelled")

        response = decide(client, acting_as, "carol", request["id"], "approved")
        assert response.status_code == 409
        assert response.json()["detail"] == "Request is no longer pending"

    def test_pending_is_not_a_decision(self, client, acting_as, people):
        request = open_request(client, acting_as, people)
        assert decide(client, acting_as, "carol", request["id"], "pending").status_code == 422
