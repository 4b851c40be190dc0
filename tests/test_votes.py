from __future__ import annotations

import pytest

from core import db, errors
from votes import schemas, service


def test_vote_is_recorded_and_returns_id(client, cast, store):
    resp = cast()

    assert resp.status_code == 201
    body = resp.json()
    assert body["voteId"] == 1
    assert body["message"] == "Vote submitted successfully"
    assert store.votes[0]["company_id"] == 1


def test_email_and_name_are_normalized_before_storage(cast, store):
    resp = cast(name="  Ana Silva ", email="  Ana@X.com ", phone=" 555-0001 ")

    assert resp.status_code == 201
    stored = store.votes[0]
    assert stored["voter_name"] == "Ana Silva"
    assert stored["voter_email"] == "ana@x.com"
    assert stored["voter_phone"] == "555-0001"


def test_same_email_with_other_case_and_whitespace_is_rejected(cast):
    first = cast(email="Ana@X.com", phone="555-0001")
    second = cast(email="ana@x.com ", phone="555-0002")

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json() == {"error": "This email has already voted"}


def test_same_phone_is_rejected(cast):
    assert cast(email="a@x.com", phone="555-0001").status_code == 201

    resp = cast(email="b@x.com", phone="555-0001")

    assert resp.status_code == 400
    assert resp.json() == {"error": "This phone number has already voted"}


def test_distinct_voters_each_add_one_to_the_total(client, cast):
    for i in range(5):
        resp = cast(email=f"voter{i}@x.com", phone=f"555-00{i:02d}", company=1 + i % 2)
        assert resp.status_code == 201
        total = client.get("/api/leaderboard").json()["totalVotes"]
        assert total == i + 1


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"voterEmail": "a@x.com", "voterPhone": "1", "companyVote": 1},
        {"voterName": "A", "voterPhone": "1", "companyVote": 1},
        {"voterName": "A", "voterEmail": "a@x.com", "companyVote": 1},
        {"voterName": "A", "voterEmail": "a@x.com", "voterPhone": "1"},
        {"voterName": "   ", "voterEmail": "a@x.com", "voterPhone": "1", "companyVote": 1},
        {"voterName": "A", "voterEmail": "a@x.com", "voterPhone": "1", "companyVote": ""},
    ],
)
def test_missing_fields_are_rejected(client, payload):
    resp = client.post("/api/vote", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"error": "All fields are required"}


@pytest.mark.parametrize("email", ["ana", "ana@x", "ana@@x.com", "an a@x.com", "@x.com", "ana@.com."])
def test_invalid_email_is_rejected(cast, email):
    resp = cast(email=email)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid email format"}


def test_vote_for_deactivated_company_is_rejected(client, cast):
    assert client.delete("/api/admin/companies/2").status_code == 200

    resp = cast(company=2)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid company selection"}


@pytest.mark.parametrize("company", [99, "abc", "1.5", -1, 2**31, True, False, 1.5, [1], {"id": 1}])
def test_unknown_or_malformed_company_is_rejected(cast, company):
    resp = cast(company=company)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid company selection"}


def test_company_id_may_arrive_as_string(cast, store):
    resp = cast(company=" 2 ")

    assert resp.status_code == 201
    assert store.votes[0]["company_id"] == 2


def test_overlong_phone_is_rejected(cast, store):
    resp = cast(phone="5" * 21)

    assert resp.status_code == 400
    assert store.votes == []


def test_store_failure_is_a_generic_500(cast, store):
    store.failure = db.StoreError("connection refused to 10.0.0.5")

    resp = cast()

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to submit vote"}


def test_successful_vote_schedules_notification(cast, sent_notifications):
    cast(name="Ana Silva", email="Ana@X.com", phone="555-0001", company=2)

    assert sent_notifications == [
        {
            "voterName": "Ana Silva",
            "voterEmail": "ana@x.com",
            "voterPhone": "555-0001",
            "companyName": "Google",
            "companyWebsite": "https://google.com",
            "voteId": 1,
        }
    ]


def test_rejected_vote_sends_no_notification(cast, sent_notifications):
    cast()
    cast(phone="555-0009")

    assert len(sent_notifications) == 1


def test_admin_vote_list_is_newest_first_with_company_name(client, cast):
    cast(email="a@x.com", phone="1", company=1)
    cast(email="b@x.com", phone="2", company=2)

    rows = client.get("/api/admin/votes").json()

    assert [r["voter_email"] for r in rows] == ["b@x.com", "a@x.com"]
    assert [r["company_name"] for r in rows] == ["Google", "Apple"]


def test_votes_of_deactivated_company_stay_in_admin_list(client, cast):
    cast(company=2)
    client.delete("/api/admin/companies/2")

    rows = client.get("/api/admin/votes").json()

    assert len(rows) == 1
    assert rows[0]["company_name"] == "Google"


def test_duplicate_error_falls_back_when_column_unknown():
    conflict = service.duplicate_error(db.UniqueViolation("duplicate key"))

    assert isinstance(conflict, errors.ConflictError)
    assert conflict.detail == "You have already voted"
    assert conflict.field is None


def test_duplicate_error_uses_constraint_name():
    exc = db.UniqueViolation("duplicate key", constraint="votes_new_voter_phone_key")

    assert service.duplicate_error(exc).field == "voter_phone"


def test_validate_vote_returns_normalized_ballot():
    ballot = service.validate_vote(
        schemas.VoteRequest(voterName=" Bo ", voterEmail=" BO@Example.ORG", voterPhone="42 ", companyVote="7")
    )

    assert ballot == schemas.Ballot(voter_name="Bo", voter_email="bo@example.org", voter_phone="42", company_id=7)


def test_boolean_company_records_no_vote(cast, store):
    resp = cast(company=True)

    assert resp.status_code == 400
    assert store.votes == []


def test_integral_float_company_id_is_accepted(cast, store):
    resp = cast(company=2.0)

    assert resp.status_code == 201
    assert store.votes[0]["company_id"] == 2
