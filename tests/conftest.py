from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import main
from companies import repository as company_repository
from leaderboard import repository as leaderboard_repository
from votes import notifications
from votes import repository as vote_repository

from fakes import FakeCompanyRepository, FakeLeaderboardRepository, FakeVoteRepository, InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_company("Apple", website="https://apple.com", logo_url="https://logo.clearbit.com/apple.com")
    store.add_company("Google", website="https://google.com", logo_url="https://logo.clearbit.com/google.com")
    return store


@pytest.fixture
def sent_notifications(monkeypatch) -> list[dict]:
    sent: list[dict] = []

    async def _record(payload: dict) -> None:
        sent.append(payload)

    monkeypatch.setattr(notifications, "notify_vote_background", _record)
    return sent


@pytest.fixture
def client(store, sent_notifications):
    overrides = main.app.dependency_overrides
    overrides[company_repository.get_repository] = lambda: FakeCompanyRepository(store)
    overrides[vote_repository.get_repository] = lambda: FakeVoteRepository(store)
    overrides[leaderboard_repository.get_repository] = lambda: FakeLeaderboardRepository(store)
    # No `with` block: the lifespan (real pool + schema) is not started.
    yield TestClient(main.app, raise_server_exceptions=False)
    overrides.clear()


@pytest.fixture
def cast(client):
    def _cast(name="Ana Silva", email="ana@x.com", phone="555-0001", company=1):
        return client.post(
            "/api/vote",
            json={"voterName": name, "voterEmail": email, "voterPhone": phone, "companyVote": company},
        )

    return _cast
