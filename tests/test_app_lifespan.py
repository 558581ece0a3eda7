"""Startup and shutdown of the MongoDB connection."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import main
from config import Settings
from tests.fakes import FakeCollection, FakeMotorClient


@pytest.fixture
def fake_client(monkeypatch):
    monkeypatch.setattr(FakeMotorClient, "instances", [])
    monkeypatch.setattr(FakeMotorClient, "collection", FakeCollection())
    monkeypatch.setattr(FakeMotorClient, "ping_error", None)
    monkeypatch.setattr(main, "AsyncIOMotorClient", FakeMotorClient)
    return FakeMotorClient


def test_lifespan_opens_and_closes_the_connection(fake_client) -> None:
    app = main.create_app(Settings(mongo_uri="mongodb://ledger-db:27017", db_name="ledger", collection_name="entries"))

    with TestClient(app) as client:
        response = client.get("/transactions")
        instance = fake_client.instances[0]
        assert instance.closed is False

    assert response.status_code == 200
    assert response.json() == []
    assert instance.uri == "mongodb://ledger-db:27017"
    assert instance.kwargs["tz_aware"] is True
    assert instance.requested_databases == ["ledger"]
    assert fake_client.collection.name == "entries"
    assert instance.closed is True


def test_failed_ping_aborts_startup(fake_client, monkeypatch) -> None:
    monkeypatch.setattr(FakeMotorClient, "ping_error", ConnectionError("no servers available"))
    app = main.create_app(Settings())

    with pytest.raises(RuntimeError, match="MongoDB connection failed"):
        with TestClient(app):
            pass

    assert fake_client.instances[0].closed is True
