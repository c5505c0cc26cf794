"""Tests for the /api/users routes: push switch, category options, consent, tokens."""

import os
import tempfile
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from feedpush.db.models import Base, NewsCategory, User, UserCategorySubscription
from feedpush.errors import PushProviderError


class RecordingProvider:
    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def subscribe_tokens_to_topic(self, topic, tokens):
        self.calls.append(("subscribe", topic, list(tokens)))
        if topic in self.fail_on:
            raise PushProviderError(topic, "UNAVAILABLE")

    def unsubscribe_tokens_from_topic(self, topic, tokens):
        self.calls.append(("unsubscribe", topic, list(tokens)))
        if topic in self.fail_on:
            raise PushProviderError(topic, "UNAVAILABLE")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def temp_db():
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(path)

    engine = create_engine(f"sqlite:///{path}", connect_args={"timeout": 15})
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)

    session = Session()
    user = User(uid="u-1", push_on=1)
    session.add(user)
    session.flush()
    for name, option in (("economy", 1), ("tech", 0), ("world", 1)):
        category = NewsCategory(category=name, fcm_topic=f"topic_{name}", status=1)
        session.add(category)
        session.flush()
        session.add(UserCategorySubscription(user_idx=user.idx, category_idx=category.idx, notification_option=option))
    session.commit()
    session.close()

    yield {"engine": engine, "session_factory": Session, "user_idx": 1}

    engine.dispose()
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture()
def provider():
    return RecordingProvider()


@pytest.fixture()
def client(temp_db, provider):
    from feedpush.api.deps import get_push_provider, get_session_factory
    from feedpush.api.main import app

    app.dependency_overrides[get_session_factory] = lambda: temp_db["session_factory"]
    app.dependency_overrides[get_push_provider] = lambda: provider
    env = os.environ.copy()
    env.pop("FEEDPUSH_TOKEN", None)
    with patch.dict(os.environ, env, clear=True):
        yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Push switch
# ---------------------------------------------------------------------------


def test_push_get_and_put(client):
    assert client.get("/api/users/1/push").json() == {"push_on": True}
    assert client.put("/api/users/1/push", json={"push_on": False}).status_code == 200
    assert client.get("/api/users/1/push").json() == {"push_on": False}


def test_push_unknown_user_is_404(client):
    assert client.get("/api/users/99/push").status_code == 404
    assert client.put("/api/users/99/push", json={"push_on": True}).status_code == 404


# ---------------------------------------------------------------------------
# Category options, consent, plan
# ---------------------------------------------------------------------------


def test_categories_and_option_update(client):
    body = client.get("/api/users/1/categories").json()
    assert body == {
        "categories": ["economy", "tech", "world"],
        "topics": ["topic_economy", "topic_tech", "topic_world"],
        "categoryNotifications": [1, 0, 1],
    }

    resp = client.put("/api/users/1/categories/2", json={"notification_option": 1})
    assert resp.status_code == 200
    assert client.get("/api/users/1/categories").json()["categoryNotifications"] == [1, 1, 1]

    assert client.put("/api/users/1/categories/42", json={"notification_option": 1}).status_code == 404


def test_marketing_consent_reports_write_kind(client):
    results = [client.put("/api/users/1/marketing-consent", json={"consent": c}).json()["result"] for c in (True, True, False)]
    assert results == ["inserted", "unchanged", "updated"]


def test_plan_absent_is_null(client):
    assert client.get("/api/users/1/plan").json() == {"plan": None}


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def test_tokens_subscribe_enabled_topics(client, provider):
    resp = client.post("/api/users/1/tokens", json={"tokens": ["t1"]})

    assert resp.status_code == 200
    assert resp.json() == {"topics": ["topic_economy", "topic_world"], "skipped": None}
    assert provider.calls == [("subscribe", "topic_economy", ["t1"]), ("subscribe", "topic_world", ["t1"])]


def test_tokens_subscribe_skipped_when_push_off(client, provider):
    client.put("/api/users/1/push", json={"push_on": False})

    resp = client.post("/api/users/1/tokens", json={"tokens": ["t1"]})

    assert resp.json() == {"topics": [], "skipped": "push_off"}
    assert provider.calls == []


def test_tokens_remove_runs_with_push_off(client, provider):
    client.put("/api/users/1/push", json={"push_on": False})

    resp = client.post("/api/users/1/tokens/remove", json={"tokens": ["t1"]})

    assert resp.json()["topics"] == ["topic_economy", "topic_world"]
    assert [c[0] for c in provider.calls] == ["unsubscribe", "unsubscribe"]


def test_provider_failure_is_502(client, provider):
    provider.fail_on.add("topic_economy")

    resp = client.post("/api/users/1/tokens", json={"tokens": ["t1"]})

    assert resp.status_code == 502
    assert resp.json()["topic"] == "topic_economy"
    assert len(provider.calls) == 1
