"""The real client stack driven against the in-process store."""
import pytest
from fastapi.testclient import TestClient

from cookify.config import Settings
from cookify.controller import AppController
from cookify.core.session import View
from cookify.main import create_app
from cookify.services.exceptions import AuthError, UnsaveError


@pytest.fixture
def settings(tmp_path, monkeypatch):
    d = tmp_path / "data"
    d.mkdir()
    monkeypatch.setenv("DATA_DIR", str(d))
    monkeypatch.setenv("USERS_FILE", str(d / "users.json"))
    monkeypatch.setenv("SAVED_FILE", str(d / "saved.json"))
    monkeypatch.setenv("PANTRY_FILE", str(d / "pantry.json"))
    monkeypatch.setenv("METRICS_FILE", str(d / "latency_log.jsonl"))
    monkeypatch.setenv("TOKEN_FILE", str(tmp_path / "client" / "token.json"))
    monkeypatch.setenv("USE_OPENAI", "false")
    return Settings()


@pytest.fixture
def http(settings):
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def app(settings, http):
    return AppController(settings, http=http)


def test_save_then_unsave_scenario(app):
    app.register("a@b.com", "secret1")
    assert app.is_logged_in()
    assert app.saved.saved == []

    app.saved.save({"id": "r1", "title": "Soup", "is_ai_generated": False})
    assert app.saved.is_saved("r1")
    assert len(app.saved.saved) == 1

    app.saved.unsave("r1")
    assert not app.saved.is_saved("r1")
    assert len(app.saved.saved) == 0


def test_pantry_case_insensitive_scenario(app):
    app.register("a@b.com", "secret1")
    app.pantry.upsert("Eggs", "12")
    app.pantry.upsert("eggs", "6")
    assert [(i.name, i.quantity) for i in app.pantry.items] == [("eggs", "6")]

    app.pantry.hydrate()
    assert [(i.name, i.quantity) for i in app.pantry.items] == [("eggs", "6")]


def test_hydrate_brings_server_ids_and_is_idempotent(app):
    app.register("a@b.com", "secret1")
    local = app.saved.save({"id": "r1", "title": "Soup"})
    app.saved.hydrate()
    first = app.saved.saved
    assert first[0].id != local.id and not first[0].id.startswith("temp_")
    app.saved.hydrate()
    assert app.saved.saved == first


def test_ai_recipes_save_as_distinct_entries(app):
    app.register("a@b.com", "secret1")
    a = app.generate_ai_recipes(["eggs"])[0]
    b = app.generate_ai_recipes(["eggs"])[0]
    app.saved.save(a)
    app.saved.save(b)
    app.saved.hydrate()
    assert len(app.saved.saved) == 2
    assert {s.source for s in app.saved.saved} == {"AI"}


def test_unknown_unsave_fails_without_local_change(app):
    app.register("a@b.com", "secret1")
    app.saved.save({"id": "r1", "title": "Soup"})
    with pytest.raises(UnsaveError, match="not found"):
        app.saved.unsave("r2")
    assert app.saved.saved_ids == {"r1"}


def test_token_survives_restart_until_logout(settings, http, app):
    app.register("a@b.com", "secret1")
    app.saved.save({"id": "r1", "title": "Soup"})
    app.pantry.add("Basil")

    restarted = AppController(settings, http=http)
    assert restarted.startup() is True
    assert restarted.saved.is_saved("r1")
    assert "basil" in restarted.pantry.names()

    restarted.logout()
    assert restarted.saved.saved == [] and restarted.pantry.items == []
    assert restarted.gatekeeper.active_view == View.AUTH
    assert AppController(settings, http=http).startup() is False


def test_invalid_stored_token_is_discarded(settings, http):
    app = AppController(settings, http=http)
    app.session.start("not-a-jwt")
    assert app.startup() is False
    assert app.session.token is None


def test_login_errors(app):
    app.register("a@b.com", "secret1")
    app.logout()
    with pytest.raises(AuthError, match="Invalid email or password"):
        app.login("a@b.com", "wrong-pass")
    with pytest.raises(AuthError, match="Email already registered"):
        app.register("a@b.com", "secret1")
    with pytest.raises(AuthError):
        app.login("not-an-email", "secret1")
    app.login("a@b.com", "secret1")
    assert app.gatekeeper.profile().email == "a@b.com"
