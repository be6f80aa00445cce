"""
HTTP-level tests for the skill endpoint.

The module-level app gets a dispatcher wired to the fake gateway, so the
lifespan hook never reads the environment.
"""

import pytest
from fastapi.testclient import TestClient

from bofang.server import app, build_dispatcher
from bofang.config import Settings
from bofang.dispatcher import Dispatcher

from test_alexa import APP_ID, intent_request, player_request


@pytest.fixture
def client(orchestrator):
    app.state.dispatcher = Dispatcher(APP_ID, orchestrator)
    yield TestClient(app)
    app.state.dispatcher = None


class TestEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_search(self, client):
        response = client.post("/alexa", json=intent_request("GetVideoIntent", {"VideoQuery": "lofi hip hop"}))

        assert response.status_code == 200
        body = response.json()
        assert body["response"]["card"]["type"] == "Simple"
        assert body["response"]["shouldEndSession"] is False

    def test_full_session(self, client):
        client.post("/alexa", json=intent_request("GetVideoIntent", {"VideoQuery": "lofi hip hop"}))
        play = client.post("/alexa", json=intent_request("AMAZON.YesIntent")).json()
        pause = client.post("/alexa", json=intent_request("AMAZON.PauseIntent")).json()
        resume = client.post("/alexa", json=intent_request("AMAZON.ResumeIntent")).json()
        stop = client.post("/alexa", json=intent_request("AMAZON.StopIntent")).json()

        assert play["response"]["directives"][0]["playBehavior"] == "REPLACE_ALL"
        assert pause["response"]["directives"] == [{"type": "AudioPlayer.Stop"}]
        assert resume["response"]["directives"][0]["audioItem"]["stream"]["token"] == "token-2"
        assert [d["type"] for d in stop["response"]["directives"]] == [
            "AudioPlayer.Stop", "AudioPlayer.ClearQueue",
        ]

    def test_wrong_application(self, client):
        response = client.post("/alexa", json=intent_request("AMAZON.HelpIntent", app_id="someone-else"))

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid application"}

    def test_player_event(self, client):
        response = client.post("/alexa", json=player_request("PlaybackStarted"))

        assert response.status_code == 200
        assert response.json()["response"] == {}

    def test_invalid_json(self, client):
        response = client.post("/alexa", content=b"not json", headers={"content-type": "application/json"})
        assert response.status_code == 400

    def test_not_a_skill_request(self, client):
        response = client.post("/alexa", json={"hello": "world"})
        assert response.status_code == 400


class TestWiring:

    def test_build_dispatcher_from_settings(self, gateway):
        settings = Settings(application_id=APP_ID, poll_interval=0.5, poll_timeout=30.0)
        dispatcher = build_dispatcher(settings, gateway)

        assert isinstance(dispatcher, Dispatcher)
        assert len(dispatcher.orchestrator.store) == 0

    def test_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("ALEXA_APPLICATION_ID", APP_ID)
        monkeypatch.setenv("BOFANG_BACKEND_URL", "https://backend.test/")
        monkeypatch.setenv("BOFANG_POLL_TIMEOUT", "45")
        monkeypatch.delenv("BOFANG_POLL_INTERVAL", raising=False)

        settings = Settings.from_env()

        assert settings.application_id == APP_ID
        assert settings.backend_url == "https://backend.test"
        assert settings.poll_interval == 2.0
        assert settings.poll_timeout == 45.0

    def test_poll_timeout_unset_means_unbounded(self, monkeypatch):
        monkeypatch.setenv("ALEXA_APPLICATION_ID", APP_ID)
        monkeypatch.delenv("BOFANG_POLL_TIMEOUT", raising=False)

        assert Settings.from_env().poll_timeout is None

    def test_missing_application_id(self, monkeypatch):
        monkeypatch.delenv("ALEXA_APPLICATION_ID", raising=False)

        with pytest.raises(KeyError):
            Settings.from_env()
