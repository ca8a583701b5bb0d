import json
import os
os.environ.setdefault("MUSICONTROL_SKIP_STARTUP", "1")

import pytest

import musicontrol.app as app_module
from musicontrol.app import app
from musicontrol.backends.base import MusicPlayer
from musicontrol.registry import PlayerRegistry
from musicontrol.session import PlayerSession
from musicontrol.settings import Settings


class FakePlayer(MusicPlayer):
    player_name = "Spotify"

    @property
    def is_running(self):
        return True

    def update_track_info(self):
        self._track.title = "Phoenix"
        self._track.artist = "Netrum"

    def _send_play(self):
        pass

    def _send_pause(self):
        pass

    def _send_next(self):
        pass

    def _send_previous(self):
        pass


@pytest.fixture
def session(mocker):
    registry = PlayerRegistry()
    registry.initialize({"Spotify": FakePlayer})
    s = PlayerSession(registry, Settings(), system="Linux")
    mocker.patch.object(app_module, "_session", s)
    return s

@pytest.fixture
def client(session):
    return app.test_client()

def post(client, url, body):
    return client.post(url, data=json.dumps(body), content_type="application/json")

def test_players_discovers_on_first_call(client):
    r = client.get("/players")
    assert r.status_code == 200
    data = r.get_json()
    assert data["players"] == ["Spotify"]
    assert data["selected"] is None
    assert data["manual_player_types"] == ["Spotify", "VLC", "Rhythmbox"]

def test_players_refresh_keeps_selection(client, session):
    session.initialize()
    session.select("Spotify")
    r = client.get("/players?refresh=1")
    assert r.get_json()["selected"] == "Spotify"
    r = client.post("/players/refresh")
    assert r.get_json()["players"] == ["Spotify"]

def test_select_validation(client, session):
    session.initialize()
    assert post(client, "/players/select", {}).status_code == 400
    assert post(client, "/players/select", {"name": "Winamp"}).status_code == 404

    r = post(client, "/players/select", {"name": "Spotify"})
    assert r.status_code == 200
    assert r.get_json()["volume"] == 0.5

def test_status_needs_a_player(client, session):
    assert client.get("/status").status_code == 409

    session.initialize()
    session.select("Spotify")
    data = client.get("/status").get_json()
    assert data["player"] == "Spotify"
    assert data["track"]["title"] == "Phoenix"
    assert data["is_playing"] is False

def test_control(client, session):
    assert post(client, "/control", {"action": "rewind"}).status_code == 400
    assert post(client, "/control", {"action": "play"}).status_code == 409

    session.initialize()
    session.select("Spotify")
    r = post(client, "/control", {"action": "play"})
    assert r.get_json()["is_playing"] is True
    r = post(client, "/control", {"action": "toggle"})
    assert r.get_json()["is_playing"] is False
    assert post(client, "/control", {"action": "next"}).status_code == 200

def test_volume(client, session):
    assert post(client, "/volume", {"volume": "loud"}).status_code == 400
    assert post(client, "/volume", {"volume": 0.3}).status_code == 409

    session.initialize()
    session.select("Spotify")
    r = post(client, "/volume", {"volume": 7})
    assert r.get_json()["volume"] == 1.0

def test_manual_connect(client, commands):
    assert post(client, "/players/manual", {}).status_code == 400
    r = post(client, "/players/manual", {"player_type": "mpv"})
    assert r.status_code == 200
    assert r.get_json()["selected"] == "mpv (Manual)"

def test_launch(client, mocker):
    mocker.patch("musicontrol.session.launch_player", return_value=False)
    r = post(client, "/launch", {"player": "Spotify"})
    assert r.status_code == 500
    assert "Failed to launch Spotify" in r.get_json()["error"]

    mocker.patch("musicontrol.session.launch_player", return_value=True)
    r = post(client, "/launch", {"player": "Spotify"})
    assert r.status_code == 200
    assert r.get_json()["launched"] == "Spotify"

def test_launch_rejects_unknown_programs(client, mocker):
    spawn = mocker.patch("musicontrol.launcher._spawn")
    # a plain-text body is still parsed, so it must go through the same check
    r = client.post("/launch", data=json.dumps({"player": "python3"}), content_type="text/plain")
    assert r.status_code == 400
    data = r.get_json()
    assert data["ok"] is False
    assert "Spotify" in data["allowed"]
    spawn.assert_not_called()

def test_launch_rejects_non_string_player(client, mocker):
    spawn = mocker.patch("musicontrol.launcher._spawn")
    assert post(client, "/launch", {"player": ["vlc"]}).status_code == 400
    spawn.assert_not_called()

def test_launch_accepts_configured_type_any_case(client, mocker):
    launch = mocker.patch("musicontrol.session.launch_player", return_value=True)
    r = post(client, "/launch", {"player": "rhythmbox"})
    assert r.status_code == 200
    launch.assert_called_once_with("rhythmbox", system="Linux")
