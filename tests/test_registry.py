# No real players here: tiny fake backends that count how often they are probed.

# We assert that:
# the snapshot is cached (same list object) until a forced refresh
# a backend that blows up is skipped, not fatal
# registration and initialize are both first-one-wins

import pytest

from musicontrol.backends.base import MusicPlayer
from musicontrol.registry import PlayerRegistry


class FakePlayer(MusicPlayer):
    player_name = "Fake"
    running = True
    probes = 0

    @property
    def is_running(self):
        type(self).probes += 1
        return self.running

    def update_track_info(self):
        pass

    def _send_play(self):
        pass

    def _send_pause(self):
        pass

    def _send_next(self):
        pass

    def _send_previous(self):
        pass


def make_backend(name, running=True):
    return type(name, (FakePlayer,), {"player_name": name, "running": running, "probes": 0})


def boom():
    raise RuntimeError("no session bus")


def test_only_running_players_are_listed():
    reg = PlayerRegistry()
    reg.initialize({"A": make_backend("A"), "B": make_backend("B", running=False)})
    names = [p.player_name for p in reg.get_available_players()]
    assert names == ["A"]

def test_snapshot_is_cached_until_forced():
    a = make_backend("A")
    reg = PlayerRegistry()
    reg.initialize({"A": a})

    first = reg.get_available_players()
    second = reg.get_available_players()
    assert first is second
    assert a.probes == 1

    forced = reg.get_available_players(force_refresh=True)
    assert a.probes == 2
    assert [p.player_name for p in forced] == ["A"]

def test_empty_snapshot_probes_every_time():
    b = make_backend("B", running=False)
    reg = PlayerRegistry()
    reg.initialize({"B": b})
    assert reg.get_available_players() == []
    assert reg.get_available_players() == []
    assert b.probes == 2

def test_failing_backend_is_skipped():
    reg = PlayerRegistry()
    reg.initialize({"Broken": boom, "A": make_backend("A")})
    assert [p.player_name for p in reg.get_available_players()] == ["A"]

def test_failing_probe_is_skipped(mocker):
    bad = make_backend("Bad")
    mocker.patch.object(bad, "is_running", new_callable=mocker.PropertyMock, side_effect=OSError("gone"))
    reg = PlayerRegistry()
    reg.initialize({"Bad": bad, "A": make_backend("A")})
    assert [p.player_name for p in reg.get_available_players()] == ["A"]

def test_duplicate_registration_keeps_first():
    first, second = make_backend("First"), make_backend("Second")
    reg = PlayerRegistry()
    reg.register_backend("Spotify", first)
    reg.register_backend("Spotify", second)
    assert reg.registered_names == ["Spotify"]
    assert isinstance(reg.create_player("Spotify"), first)

def test_initialize_only_once():
    reg = PlayerRegistry()
    reg.initialize({"A": make_backend("A")})
    reg.initialize({"B": make_backend("B")})
    assert reg.registered_names == ["A"]

def test_uninitialized_registry_is_empty():
    reg = PlayerRegistry()
    assert reg.get_available_players() == []
    assert reg.registered_names == []

def test_create_player():
    reg = PlayerRegistry()
    reg.initialize({"A": make_backend("A"), "Broken": boom})
    assert reg.create_player("A").player_name == "A"
    assert reg.create_player("Nope") is None
    assert reg.create_player("Broken") is None

def test_abstract_player_cannot_be_built():
    with pytest.raises(TypeError):
        MusicPlayer()

def test_early_lookup_does_not_lock_out_backends():
    reg = PlayerRegistry()
    assert reg.get_available_players() == []
    assert reg.create_player("A") is None

    reg.initialize({"A": make_backend("A")})
    assert reg.registered_names == ["A"]
    assert [p.player_name for p in reg.get_available_players()] == ["A"]

def test_late_backends_are_logged(caplog):
    reg = PlayerRegistry()
    reg.initialize({"A": make_backend("A")})
    with caplog.at_level("WARNING", logger="musicontrol.registry"):
        reg.initialize({"B": make_backend("B")})
    assert "ignoring backends: B" in caplog.text
    assert reg.registered_names == ["A"]
