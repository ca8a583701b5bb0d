import pytest

from musicontrol.settings import CONFIG_PATH, Settings, load_config, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("MUSICONTROL_CONFIG", raising=False)
    monkeypatch.delenv("MUSICONTROL_PLATFORM", raising=False)

def test_shipped_config_matches_defaults():
    s = load_settings(CONFIG_PATH)
    assert s == Settings()

def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.yaml")) == {}
    assert load_settings(str(tmp_path / "nope.yaml")) == Settings()

def test_values_from_yaml(tmp_path):
    cfg = tmp_path / "mc.yaml"
    cfg.write_text(
        "refresh_interval: 2.5\n"
        "command_timeout: 4\n"
        "manual_player_types: [Spotify, mpv]\n"
        "platform: linux\n"
    )
    s = load_settings(str(cfg))
    assert s.refresh_interval == 2.5
    assert s.command_timeout == 4.0
    assert s.manual_player_types == ["Spotify", "mpv"]
    assert s.platform == "linux"

def test_bad_values_fall_back(tmp_path):
    cfg = tmp_path / "mc.yaml"
    cfg.write_text(
        "refresh_interval: -1\n"
        "command_timeout: soon\n"
        "manual_player_types: Spotify\n"
    )
    s = load_settings(str(cfg))
    assert s.refresh_interval == 1.0
    assert s.command_timeout is None
    assert s.manual_player_types == ["Spotify", "VLC", "Rhythmbox"]

def test_broken_yaml_is_ignored(tmp_path):
    cfg = tmp_path / "mc.yaml"
    cfg.write_text("refresh_interval: [1, 2\n")
    assert load_config(str(cfg)) == {}

def test_non_mapping_is_ignored(tmp_path):
    cfg = tmp_path / "mc.yaml"
    cfg.write_text("- just\n- a list\n")
    assert load_config(str(cfg)) == {}

def test_env_overrides(tmp_path, monkeypatch):
    cfg = tmp_path / "mc.yaml"
    cfg.write_text("refresh_interval: 3\nplatform: linux\n")
    monkeypatch.setenv("MUSICONTROL_CONFIG", str(cfg))
    monkeypatch.setenv("MUSICONTROL_PLATFORM", "windows")
    s = load_settings()
    assert s.refresh_interval == 3.0
    assert s.platform == "windows"
