# Manually connected player, for when discovery can't see a player that is
# actually there (Wayland sessions are the usual suspect).
#
# Always claims to be running. Known types get their D-Bus commands, anything
# else goes through `playerctl -p <type>`.

import logging
import shlex

from .. import executor
from ..parsing import parse_playback_status, parse_position, parse_property_dump
from .base import MusicPlayer

log = logging.getLogger(__name__)

MPRIS_PREFIX = "dbus-send --print-reply --dest=org.mpris.MediaPlayer2.{id} /org/mpris/MediaPlayer2"
MPRIS_PLAYER = "org.mpris.MediaPlayer2.Player"
RHYTHMBOX_PREFIX = ("dbus-send --print-reply --dest=org.gnome.Rhythmbox3 "
                    "/org/gnome/Rhythmbox3/Player org.gnome.Rhythmbox3.Player")

MPRIS_TYPES = ("spotify", "vlc")


class ManualMusicPlayer(MusicPlayer):
    supports_volume = True

    def __init__(self, player_type: str):
        super().__init__()
        self.player_type = player_type
        self.player_name = f"{player_type} (Manual)"
        self._key = player_type.lower()
        self.update_track_info()

    def _shell(self, command: str) -> str:
        return executor.execute(command)

    # ── command builders ──

    def _mpris_call(self, method: str) -> str:
        return f"{MPRIS_PREFIX.format(id=self._key)} {MPRIS_PLAYER}.{method}"

    def _mpris_get(self, prop: str) -> str:
        return (f"{MPRIS_PREFIX.format(id=self._key)} org.freedesktop.DBus.Properties.Get "
                f"string:'{MPRIS_PLAYER}' string:'{prop}'")

    def _playerctl(self, *args: str) -> str:
        return " ".join(["playerctl", "-p", shlex.quote(self._key)] + list(args))

    def _command(self, action: str) -> str:
        """action is one of play/pause/next/previous."""
        if self._key in MPRIS_TYPES:
            return self._mpris_call(action.capitalize())
        if self._key == "rhythmbox":
            if action == "play":
                return f"{RHYTHMBOX_PREFIX}.playPause boolean:true"
            if action == "pause":
                return f"{RHYTHMBOX_PREFIX}.playPause boolean:false"
            return f"{RHYTHMBOX_PREFIX}.{action}"
        return self._playerctl(action)

    # ── Capability set ──

    @property
    def is_running(self) -> bool:
        return True

    def update_track_info(self) -> None:
        if self._key in MPRIS_TYPES:
            metadata = self._shell(self._mpris_get("Metadata"))
            if metadata:
                parse_property_dump(metadata, self._track, url_title_fallback=self._key == "vlc")
            position = parse_position(self._shell(self._mpris_get("Position")))
            if position is not None:
                self._track.position = position
            self._is_playing = parse_playback_status(self._shell(self._mpris_get("PlaybackStatus")))
            return

        if self._key == "rhythmbox":
            fields = [self._shell(f"rhythmbox-client --print-playing-format={fmt}") for fmt in ("%tt", "%ta", "%at")]
            playing = self._shell(f"{RHYTHMBOX_PREFIX}.getPlaying")
            self._apply_fields(*fields)
            self._is_playing = "true" in playing
            return

        fields = [self._shell(self._playerctl("metadata", field)) for field in ("title", "artist", "album")]
        self._apply_fields(*fields)
        position = self._shell(self._playerctl("position"))
        try:
            self._track.position = float(position)
        except ValueError:
            pass
        self._is_playing = parse_playback_status(self._shell(self._playerctl("status")))

    def _apply_fields(self, title: str, artist: str, album: str) -> None:
        if title:
            self._track.title = title
            self._track.artist = artist
            self._track.album = album

    def _send_play(self) -> None:
        self._shell(self._command("play"))
        self.update_track_info()

    def _send_pause(self) -> None:
        self._shell(self._command("pause"))

    def _send_next(self) -> None:
        self._shell(self._command("next"))

    def _send_previous(self) -> None:
        self._shell(self._command("previous"))

    def _send_volume(self, volume: float) -> None:
        if self._key in MPRIS_TYPES:
            command = (f"{MPRIS_PREFIX.format(id=self._key)} org.freedesktop.DBus.Properties.Set "
                       f"string:'{MPRIS_PLAYER}' string:'Volume' variant:double:{volume}")
        elif self._key == "rhythmbox":
            command = f"{RHYTHMBOX_PREFIX}.setVolume double:{volume}"
        else:
            command = self._playerctl("volume", str(volume))
        self._shell(command)

    def get_volume(self) -> float:
        return self._volume
