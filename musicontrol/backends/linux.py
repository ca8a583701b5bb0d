# Linux players: MPRIS over D-Bus (Spotify, VLC) and Rhythmbox's own interface.
#
# Everything is a dbus-send / pgrep / playerctl command line run through bash,
# so the replies are the --print-reply text dumps that parsing.py knows.

import logging
import shlex
from typing import Optional, Tuple

from .. import executor
from ..parsing import (
    extract_string_value,
    parse_clock_time,
    parse_double,
    parse_playback_status,
    parse_position,
    parse_property_dump,
)
from ..track import UNKNOWN
from .base import MusicPlayer

log = logging.getLogger(__name__)

DBUS_PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
DBUS_ERROR_MARKERS = ("Error", "Failed", "No such")


class LinuxMusicPlayer(MusicPlayer):
    """Shared shell/D-Bus plumbing for the Linux backends."""

    process_names: Tuple[str, ...] = ()

    def _shell(self, command: str) -> str:
        return executor.execute(command)

    def is_process_running(self, process_name: str) -> bool:
        """
        pgrep, then ps, then the window manager's client list. Works under
        X11 and most Wayland sessions (wmctrl only helps on X11).
        """
        name = shlex.quote(process_name)

        if self._shell(f"pgrep -x {name}"):
            log.debug("Process %r detected using pgrep", process_name)
            return True

        ps = self._shell(f"ps aux | grep -v grep | grep {name}")
        if ps and "grep" not in ps:
            log.debug("Process %r detected using ps", process_name)
            return True

        if self._shell(f"wmctrl -l 2>/dev/null | grep -i {name}"):
            log.debug("Process %r detected using wmctrl", process_name)
            return True

        log.debug("Process %r not detected using any method", process_name)
        return False

    def _any_process_running(self) -> bool:
        return any(self.is_process_running(name) for name in self.process_names)

    def send_dbus(self, service: str, path: str, interface: str, method: str, args: str = "") -> str:
        command = f"dbus-send --print-reply --dest={service} {path} {interface}.{method}"
        if args:
            command += " " + args
        log.debug("Executing D-Bus command: %s", command)

        result = self._shell(command)
        if any(marker in result for marker in DBUS_ERROR_MARKERS):
            log.warning("D-Bus command returned an error: %s", result)
        return result


class MprisPlayer(LinuxMusicPlayer):
    """Any player exposing org.mpris.MediaPlayer2 on the session bus."""

    supports_volume = True

    mpris_id: str = ""
    dbus_path = "/org/mpris/MediaPlayer2"
    player_interface = "org.mpris.MediaPlayer2.Player"
    url_title_fallback = False

    @property
    def bus_name(self) -> str:
        return f"org.mpris.MediaPlayer2.{self.mpris_id}"

    # ── D-Bus helpers ──

    def get_property(self, prop: str) -> str:
        return self._shell(
            f"dbus-send --print-reply --dest={self.bus_name} {self.dbus_path} "
            f"{DBUS_PROPERTIES_INTERFACE}.Get string:'{self.player_interface}' string:'{prop}'"
        )

    def _call(self, method: str, args: str = "") -> str:
        return self.send_dbus(self.bus_name, self.dbus_path, self.player_interface, method, args)

    def is_bus_reachable(self) -> bool:
        """playerctl's list, the bus name list, then a direct status probe."""
        mpris_id = shlex.quote(self.mpris_id)
        if self._shell(f"playerctl -l 2>/dev/null | grep -i {mpris_id}"):
            log.debug("%s detected via playerctl", self.player_name)
            return True

        names = self._shell(
            "dbus-send --print-reply --dest=org.freedesktop.DBus --type=method_call "
            f"/org/freedesktop/DBus org.freedesktop.DBus.ListNames | grep {shlex.quote(self.bus_name)}"
        )
        if names:
            log.debug("%s detected via D-Bus name list", self.player_name)
            return True

        status = self.get_property("PlaybackStatus")
        reachable = bool(status) and "Error" not in status
        log.debug("Can communicate with %s via D-Bus: %s", self.player_name, reachable)
        return reachable

    # ── Capability set ──

    @property
    def is_running(self) -> bool:
        if self._any_process_running():
            return True
        return self.is_bus_reachable()

    @property
    def is_playing(self) -> bool:
        if not self.is_running:
            return False
        self._is_playing = parse_playback_status(self.get_property("PlaybackStatus"))
        return self._is_playing

    def update_track_info(self) -> None:
        if not self.is_running:
            return

        metadata = self.get_property("Metadata")
        log.debug("Raw %s metadata:\n%s", self.player_name, metadata)
        if not metadata:
            self._is_playing = False
            return

        parse_property_dump(metadata, self._track, url_title_fallback=self.url_title_fallback)

        position = parse_position(self.get_property("Position"))
        if position is not None:
            self._track.position = position

        self._is_playing = parse_playback_status(self.get_property("PlaybackStatus"))

    def _send_play(self) -> None:
        self._call("Play")

    def _send_pause(self) -> None:
        self._call("Pause")

    def _send_next(self) -> None:
        self._call("Next")

    def _send_previous(self) -> None:
        self._call("Previous")

    def _send_volume(self, volume: float) -> None:
        self.send_dbus(
            self.bus_name, self.dbus_path, DBUS_PROPERTIES_INTERFACE, "Set",
            f"string:'{self.player_interface}' string:'Volume' variant:double:{volume}",
        )

    def _query_volume(self) -> Optional[float]:
        return parse_double(self.get_property("Volume"))


class SpotifyLinuxPlayer(MprisPlayer):
    player_name = "Spotify"
    mpris_id = "spotify"
    # snap installs show up under the second name
    process_names = ("spotify", "spotify.spotify")


class VlcPlayer(MprisPlayer):
    player_name = "VLC"
    mpris_id = "vlc"
    process_names = ("vlc",)
    url_title_fallback = True


class RhythmboxPlayer(LinuxMusicPlayer):
    """Rhythmbox through its legacy org.gnome.Rhythmbox3 interface."""

    player_name = "Rhythmbox"
    process_names = ("rhythmbox",)
    supports_volume = True

    DBUS_SERVICE = "org.gnome.Rhythmbox3"
    DBUS_PATH = "/org/gnome/Rhythmbox3/Player"
    DBUS_PLAYER_INTERFACE = "org.gnome.Rhythmbox3.Player"

    def _call(self, method: str, args: str = "") -> str:
        return self.send_dbus(self.DBUS_SERVICE, self.DBUS_PATH, self.DBUS_PLAYER_INTERFACE, method, args)

    def _client_field(self, fmt: str) -> str:
        return self._shell(f"rhythmbox-client --print-playing-format={fmt}").strip()

    @property
    def is_running(self) -> bool:
        return self._any_process_running()

    @property
    def is_playing(self) -> bool:
        if not self.is_running:
            return False
        self._is_playing = "true" in self._call("getPlaying")
        return self._is_playing

    def update_track_info(self) -> None:
        if not self.is_running:
            return

        reply = self._call("getPlayingUri")
        uri = extract_string_value(reply) if "string" in reply else ""
        if not uri or uri == UNKNOWN:
            self._is_playing = False
            return

        self._track.title = self._client_field("%tt")
        self._track.artist = self._client_field("%ta")
        self._track.album = self._client_field("%at")

        duration = parse_clock_time(self._client_field("%td"))
        if duration is not None:
            self._track.duration = duration
        position = parse_clock_time(self._client_field("%te"))
        if position is not None:
            self._track.position = position

        self._is_playing = "true" in self._call("getPlaying")

    def _send_play(self) -> None:
        self._call("playPause", "boolean:true")

    def _send_pause(self) -> None:
        self._call("playPause", "boolean:false")

    def _send_next(self) -> None:
        self._call("next")

    def _send_previous(self) -> None:
        self._call("previous")

    def _send_volume(self, volume: float) -> None:
        self._call("setVolume", f"double:{volume}")

    def _query_volume(self) -> Optional[float]:
        return parse_double(self._call("getVolume"))
