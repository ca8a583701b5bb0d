# macOS players, driven through osascript.

import logging
from typing import Optional

from .. import executor
from ..parsing import parse_applescript_track
from .base import MusicPlayer

log = logging.getLogger(__name__)

TRACK_SCRIPT = """tell application "{app}"
    if player state is playing then
        set trackName to name of current track
        set trackArtist to artist of current track
        set trackAlbum to album of current track
        set trackDuration to duration of current track
        set trackPosition to player position
        return trackName & ":::" & trackArtist & ":::" & trackAlbum & ":::" & trackDuration & ":::" & trackPosition
    else
        return ""
    end if
end tell"""


class MacOSMusicPlayer(MusicPlayer):
    """Any scriptable player that understands the standard transport verbs."""

    supports_volume = True

    app_name: str = ""
    # divisor turning the reported duration into seconds
    duration_scale: float = 1.0

    def _tell(self, command: str) -> str:
        return executor.run_applescript(f'tell application "{self.app_name}" to {command}')

    def is_application_running(self, app_name: str) -> bool:
        script = f'tell application "System Events" to (name of processes) contains "{app_name}"'
        return executor.run_applescript(script).lower() == "true"

    @property
    def is_running(self) -> bool:
        return self.is_application_running(self.app_name)

    @property
    def is_playing(self) -> bool:
        if not self.is_running:
            return False
        self._is_playing = self._tell("player state as string").lower() == "playing"
        return self._is_playing

    def update_track_info(self) -> None:
        if not self.is_running:
            return
        result = executor.run_applescript(TRACK_SCRIPT.format(app=self.app_name))
        if not result:
            self._is_playing = False
            return
        if parse_applescript_track(result, self._track, duration_scale=self.duration_scale):
            self._is_playing = True

    def _send_play(self) -> None:
        self._tell("play")

    def _send_pause(self) -> None:
        self._tell("pause")

    def _send_next(self) -> None:
        self._tell("next track")

    def _send_previous(self) -> None:
        self._tell("previous track")

    def _send_volume(self, volume: float) -> None:
        self._tell(f"set sound volume to {round(volume * 100)}")

    def _query_volume(self) -> Optional[float]:
        result = self._tell("sound volume as string")
        try:
            return int(result) / 100
        except ValueError:
            log.debug("%s returned a non-numeric volume: %r", self.player_name, result)
            return None


class SpotifyMacOSPlayer(MacOSMusicPlayer):
    player_name = "Spotify"
    app_name = "Spotify"
    duration_scale = 1000.0  # milliseconds


class AppleMusicPlayer(MacOSMusicPlayer):
    player_name = "Apple Music"
    app_name = "Music"
