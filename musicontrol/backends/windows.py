# Windows players: no control API, so we read the main window title and poke
# the window with keystrokes (WScript.Shell SendKeys) through PowerShell.
#
# Volume can't be set this way; these backends only remember the value.

import logging
from typing import Tuple

from .. import executor
from ..parsing import parse_window_title
from .base import MusicPlayer

log = logging.getLogger(__name__)

# SendKeys arguments, written as PowerShell expressions
KEY_SPACE = "' '"
KEY_CTRL_RIGHT = "'^{RIGHT}'"
KEY_CTRL_LEFT = "'^{LEFT}'"
KEY_MEDIA_PLAY_PAUSE = "[string][char]179"
KEY_MEDIA_NEXT = "[string][char]176"
KEY_MEDIA_PREV = "[string][char]177"

WINDOW_TITLE_SCRIPT = (
    "(Get-Process -Name '{process}' -ErrorAction SilentlyContinue | "
    "Where-Object {{ $_.MainWindowTitle }} | Select-Object -First 1).MainWindowTitle"
)

SEND_KEYS_SCRIPT = (
    "$p = Get-Process -Name '{process}' -ErrorAction SilentlyContinue | "
    "Where-Object {{ $_.MainWindowHandle -ne 0 }} | Select-Object -First 1; "
    "if ($p) {{ $w = New-Object -ComObject WScript.Shell; "
    "if ($w.AppActivate($p.Id)) {{ $w.SendKeys({keys}) }} }}"
)


class WindowsMusicPlayer(MusicPlayer):
    # process image name without ".exe"
    process_name: str = ""
    # what the window title ends with
    window_app_name: str = ""
    idle_titles: Tuple[str, ...] = ()

    refresh_on_skip = False

    play_keys = KEY_SPACE
    pause_keys = KEY_SPACE
    next_keys = KEY_CTRL_RIGHT
    previous_keys = KEY_CTRL_LEFT

    @property
    def is_running(self) -> bool:
        image = f"{self.process_name}.exe"
        result = executor.run_powershell(f'tasklist /FI "IMAGENAME eq {image}" /NH')
        return image.lower() in result.lower()

    def window_title(self) -> str:
        return executor.run_powershell(WINDOW_TITLE_SCRIPT.format(process=self.process_name))

    def send_keys(self, keys: str) -> None:
        log.debug("%s: sending keys %s", self.player_name, keys)
        executor.run_powershell(SEND_KEYS_SCRIPT.format(process=self.process_name, keys=keys))

    def update_track_info(self) -> None:
        title = self.window_title()
        if not title:
            return
        self._is_playing = parse_window_title(
            title, self.window_app_name, self._track, idle_titles=self.idle_titles
        )

    def _send_play(self) -> None:
        self.send_keys(self.play_keys)

    def _send_pause(self) -> None:
        self.send_keys(self.pause_keys)

    def _send_next(self) -> None:
        self.send_keys(self.next_keys)

    def _send_previous(self) -> None:
        self.send_keys(self.previous_keys)


class SpotifyWindowsPlayer(WindowsMusicPlayer):
    player_name = "Spotify"
    process_name = "Spotify"
    window_app_name = "Spotify"
    idle_titles = ("Spotify Free", "Spotify Premium")


class ITunesWindowsPlayer(WindowsMusicPlayer):
    player_name = "iTunes"
    process_name = "iTunes"
    window_app_name = "iTunes"


class WindowsMediaPlayer(WindowsMusicPlayer):
    player_name = "Windows Media Player"
    process_name = "wmplayer"
    window_app_name = "Windows Media Player"

    play_keys = KEY_MEDIA_PLAY_PAUSE
    pause_keys = KEY_MEDIA_PLAY_PAUSE
    next_keys = KEY_MEDIA_NEXT
    previous_keys = KEY_MEDIA_PREV
