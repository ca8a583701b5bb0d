# Starting a player application, per OS.
#
# launch_player() returns True/False and never raises. The session turns a
# False into an error the user sees, since they just asked for it.

import logging
import os
import shutil
import subprocess
from typing import List, Optional, Sequence

from .backends.platforms import normalize_system

log = logging.getLogger(__name__)

LINUX_SPOTIFY_COMMANDS = (
    ("spotify",),
    ("flatpak", "run", "com.spotify.Client"),
    ("snap", "run", "spotify"),
    ("gtk-launch", "spotify"),
)

MACOS_APP_NAMES = {
    "spotify": "Spotify",
    "apple music": "Music",
}


def _spawn(cmd: Sequence[str]) -> None:
    """Start a detached process; we never wait for players to exit."""
    subprocess.Popen(
        list(cmd),
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def _first_existing(paths: List[str]) -> Optional[str]:
    for path in paths:
        if os.path.isfile(path):
            return path
    return None


def launch_windows(player_type: str) -> bool:
    key = player_type.lower()
    appdata = os.environ.get("APPDATA", "")
    program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
    program_files_x86 = os.environ.get("ProgramFiles(x86)", r"C:\Program Files (x86)")

    if key == "spotify":
        exe = _first_existing([
            os.path.join(appdata, "Spotify", "Spotify.exe"),
            os.path.join(program_files, "Spotify", "Spotify.exe"),
            os.path.join(program_files_x86, "Spotify", "Spotify.exe"),
        ])
        if exe is None:
            # Store installs only register the URI scheme
            _spawn(["cmd", "/c", "start", "", "spotify:"])
            return True
    elif key in ("itunes", "apple music"):
        exe = _first_existing([
            os.path.join(program_files, "iTunes", "iTunes.exe"),
            os.path.join(program_files_x86, "iTunes", "iTunes.exe"),
        ])
    elif key == "windows media player":
        system_root = os.environ.get("SystemRoot", r"C:\Windows")
        exe = os.path.join(system_root, "System32", "wmplayer.exe")
    else:
        log.warning("Unknown player type %r for Windows", player_type)
        return False

    if not exe:
        log.error("Could not find an installation of %s", player_type)
        return False
    _spawn([exe])
    return True


def launch_macos(player_type: str) -> bool:
    app_name = MACOS_APP_NAMES.get(player_type.lower())
    if app_name is None:
        log.warning("Unknown player type %r for macOS", player_type)
        return False
    _spawn(["/usr/bin/osascript", "-e", f'tell application "{app_name}" to activate'])
    return True


def launch_linux(player_type: str) -> bool:
    key = player_type.lower()
    if key == "spotify":
        candidates = LINUX_SPOTIFY_COMMANDS
    else:
        candidates = ((key,),)

    for cmd in candidates:
        if shutil.which(cmd[0]) is None:
            log.debug("Skipping %r, %s is not installed", " ".join(cmd), cmd[0])
            continue
        try:
            _spawn(cmd)
            return True
        except OSError as e:
            log.warning("Failed to launch %s with %r: %s", player_type, " ".join(cmd), e)

    log.error("All attempts to launch %s failed", player_type)
    return False


def launch_player(player_type: str, system: Optional[str] = None) -> bool:
    system = normalize_system(system)
    log.info("Launching %s on %s", player_type, system)
    try:
        if system == "Windows":
            return launch_windows(player_type)
        if system == "Darwin":
            return launch_macos(player_type)
        if system == "Linux":
            return launch_linux(player_type)
    except OSError as e:
        log.error("Error launching %s: %s", player_type, e)
        return False

    log.warning("Unsupported platform for launching music players: %s", system)
    return False
