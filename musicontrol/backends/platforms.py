"""
Which backends exist on which OS.

``backends_for_platform`` returns the {name: constructor} table the host
hands to ``PlayerRegistry.initialize``. Names are what the front end shows
and what selection matches on after a refresh.
"""

import logging
import platform
from typing import Callable, Dict, Optional

from .base import MusicPlayer
from .linux import RhythmboxPlayer, SpotifyLinuxPlayer, VlcPlayer
from .macos import AppleMusicPlayer, SpotifyMacOSPlayer
from .windows import ITunesWindowsPlayer, SpotifyWindowsPlayer, WindowsMediaPlayer

log = logging.getLogger(__name__)

PLATFORM_BACKENDS: Dict[str, Dict[str, Callable[[], MusicPlayer]]] = {
    "Linux": {
        "Spotify": SpotifyLinuxPlayer,
        "Rhythmbox": RhythmboxPlayer,
        "VLC": VlcPlayer,
    },
    "Darwin": {
        "Apple Music": AppleMusicPlayer,
        "Spotify": SpotifyMacOSPlayer,
    },
    "Windows": {
        "Spotify": SpotifyWindowsPlayer,
        "iTunes": ITunesWindowsPlayer,
        "Windows Media Player": WindowsMediaPlayer,
    },
}

# accepted spellings for MUSICONTROL_PLATFORM
_ALIASES = {
    "linux": "Linux",
    "darwin": "Darwin",
    "macos": "Darwin",
    "osx": "Darwin",
    "windows": "Windows",
    "win32": "Windows",
}


def normalize_system(system: Optional[str] = None) -> str:
    if not system:
        system = platform.system()
    return _ALIASES.get(system.lower(), system)


def backends_for_platform(system: Optional[str] = None) -> Dict[str, Callable[[], MusicPlayer]]:
    system = normalize_system(system)
    backends = PLATFORM_BACKENDS.get(system)
    if backends is None:
        log.warning("Unsupported platform for music player control: %s", system)
        return {}
    log.info("Registering %s music players: %s", system, ", ".join(backends))
    return dict(backends)
