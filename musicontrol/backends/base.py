"""
Abstract base for music player backends.

One subclass per (OS, application) pair. Every backend exposes the same
capability set so the registry and the HTTP surface never care which one
they hold:

    class MyPlayer(MusicPlayer):
        player_name = "My Player"

        @property
        def is_running(self) -> bool: ...
        def update_track_info(self) -> None: ...
        def _send_play(self) -> None: ...
        def _send_pause(self) -> None: ...
        def _send_next(self) -> None: ...
        def _send_previous(self) -> None: ...

Optional overrides:
    is_playing          live status query (default: last cached flag)
    _send_volume(v)     backends with a volume primitive (set supports_volume)
    _query_volume()     returns 0..1 or None

Control calls are no-ops while the player isn't running. Nothing here
raises on a failed command; the executor already turned that into "".
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..track import TrackInfo

log = logging.getLogger(__name__)

DEFAULT_VOLUME = 0.5


def clamp_volume(volume: float) -> float:
    return max(0.0, min(1.0, float(volume)))


class MusicPlayer(ABC):
    # ── Subclass must set these ──
    player_name: str = ""

    # ── Capabilities ──
    supports_volume: bool = False
    refresh_on_skip: bool = True

    def __init__(self):
        self._track = TrackInfo()
        self._is_playing = False
        self._volume = DEFAULT_VOLUME

    # ── Abstract methods (subclass must implement) ──

    @property
    @abstractmethod
    def is_running(self) -> bool: ...

    @abstractmethod
    def update_track_info(self) -> None:
        """Refresh self._track (and usually self._is_playing) in place."""

    @abstractmethod
    def _send_play(self) -> None: ...

    @abstractmethod
    def _send_pause(self) -> None: ...

    @abstractmethod
    def _send_next(self) -> None: ...

    @abstractmethod
    def _send_previous(self) -> None: ...

    # -- Optional: override in backends that can control volume --

    def _send_volume(self, volume: float) -> None:
        pass

    def _query_volume(self) -> Optional[float]:
        return None

    # ── Built-in ──

    @property
    def current_track(self) -> TrackInfo:
        self.update_track_info()
        return self._track

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    def play(self):
        if not self.is_running:
            return
        log.debug("%s: play", self.player_name)
        self._send_play()
        self._is_playing = True

    def pause(self):
        if not self.is_running:
            return
        log.debug("%s: pause", self.player_name)
        self._send_pause()
        self._is_playing = False

    def next(self):
        if not self.is_running:
            return
        log.debug("%s: next", self.player_name)
        self._send_next()
        if self.refresh_on_skip:
            self.update_track_info()

    def previous(self):
        if not self.is_running:
            return
        log.debug("%s: previous", self.player_name)
        self._send_previous()
        if self.refresh_on_skip:
            self.update_track_info()

    def set_volume(self, volume: float):
        self._volume = clamp_volume(volume)
        if self.supports_volume and self.is_running:
            self._send_volume(self._volume)

    def get_volume(self) -> float:
        if self.supports_volume and self.is_running:
            volume = self._query_volume()
            if volume is not None:
                self._volume = clamp_volume(volume)
        return self._volume

    def status(self) -> dict:
        """Snapshot for the HTTP surface (refreshes the track first)."""
        track = self.current_track
        return {
            "player": self.player_name,
            "is_playing": self.is_playing,
            "volume": self._volume,
            "track": track.to_dict(),
        }

    def __repr__(self):
        return f"<{type(self).__name__} {self.player_name!r}>"
