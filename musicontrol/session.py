"""
PlayerSession: the front end's view of the players.

Holds the live list, the selected player and the manual connections, and
keeps the selection across refreshes by matching player names. Front ends
(the Flask app here) call this and nothing below it.
"""

import logging
from typing import List, Optional

from . import executor
from .backends.base import MusicPlayer
from .backends.manual import ManualMusicPlayer
from .backends.platforms import backends_for_platform
from .launcher import launch_player
from .registry import PlayerRegistry
from .settings import Settings, load_settings

log = logging.getLogger(__name__)


class LaunchError(Exception):
    """A player the user asked to start could not be started."""


class UnknownPlayerType(ValueError):
    """A launch request named a player type that isn't configured or registered."""


class PlayerSession:
    def __init__(self, registry: PlayerRegistry, settings: Optional[Settings] = None,
                 system: Optional[str] = None):
        self.registry = registry
        self.settings = settings or Settings()
        self.system = system or self.settings.platform
        self.players: List[MusicPlayer] = []
        self.selected: Optional[MusicPlayer] = None

    @property
    def manual_player_types(self) -> List[str]:
        return list(self.settings.manual_player_types)

    @property
    def player_names(self) -> List[str]:
        return [p.player_name for p in self.players]

    def initialize(self) -> None:
        self.players = list(self.registry.get_available_players())

    def find(self, name: str) -> Optional[MusicPlayer]:
        for player in self.players:
            if player.player_name == name:
                return player
        return None

    def select(self, name: str) -> MusicPlayer:
        player = self.find(name)
        if player is None:
            raise KeyError(name)
        self.selected = player
        return player

    def refresh(self) -> List[MusicPlayer]:
        """Probe every backend again and keep the same player selected if it survived."""
        log.info("Refreshing available music players...")
        previous = self.selected.player_name if self.selected else None

        self.players = list(self.registry.get_available_players(force_refresh=True))
        self.selected = self.find(previous) if previous else None
        if previous and self.selected is None:
            log.info("%s is no longer available", previous)

        log.info("Refresh complete. Found %d available music players", len(self.players))
        return self.players

    def connect_manual(self, player_type: str) -> MusicPlayer:
        log.info("Manually connecting to %s...", player_type)
        player = ManualMusicPlayer(player_type)
        self.players.append(player)
        self.selected = player
        return player

    def toggle_playback(self) -> None:
        if self.selected is None:
            return
        if self.selected.is_playing:
            self.selected.pause()
        else:
            self.selected.play()

    @property
    def launchable_types(self) -> List[str]:
        """Player types /launch may start: the manual list plus this OS's backends."""
        names = self.manual_player_types + self.registry.registered_names
        return list(dict.fromkeys(names))

    def launch(self, player_type: Optional[str] = None) -> str:
        if player_type is None:
            if self.selected is None:
                raise LaunchError("no player selected")
            player_type = getattr(self.selected, "player_type", self.selected.player_name)

        allowed = {name.lower() for name in self.launchable_types}
        if player_type.lower() not in allowed:
            raise UnknownPlayerType(player_type)

        if not launch_player(player_type, system=self.system):
            raise LaunchError(
                f"Failed to launch {player_type}. Please start it manually and then connect manually."
            )
        return player_type


def create_session(settings: Optional[Settings] = None, system: Optional[str] = None) -> PlayerSession:
    settings = settings or load_settings()
    executor.set_default_timeout(settings.command_timeout)

    registry = PlayerRegistry()
    registry.initialize(backends_for_platform(system or settings.platform))
    return PlayerSession(registry, settings, system=system)
