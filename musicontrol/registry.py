"""Registry of player backends and the live-player snapshot."""

import logging
from typing import Callable, Dict, List, Mapping, Optional

from .backends.base import MusicPlayer

log = logging.getLogger(__name__)

PlayerFactory = Callable[[], MusicPlayer]


class PlayerRegistry:
    """
    Maps player names to backend constructors and caches which of them are
    running.

    The host builds one per process (tests build one per test) and hands
    it the backends for the current OS through ``initialize``.
    """

    def __init__(self) -> None:
        self._constructors: Dict[str, PlayerFactory] = {}
        self._available: List[MusicPlayer] = []
        self._initialized = False

    def initialize(self, backends: Optional[Mapping[str, PlayerFactory]] = None) -> None:
        """Register *backends*. Only the first call with a mapping does anything.

        A call without a mapping (the lazy one from ``get_available_players``)
        registers nothing and leaves the registry open for the host's call.

        Args:
            backends: {player name: constructor}, usually from
                ``backends_for_platform()``.
        """
        if self._initialized:
            if backends:
                log.warning("Registry already initialized, ignoring backends: %s", ", ".join(backends))
            return
        if backends is None:
            return
        for name, constructor in backends.items():
            self.register_backend(name, constructor)
        self._initialized = True

    def register_backend(self, name: str, constructor: PlayerFactory) -> None:
        """Register a backend. A name that is already taken is left as is."""
        if name in self._constructors:
            log.debug("Player %s already registered, ignoring", name)
            return
        self._constructors[name] = constructor

    @property
    def registered_names(self) -> List[str]:
        return list(self._constructors)

    def get_available_players(self, force_refresh: bool = False) -> List[MusicPlayer]:
        """Running players, probing every backend when needed.

        Args:
            force_refresh: Probe again even if a non-empty snapshot exists.

        Returns:
            The cached snapshot list. Unforced calls return the same list
            object for as long as it is non-empty.
        """
        if not self._initialized:
            self.initialize()

        if self._available and not force_refresh:
            return self._available

        log.info("Detecting available music players...")
        available: List[MusicPlayer] = []
        for name, constructor in self._constructors.items():
            try:
                log.debug("Checking if %s is running...", name)
                player = constructor()
                running = player.is_running
            except Exception as e:
                log.error("Failed to create instance of %s: %s", name, e)
                continue

            log.info("%s is %s", name, "running" if running else "not running")
            if running:
                available.append(player)

        self._available = available
        log.info("Found %d available music players", len(available))
        return self._available

    def create_player(self, name: str) -> Optional[MusicPlayer]:
        """Build one named backend, ignoring the snapshot.

        Returns:
            The new player, or None if the name is unknown or construction
            failed.
        """
        if not self._initialized:
            self.initialize()

        constructor = self._constructors.get(name)
        if constructor is None:
            return None
        try:
            return constructor()
        except Exception as e:
            log.error("Failed to create instance of %s: %s", name, e)
            return None
