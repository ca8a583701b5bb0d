# TrackInfo: what the player says is playing right now.
#
# The sentinel strings matter: callers compare against them to decide whether
# there is anything worth showing.

from typing import Optional

UNKNOWN = "Unknown"
UNABLE_TO_RETRIEVE = "Unable To Retrieve"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


class TrackInfo:
    """
    Mutable track record owned by one player. Refreshed in place, so a caller
    holding a reference sees every update.

    Assigning an empty title/artist/album stores the matching sentinel
    instead of the empty string.
    """

    def __init__(self):
        self._title = UNKNOWN
        self._artist = UNKNOWN
        self._album = UNKNOWN
        self.duration: float = 0.0
        self.position: float = 0.0
        self.album_art: Optional[str] = None

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, value: Optional[str]):
        self._title = value if value else UNABLE_TO_RETRIEVE

    @property
    def artist(self) -> str:
        return self._artist

    @artist.setter
    def artist(self, value: Optional[str]):
        self._artist = value if value else UNKNOWN_ARTIST

    @property
    def album(self) -> str:
        return self._album

    @album.setter
    def album(self, value: Optional[str]):
        self._album = value if value else UNKNOWN_ALBUM

    @property
    def has_track_info(self) -> bool:
        return self._title not in (UNKNOWN, UNABLE_TO_RETRIEVE)

    def reset(self):
        self.title = ""
        self.artist = ""
        self.album = ""
        self.duration = 0.0
        self.position = 0.0
        self.album_art = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration,
            "position": self.position,
            "album_art": self.album_art,
            "has_track_info": self.has_track_info,
        }

    def __repr__(self):
        return f"TrackInfo(title={self.title!r}, artist={self.artist!r}, album={self.album!r})"
