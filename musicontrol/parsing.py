# Text parsers for player command output.
#
# None of this is a real structured format:
# - dbus-send --print-reply dumps (MPRIS Metadata / Position / Volume replies)
# - native window titles like "Song - Artist - Spotify"
# - AppleScript results joined with ":::"
#
# Rule of thumb: never raise. A missing key leaves the field alone, a broken
# value becomes "Unknown", a number that won't parse is ignored.

import logging
import os
import re
from typing import Iterable, Optional
from urllib.parse import unquote, urlparse

from .track import UNKNOWN, TrackInfo

log = logging.getLogger(__name__)

TITLE_KEY = "xesam:title"
ARTIST_KEY = "xesam:artist"
ALBUM_KEY = "xesam:album"
URL_KEY = "xesam:url"
LENGTH_KEY = "mpris:length"
ART_KEY = "mpris:artUrl"

STRING_TAG = "string"
ARRAY_TAG = "array ["
INT64_TAG = "int64"
DOUBLE_TAG = "double"

MICROSECONDS = 1_000_000

TITLE_SEPARATOR = " - "
APPLESCRIPT_SEPARATOR = ":::"

# ---------- helpers ----------

def _line_at(text: str, index: int) -> str:
    """Return text from index up to (not including) the next newline."""
    end = text.find("\n", index)
    return text[index:] if end == -1 else text[index:end]


def _to_float(raw: str) -> Optional[float]:
    try:
        return float(raw.strip())
    except (AttributeError, ValueError):
        return None


def find_key(text: str, key: str) -> int:
    """
    Index of *key* in *text*, or -1.

    The match must not run on into a longer key, so "xesam:album" never
    matches inside "xesam:albumArtist".
    """
    m = re.search(re.escape(key) + r"(?!\w)", text)
    return m.start() if m else -1


def extract_string_value(line: str) -> str:
    """
    Pull the value out of a line like:  variant   string ":Phoenix"

    Strips whitespace, then one surrounding pair of quotes, then one leading
    colon. Colons anywhere else are part of the value.
    """
    try:
        idx = line.find(STRING_TAG)
        if idx == -1:
            return UNKNOWN

        value = line[idx + len(STRING_TAG):].strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        if value.startswith(":"):
            value = value[1:]

        if not value.strip():
            return UNKNOWN
        return value
    except Exception as e:
        log.warning("Could not extract string value from %r: %s", line, e)
        return UNKNOWN


def _int64_after(text: str, start: int = 0) -> Optional[int]:
    tag = text.find(INT64_TAG, start)
    if tag == -1:
        return None
    raw = _line_at(text, tag + len(INT64_TAG)).strip()
    try:
        return int(raw)
    except ValueError:
        log.debug("Ignoring unparseable int64 value %r", raw)
        return None

# ---------- MPRIS property dumps ----------

def string_field(text: str, key: str) -> Optional[str]:
    """
    Scalar string value for *key*: the line holding the next "string" tag
    after the key. None when the key is absent.
    """
    idx = find_key(text, key)
    if idx == -1:
        return None
    tag = text.find(STRING_TAG, idx + len(key))
    if tag == -1:
        log.warning("No string value after %s", key)
        return UNKNOWN
    return extract_string_value(_line_at(text, tag))


def array_field(text: str, key: str) -> Optional[str]:
    """
    First element of an array value for *key*: the line after "array [".
    None when the key is absent.
    """
    idx = find_key(text, key)
    if idx == -1:
        return None
    marker = text.find(ARRAY_TAG, idx + len(key))
    if marker == -1:
        log.warning("No array value after %s", key)
        return UNKNOWN
    newline = text.find("\n", marker)
    if newline == -1:
        log.warning("Array value for %s has no elements", key)
        return UNKNOWN
    return extract_string_value(_line_at(text, newline + 1))


def microseconds_field(text: str, key: str) -> Optional[float]:
    """Seconds for an int64 microsecond value after *key* (None if absent or bad)."""
    idx = find_key(text, key)
    if idx == -1:
        return None
    value = _int64_after(text, idx + len(key))
    if value is None:
        return None
    return value / MICROSECONDS


def parse_position(text: str) -> Optional[float]:
    """Seconds from a Position reply ("variant int64 12345678")."""
    if not text:
        return None
    value = _int64_after(text)
    if value is None:
        return None
    return value / MICROSECONDS


def parse_double(text: str) -> Optional[float]:
    """Value after the first "double" tag (Volume replies)."""
    if not text:
        return None
    tag = text.find(DOUBLE_TAG)
    if tag == -1:
        return None
    parts = _line_at(text, tag + len(DOUBLE_TAG)).split()
    if not parts:
        return None
    return _to_float(parts[0])


def parse_playback_status(text: str) -> bool:
    """True iff the reply mentions "Playing" (case-sensitive)."""
    return bool(text) and "Playing" in text


def filename_title(url: str) -> str:
    """'file:///music/My%20Song.mp3' -> 'My Song'"""
    path = unquote(urlparse(url).path or url)
    return os.path.splitext(os.path.basename(path))[0]


def parse_property_dump(text: str, track: TrackInfo, url_title_fallback: bool = False) -> None:
    """
    Apply an MPRIS Metadata dump to *track*.

    Fields whose key is missing keep whatever they held before.
    With url_title_fallback, a dump with no title but a xesam:url uses the
    file name as the title (VLC does this for untagged files).
    """
    if not text:
        return

    title = string_field(text, TITLE_KEY)
    if title is not None:
        track.title = title
    elif url_title_fallback:
        url = string_field(text, URL_KEY)
        if url and url != UNKNOWN:
            name = filename_title(url)
            if name:
                track.title = name

    artist = array_field(text, ARTIST_KEY)
    if artist is not None:
        track.artist = artist

    album = string_field(text, ALBUM_KEY)
    if album is not None:
        track.album = album

    duration = microseconds_field(text, LENGTH_KEY)
    if duration is not None:
        track.duration = duration

    art = string_field(text, ART_KEY)
    if art is not None and art != UNKNOWN:
        track.album_art = art

# ---------- window titles ----------

def parse_window_title(title: Optional[str], app_name: str, track: TrackInfo,
                       idle_titles: Iterable[str] = ()) -> bool:
    """
    Parse "<title> - <artist> [- <album>] - <app_name>" into *track*.

    Returns True when the title describes a track (the player is playing).
    A bare app name (or one of idle_titles) means nothing is playing, and
    the track is left as it was.
    """
    title = (title or "").strip()
    if not title or title == app_name or title in idle_titles:
        return False

    suffix = TITLE_SEPARATOR + app_name
    if title.endswith(suffix):
        remainder = title[:-len(suffix)]
    elif title.endswith(app_name):
        remainder = title[:-len(app_name)].rstrip(" -")
    else:
        remainder = title

    remainder = remainder.strip()
    if not remainder:
        return False

    parts = remainder.split(TITLE_SEPARATOR)
    track.title = parts[0]
    if len(parts) >= 2:
        track.artist = parts[1]
        track.album = parts[2] if len(parts) > 2 else UNKNOWN
    else:
        track.artist = UNKNOWN
        track.album = UNKNOWN
    return True

# ---------- AppleScript ----------

def parse_applescript_track(text: str, track: TrackInfo, duration_scale: float = 1.0) -> bool:
    """
    Parse "name:::artist:::album:::duration:::position" into *track*.

    duration_scale divides the reported duration (Spotify reports
    milliseconds, Music reports seconds). Returns False, leaving the track
    alone, when the player returned nothing (it only reports while playing).
    """
    if not text:
        return False
    parts = text.split(APPLESCRIPT_SEPARATOR)
    if len(parts) < 5:
        log.warning("Unexpected AppleScript track reply: %r", text)
        return False

    track.title = parts[0]
    track.artist = parts[1]
    track.album = parts[2]

    duration = _to_float(parts[3])
    if duration is not None:
        track.duration = duration / duration_scale
    position = _to_float(parts[4])
    if position is not None:
        track.position = position
    return True

# ---------- misc ----------

def parse_clock_time(text: str) -> Optional[float]:
    """
    Seconds from "245", "4:05" or "1:02:03" (rhythmbox-client output).
    """
    text = (text or "").strip()
    if not text:
        return None
    if ":" not in text:
        return _to_float(text)
    total = 0.0
    for part in text.split(":"):
        value = _to_float(part)
        if value is None:
            return None
        total = total * 60 + value
    return total
