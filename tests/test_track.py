from musicontrol.track import (
    UNABLE_TO_RETRIEVE,
    UNKNOWN,
    UNKNOWN_ALBUM,
    UNKNOWN_ARTIST,
    TrackInfo,
)

def test_new_track_is_unknown():
    t = TrackInfo()
    assert (t.title, t.artist, t.album) == (UNKNOWN, UNKNOWN, UNKNOWN)
    assert t.duration == 0.0
    assert t.position == 0.0
    assert t.album_art is None
    assert t.has_track_info is False

def test_empty_values_store_sentinels():
    t = TrackInfo()
    t.title = ""
    t.artist = ""
    t.album = None
    assert t.title == UNABLE_TO_RETRIEVE
    assert t.artist == UNKNOWN_ARTIST
    assert t.album == UNKNOWN_ALBUM
    assert t.has_track_info is False

def test_real_title_counts_as_track_info():
    t = TrackInfo()
    t.title = "Phoenix"
    assert t.has_track_info is True
    d = t.to_dict()
    assert d["title"] == "Phoenix"
    assert d["has_track_info"] is True

def test_reset_clears_everything():
    t = TrackInfo()
    t.title = "Phoenix"
    t.duration = 245.0
    t.position = 12.0
    t.album_art = "https://i.scdn.co/image/abc"
    t.reset()
    assert t.has_track_info is False
    assert t.duration == 0.0
    assert t.position == 0.0
    assert t.album_art is None
