import sqlite3

import pandas as pd
import pytest

from clean_spotify_youtube import clean_tracks
from spotify_schema import ALIASES
from stage_to_sqlite import stage_spotify

BASE_ROW = {
    "Artist": "Gorillaz",
    "Track": "Feel Good Inc.",
    "Album": "Demon Days",
    "Album_type": "album",
    "Danceability": "0.818",
    "Energy": "0.705",
    "Loudness": "-6.679",
    "Speechiness": "0.177",
    "Acousticness": "0.00836",
    "Instrumentalness": "0.00233",
    "Liveness": "0.613",
    "Valence": "0.772",
    "Tempo": "138.559",
    "Duration_min": "3.7113",
    "Title": "Gorillaz - Feel Good Inc. (Official Video)",
    "Channel": "Gorillaz",
    "Views": "693555221",
    "Likes": "6220896",
    "Comments": "169907",
    "Licensed": "True",
    "official_video": "True",
    "Stream": "1040234854",
    "EnergyLiveness": "1.15",
    "most_playedon": "Spotify",
}


def make_row(**overrides) -> dict:
    row = dict(BASE_ROW)
    for k, v in overrides.items():
        key = next((c for c in row if ALIASES.get(c.lower(), c.lower()) == k.lower()), k)
        row[key] = v
    return row


def make_frame(rows) -> pd.DataFrame:
    return pd.DataFrame([make_row(**r) for r in rows])


@pytest.fixture
def con():
    c = sqlite3.connect(":memory:")
    yield c
    c.close()


@pytest.fixture
def staged(con):
    """Stage cleaned rows built from (artist, track, album, views, energy) tuples."""
    def _stage(rows):
        frame = make_frame([
            {"artist": a, "track": t, "album": al, "views": str(v), "energy": str(e)}
            for a, t, al, v, e in rows
        ])
        stage_spotify(con, clean_tracks(frame))
        return con

    return _stage
