# scripts/spotify_schema.py
"""
Column contract for the `spotify` table and the errors raised while loading it.
"""

TABLE = "spotify"

TEXT_REQUIRED = ["artist", "track", "album"]
TEXT_OPTIONAL = ["title", "channel"]

# Audio features plus duration; blanks here are not allowed
NUMERIC_REQUIRED = [
    "danceability", "energy", "loudness", "speechiness", "acousticness",
    "instrumentalness", "liveness", "valence", "tempo", "duration_min",
]
# Engagement counters; NULL when the track has no video / stream data
COUNTERS = ["views", "likes", "comments", "stream"]
BOOLEANS = ["licensed", "official_video"]

ENUMS = {
    "album_type": {"album", "single"},
    "most_played_on": {"Spotify", "Youtube"},
}

# Final column order (24 columns)
COLUMNS = [
    "artist", "track", "album", "album_type",
    "danceability", "energy", "loudness", "speechiness", "acousticness",
    "instrumentalness", "liveness", "valence", "tempo", "duration_min",
    "title", "channel", "views", "likes", "comments",
    "licensed", "official_video", "stream", "energy_liveness", "most_played_on",
]

# Header spellings seen across dataset versions
ALIASES = {
    "energyliveness": "energy_liveness",
    "most_playedon": "most_played_on",
    "streams": "stream",
}

TRUE_VALUES = {"true", "1", "yes", "1.0"}
FALSE_VALUES = {"false", "0", "no", "0.0"}

DDL = f"""
DROP TABLE IF EXISTS {TABLE};

CREATE TABLE {TABLE} (
  artist            TEXT NOT NULL,
  track             TEXT NOT NULL,
  album             TEXT NOT NULL,
  album_type        TEXT NOT NULL CHECK (album_type IN ('album', 'single')),
  danceability      REAL NOT NULL,
  energy            REAL NOT NULL,
  loudness          REAL NOT NULL,
  speechiness       REAL NOT NULL,
  acousticness      REAL NOT NULL,
  instrumentalness  REAL NOT NULL,
  liveness          REAL NOT NULL,
  valence           REAL NOT NULL,
  tempo             REAL NOT NULL,
  duration_min      REAL NOT NULL CHECK (duration_min > 0),
  title             TEXT,
  channel           TEXT,
  views             REAL CHECK (views IS NULL OR views >= 0),
  likes             REAL CHECK (likes IS NULL OR likes >= 0),
  comments          REAL CHECK (comments IS NULL OR comments >= 0),
  licensed          INTEGER NOT NULL CHECK (licensed IN (0, 1)),
  official_video    INTEGER NOT NULL CHECK (official_video IN (0, 1)),
  stream            REAL CHECK (stream IS NULL OR stream >= 0),
  energy_liveness   REAL,
  most_played_on    TEXT NOT NULL CHECK (most_played_on IN ('Spotify', 'Youtube'))
);

CREATE INDEX IF NOT EXISTS ix_{TABLE}_artist ON {TABLE}(artist);
CREATE INDEX IF NOT EXISTS ix_{TABLE}_album ON {TABLE}(album);
"""


class LoadError(Exception):
    """Source is unreadable or its columns don't match the contract."""


class ValidationError(ValueError):
    """A required numeric field could not be used."""


class ParseError(ValidationError):
    """A numeric field holds a value that doesn't parse as a number."""


class EmptyInputError(Exception):
    """Nothing left after cleaning."""
