# scripts/eda_queries.py
import sqlite3

import pandas as pd

from spotify_schema import TABLE

TOP_N = 3

# Ties share a rank (DENSE_RANK), so an artist can return more than TOP_N rows.
# NULL views (no video) count as zero.
TOP_TRACKS_PER_ARTIST = f"""
WITH track_views AS (
  SELECT
    artist,
    track,
    COALESCE(SUM(views), 0) AS total_views
  FROM {TABLE}
  GROUP BY artist, track
),
ranked AS (
  SELECT
    artist,
    track,
    total_views,
    DENSE_RANK() OVER (
      PARTITION BY artist
      ORDER BY total_views DESC
    ) AS rank
  FROM track_views
)
SELECT artist, track, total_views, rank
FROM ranked
WHERE rank <= ?
ORDER BY artist ASC, rank ASC, track ASC;
"""

ENERGY_DIVERSITY_PER_ALBUM = f"""
SELECT
  album,
  MAX(energy) - MIN(energy) AS energy_diff
FROM {TABLE}
GROUP BY album
ORDER BY energy_diff DESC, album ASC;
"""


def top_tracks_per_artist(con: sqlite3.Connection, top_n: int = TOP_N) -> pd.DataFrame:
    """Top `top_n` dense-ranked tracks per artist by total views."""
    if top_n < 1:
        raise ValueError(f"top_n must be >= 1, got {top_n}")
    df = pd.read_sql_query(TOP_TRACKS_PER_ARTIST, con, params=(top_n,))
    df["rank"] = df["rank"].astype("int64")
    return df


def energy_diversity_per_album(con: sqlite3.Connection) -> pd.DataFrame:
    """Spread of `energy` (max - min) per album, widest first."""
    return pd.read_sql_query(ENERGY_DIVERSITY_PER_ALBUM, con)
