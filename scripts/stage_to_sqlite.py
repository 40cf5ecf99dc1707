# scripts/stage_to_sqlite.py
import sqlite3
import sys
from pathlib import Path

import pandas as pd

from clean_spotify_youtube import OUT as CLEAN_CSV
from clean_spotify_youtube import clean_tracks
from spotify_schema import COLUMNS, DDL, TABLE

DB = Path("data/processed/spotify_eda.sqlite")


def connect(db_path=DB) -> sqlite3.Connection:
    if str(db_path) == ":memory:":
        return sqlite3.connect(":memory:")
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    con = sqlite3.connect(db_path)
    con.execute("PRAGMA journal_mode=WAL;")
    con.execute("PRAGMA synchronous=NORMAL;")
    return con


def create_spotify_table(con: sqlite3.Connection) -> None:
    con.executescript(DDL)


def stage_spotify(con: sqlite3.Connection, df: pd.DataFrame) -> int:
    """Recreate the `spotify` table and load the cleaned rows into it."""
    create_spotify_table(con)
    # append keeps the constrained DDL; replace would let pandas redefine it
    df[COLUMNS].to_sql(TABLE, con, if_exists="append", index=False)
    con.commit()
    n = con.execute(f"SELECT COUNT(*) FROM {TABLE}").fetchone()[0]
    print(f"[ok] loaded {TABLE} ({n:,} rows)")
    return n


def quality_checks(con: sqlite3.Connection) -> dict:
    cur = con.cursor()
    checks = {
        "rows": cur.execute(f"SELECT COUNT(*) FROM {TABLE}").fetchone()[0],
        "artists": cur.execute(f"SELECT COUNT(DISTINCT artist) FROM {TABLE}").fetchone()[0],
        "albums": cur.execute(f"SELECT COUNT(DISTINCT album) FROM {TABLE}").fetchone()[0],
        "non_positive_duration": cur.execute(
            f"SELECT COUNT(*) FROM {TABLE} WHERE duration_min <= 0"
        ).fetchone()[0],
        "duplicate_tracks": cur.execute(f"""
            SELECT COUNT(*) FROM (
              SELECT artist, track, album, COUNT(*) c
              FROM {TABLE}
              GROUP BY artist, track, album
              HAVING c > 1
            )
        """).fetchone()[0],
    }
    print(f"[check] rows: {checks['rows']:,} | artists: {checks['artists']:,} | albums: {checks['albums']:,}")
    print(f"[check] duration_min <= 0: {checks['non_positive_duration']}")
    print(f"[check] duplicate (artist, track, album) groups: {checks['duplicate_tracks']:,}")
    return checks


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    src = Path(argv[0]) if argv else CLEAN_CSV
    if not src.exists():
        raise FileNotFoundError(f"Missing {src}. Run clean_spotify_youtube.py first.")

    df = clean_tracks(pd.read_csv(src, dtype=str, keep_default_na=False, na_values=[""], low_memory=False))
    con = connect(DB)
    try:
        stage_spotify(con, df)
        quality_checks(con)
    finally:
        con.close()
    print(f"Warehouse ready -> {DB}")


if __name__ == "__main__":
    main()
