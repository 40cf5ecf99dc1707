import sqlite3

import pytest

import clean_spotify_youtube
import stage_to_sqlite
from clean_spotify_youtube import clean_tracks
from spotify_schema import COLUMNS
from stage_to_sqlite import connect, create_spotify_table, quality_checks, stage_spotify
from conftest import make_frame


class TestStageSpotify:
    def test_table_columns(self, con) -> None:
        create_spotify_table(con)
        cols = [r[1] for r in con.execute("PRAGMA table_info(spotify);").fetchall()]
        assert cols == COLUMNS

    def test_loads_rows(self, con) -> None:
        n = stage_spotify(con, clean_tracks(make_frame([{"track": "a"}, {"track": "b"}])))
        assert n == 2

    def test_restage_replaces(self, con) -> None:
        stage_spotify(con, clean_tracks(make_frame([{"track": "a"}, {"track": "b"}])))
        n = stage_spotify(con, clean_tracks(make_frame([{"track": "c"}])))
        assert n == 1

    def test_duration_constraint(self, con) -> None:
        stage_spotify(con, clean_tracks(make_frame([{}])))
        with pytest.raises(sqlite3.IntegrityError):
            con.execute("UPDATE spotify SET duration_min = 0")

    def test_booleans_stored_as_ints(self, con) -> None:
        stage_spotify(con, clean_tracks(make_frame([{"licensed": "false"}])))
        assert con.execute("SELECT licensed, official_video FROM spotify").fetchone() == (0, 1)


class TestQualityChecks:
    def test_counts(self, con) -> None:
        stage_spotify(con, clean_tracks(make_frame([
            {"artist": "A", "track": "t1", "album": "X"},
            {"artist": "A", "track": "t1", "album": "X"},
            {"artist": "B", "track": "u1", "album": "Y"},
        ])))
        checks = quality_checks(con)
        assert checks == {
            "rows": 3,
            "artists": 2,
            "albums": 2,
            "non_positive_duration": 0,
            "duplicate_tracks": 1,
        }


class TestScriptMains:
    def test_clean_then_stage_round_trip(self, tmp_path, monkeypatch) -> None:
        src = tmp_path / "Spotify_Youtube.csv"
        make_frame([
            {"artist": "NA", "track": "None", "licensed": "False"},
            {"artist": "B", "track": "t2", "views": "", "title": ""},
            {"artist": "C", "track": "t3"},
            {"artist": "D", "track": "zero", "duration_min": "0"},
        ]).to_csv(src, index=False)
        clean_csv = tmp_path / "interim" / "spotify_youtube_clean.csv"
        db = tmp_path / "processed" / "spotify_eda.sqlite"
        monkeypatch.setattr(clean_spotify_youtube, "OUT", clean_csv)
        monkeypatch.setattr(stage_to_sqlite, "DB", db)

        clean_spotify_youtube.main([str(src)])
        assert clean_csv.exists()
        stage_to_sqlite.main([str(clean_csv)])

        with sqlite3.connect(db) as c:
            rows = c.execute(
                "SELECT artist, track, licensed, views IS NULL, title IS NULL FROM spotify ORDER BY artist"
            ).fetchall()
        assert rows == [
            ("B", "t2", 1, 1, 1),
            ("C", "t3", 1, 0, 0),
            ("NA", "None", 0, 0, 0),
        ]

    def test_stage_main_missing_csv(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            stage_to_sqlite.main([str(tmp_path / "missing.csv")])


class TestConnect:
    def test_creates_parent_dirs(self, tmp_path) -> None:
        db = tmp_path / "nested" / "eda.sqlite"
        c = connect(db)
        try:
            assert db.parent.is_dir()
        finally:
            c.close()

    def test_memory(self) -> None:
        c = connect(":memory:")
        try:
            assert c.execute("SELECT 1").fetchone() == (1,)
        finally:
            c.close()
