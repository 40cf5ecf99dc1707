# scripts/run_eda.py
from pathlib import Path
import hashlib
import json
import sys
from datetime import datetime, timezone

from clean_spotify_youtube import SRC, clean_tracks, read_source
from eda_queries import TOP_N, energy_diversity_per_album, top_tracks_per_artist
from spotify_schema import EmptyInputError, LoadError, ValidationError
from stage_to_sqlite import DB, connect, quality_checks, stage_spotify

OUT_DIR = Path("data/reports")
MANIFEST_NAME = "eda_manifest.json"


def sha256_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def run(src=SRC, db_path=DB, out_dir=OUT_DIR, on_error: str = "drop", top_n: int = TOP_N) -> dict:
    """
    Load, clean and stage the source CSV, then write both reports.

    The manifest is written last, so a failed run never leaves one that
    points at partial reports. Returns the manifest dict.
    """
    src = Path(src)
    out_dir = Path(out_dir)
    print(f"[info] source: {src}")

    raw = read_source(src)
    clean = clean_tracks(raw, on_error=on_error)

    con = connect(db_path)
    try:
        stage_spotify(con, clean)
        checks = quality_checks(con)
        reports = {
            "top_tracks_per_artist": top_tracks_per_artist(con, top_n=top_n),
            "energy_diversity_per_album": energy_diversity_per_album(con),
        }
    finally:
        con.close()

    out_dir.mkdir(parents=True, exist_ok=True)
    manifest = {
        "source_csv": str(src),
        "exported_at": datetime.now(tz=timezone.utc).isoformat(),
        "rows": {
            "source": int(len(raw)),
            "cleaned": int(len(clean)),
            "dropped": int(len(raw) - len(clean)),
        },
        "checks": {k: int(v) for k, v in checks.items()},
        "top_n": top_n,
        "tables": {},
    }

    for name, df in reports.items():
        out = out_dir / f"{name}.csv"
        df.to_csv(out, index=False)
        manifest["tables"][name] = {
            "csv_path": str(out),
            "rows": int(len(df)),
            "bytes": int(out.stat().st_size),
            "sha256": sha256_file(out),
        }
        print(f"\n[ok] {name}: {len(df):,} rows -> {out}")
        print(df.to_string(index=False))

    manifest_path = out_dir / MANIFEST_NAME
    with manifest_path.open("w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)
    print(f"\n[ok] wrote manifest -> {manifest_path}")
    return manifest


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    src = Path(argv[0]) if argv else SRC
    try:
        run(src)
    except (LoadError, ValidationError, EmptyInputError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
