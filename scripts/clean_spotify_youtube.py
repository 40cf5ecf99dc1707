# scripts/clean_spotify_youtube.py
from pathlib import Path
import sys

import pandas as pd

from spotify_schema import (
    ALIASES, BOOLEANS, COLUMNS, COUNTERS, ENUMS, FALSE_VALUES, NUMERIC_REQUIRED,
    TEXT_OPTIONAL, TEXT_REQUIRED, TRUE_VALUES,
    EmptyInputError, LoadError, ParseError, ValidationError,
)

SRC = Path("data/raw/spotify_youtube/Spotify_Youtube.csv")
OUT = Path("data/interim/spotify_youtube_clean.csv")

ON_ERROR = ("drop", "raise")

# Columns we can rebuild from others when the export doesn't ship them
DERIVABLE = {
    "duration_min": "duration_ms",
    "energy_liveness": None,
    "most_played_on": None,
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lstrip("\ufeff").lower().replace(" ", "_") for c in df.columns]
    return df.rename(columns={k: v for k, v in ALIASES.items() if v not in df.columns})


def missing_columns(df: pd.DataFrame) -> list[str]:
    """Required columns absent from `df` that can't be derived either."""
    required = TEXT_REQUIRED + ["album_type"] + NUMERIC_REQUIRED + COUNTERS + BOOLEANS
    required += ["energy_liveness", "most_played_on"]
    missing = []
    for c in required:
        if c in df.columns:
            continue
        src = DERIVABLE.get(c, "")
        if c in DERIVABLE and (src is None or src in df.columns):
            continue
        missing.append(c)
    return missing


def read_source(path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise LoadError(f"Source CSV not found: {path}")
    try:
        # Everything as text so malformed numbers can be told apart from blanks.
        # Only empty cells are NA; names like "NA" or "None" are real text.
        df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""], low_memory=False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise LoadError(f"Could not read {path}: {e}") from e

    df = normalize_columns(df)
    missing = missing_columns(df)
    if missing:
        raise LoadError(f"Schema mismatch in {path}: missing columns {missing}")
    return df


def _is_blank(raw: pd.Series) -> pd.Series:
    return raw.isna() | raw.astype(str).str.strip().eq("")


def _numeric(df: pd.DataFrame, col: str, required: bool, on_error: str) -> tuple[pd.Series, pd.Series]:
    """Parse one numeric column. Returns (values, bad_row_mask)."""
    raw = df[col]
    num = pd.to_numeric(raw, errors="coerce")
    blank = _is_blank(raw)

    unparseable = ~blank & (num.isna() | num.abs().eq(float("inf")))
    if required:
        unparseable |= blank
    n = int(unparseable.sum())
    if n and on_error == "raise":
        raise ParseError(f"Column '{col}': {n:,} value(s) are blank, non-numeric or infinite")

    negative = num.lt(0) if col in COUNTERS else pd.Series(False, index=df.index)
    n_neg = int(negative.sum())
    if n_neg and on_error == "raise":
        raise ValidationError(f"Column '{col}': {n_neg:,} negative counter value(s)")

    bad = unparseable | negative
    if bad.any():
        print(f"[warn] {col}: dropping {int(bad.sum()):,} row(s) with invalid numbers")
    return num, bad


def _boolean(raw: pd.Series) -> tuple[pd.Series, pd.Series]:
    key = raw.map(lambda v: "" if pd.isna(v) else str(v).strip().lower())
    ok = key.isin(TRUE_VALUES | FALSE_VALUES)
    return key.isin(TRUE_VALUES).astype("int8"), ok


def clean_tracks(df: pd.DataFrame, on_error: str = "drop") -> pd.DataFrame:
    """
    Type and filter raw track rows into the 24-column `spotify` layout.

    Malformed numerics follow `on_error` ("drop" the row or "raise").
    Malformed booleans/enums, blank keys and non-positive durations are
    always dropped.
    """
    if on_error not in ON_ERROR:
        raise ValueError(f"on_error must be one of {ON_ERROR}, got {on_error!r}")

    df = normalize_columns(df).reset_index(drop=True)
    missing = missing_columns(df)
    if missing:
        raise LoadError(f"Schema mismatch: missing columns {missing}")

    n_in = len(df)
    out = pd.DataFrame(index=df.index)
    keep = pd.Series(True, index=df.index)
    bad = pd.Series(False, index=df.index)

    for c in TEXT_REQUIRED:
        s = df[c].fillna("").astype(str).str.strip()
        out[c] = s
        keep &= s.ne("")
    for c in TEXT_OPTIONAL:
        out[c] = df[c].astype("string") if c in df.columns else pd.Series(pd.NA, index=df.index, dtype="string")

    if "duration_min" not in df.columns:
        df["duration_min"] = pd.to_numeric(df["duration_ms"], errors="coerce") / 60000

    for c in NUMERIC_REQUIRED:
        out[c], b = _numeric(df, c, required=True, on_error=on_error)
        bad |= b
    for c in COUNTERS:
        out[c], b = _numeric(df, c, required=False, on_error=on_error)
        bad |= b

    if "energy_liveness" in df.columns:
        out["energy_liveness"], b = _numeric(df, "energy_liveness", required=False, on_error=on_error)
        bad |= b
    else:
        out["energy_liveness"] = (out["energy"] / out["liveness"]).where(out["liveness"].ne(0))

    for c in BOOLEANS:
        out[c], ok = _boolean(df[c])
        keep &= ok

    album_type = df["album_type"].fillna("").astype(str).str.strip().str.lower()
    out["album_type"] = album_type
    keep &= album_type.isin(ENUMS["album_type"])

    if "most_played_on" in df.columns:
        canon = {v.lower(): v for v in ENUMS["most_played_on"]}
        played = df["most_played_on"].fillna("").astype(str).str.strip().str.lower().map(canon)
        out["most_played_on"] = played
        keep &= played.notna()
    else:
        spotify_wins = out["stream"].fillna(0) > out["views"].fillna(0)
        out["most_played_on"] = spotify_wins.map({True: "Spotify", False: "Youtube"})

    malformed = int((~keep & ~bad).sum())
    if malformed:
        print(f"[warn] dropping {malformed:,} row(s) with blank keys or malformed boolean/categorical fields")

    # Documented drop rule, not an error
    zero_duration = keep & ~bad & out["duration_min"].le(0)
    if zero_duration.any():
        print(f"[info] dropping {int(zero_duration.sum()):,} row(s) with duration_min <= 0")

    clean = out.loc[keep & ~bad & ~zero_duration, COLUMNS].reset_index(drop=True)
    if clean.empty:
        raise EmptyInputError(f"No records left after cleaning ({n_in:,} in)")

    print(f"[ok] kept {len(clean):,} of {n_in:,} rows")
    return clean


def load_clean(path, on_error: str = "drop") -> pd.DataFrame:
    return clean_tracks(read_source(path), on_error=on_error)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    src = Path(argv[0]) if argv else SRC
    clean = load_clean(src)
    OUT.parent.mkdir(parents=True, exist_ok=True)
    clean.to_csv(OUT, index=False)
    print(f"Saved {len(clean):,} rows -> {OUT}")


if __name__ == "__main__":
    main()
