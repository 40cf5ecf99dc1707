import json
import sys

MAX_ROW_DROP_PCT = 2.0


def load(p: str) -> dict:
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)


def _pct(old: int, new: int) -> float:
    return (new - old) / old * 100 if old else 0.0


def report_delta(old: dict, new: dict) -> tuple[list[str], float]:
    """Changes between two entries of a manifest's `tables` block."""
    changes = []
    pct = _pct(old["rows"], new["rows"])
    if new["rows"] != old["rows"]:
        changes.append(f"rows {old['rows']}→{new['rows']} ({pct:+.2f}%)")
    if "bytes" in old and "bytes" in new and new["bytes"] != old["bytes"]:
        changes.append(f"bytes {old['bytes']:,}→{new['bytes']:,}")
    if new["sha256"] != old["sha256"]:
        changes.append("hash changed")
    return changes, pct


def compare_manifests(old: dict, new: dict, max_row_drop_pct: float = MAX_ROW_DROP_PCT):
    """
    Diff two `run_eda` manifests. Returns (ok, report_lines).

    Fails when a report, or the cleaned row count, shrinks by more than
    `max_row_drop_pct` percent. Hash-only changes are reported, not failed.
    """
    old_reports = old.get("tables", {})
    new_reports = new.get("tables", {})
    lines = [f"[info] reports (old={len(old_reports)}, new={len(new_reports)})"]

    added = sorted(set(new_reports) - set(old_reports))
    removed = sorted(set(old_reports) - set(new_reports))
    if added:
        lines.append(f"[warn] added reports: {added}")
    if removed:
        lines.append(f"[warn] removed reports: {removed}")

    regressions = []

    # Input side: the batch should keep roughly as many records as before
    old_rows, new_rows = old.get("rows", {}), new.get("rows", {})
    for key in ("source", "cleaned", "dropped"):
        if key in old_rows and key in new_rows and old_rows[key] != new_rows[key]:
            lines.append(f"[delta] input {key}: {old_rows[key]:,}→{new_rows[key]:,}")
    if "cleaned" in old_rows and "cleaned" in new_rows:
        if _pct(old_rows["cleaned"], new_rows["cleaned"]) < -max_row_drop_pct:
            regressions.append("cleaned rows")

    for name in sorted(set(old_reports) & set(new_reports)):
        changes, pct = report_delta(old_reports[name], new_reports[name])
        if changes:
            lines.append(f"[delta] {name}: " + ", ".join(changes))
        if pct < -max_row_drop_pct:
            regressions.append(name)

    if regressions:
        lines.append(f"[fail] significant regressions detected: {regressions}")
        return False, lines
    lines.append("[ok] manifest comparison passed")
    return True, lines


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 2:
        print("Usage: python scripts/verify_manifest.py <old_manifest.json> <new_manifest.json>")
        return 2

    ok, lines = compare_manifests(load(argv[0]), load(argv[1]))
    print("\n".join(lines))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
