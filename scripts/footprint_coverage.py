"""Report how a list of ingredient names resolves against the footprint table.

Input is either a CSV with a `name` column or a plain text file with one
ingredient per line. Prints per-tier counts and, for names that fall back to
`unknown`, the closest table keys.
"""

from __future__ import annotations

import argparse
import csv
import json
import time
from collections import Counter
from pathlib import Path

from dishcarbon.core.footprints import CarbonDatabase
from dishcarbon.core.matcher import FootprintMatcher
from dishcarbon.core.models import MatchTier
from dishcarbon.core.normalize import normalize_ingredient_name


def load_names(path: Path) -> list[str]:
    names: list[str] = []
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        if path.suffix.lower() == ".csv":
            reader = csv.DictReader(handle)
            for row in reader:
                name = (row.get("name") or "").strip()
                if name:
                    names.append(name)
        else:
            for line in handle:
                line = line.strip()
                if line and not line.startswith("#"):
                    names.append(line)
    return names


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--input", required=True)
    parser.add_argument("--table", default=None, help="YAML footprint table (packaged if omitted)")
    parser.add_argument("--suggestions", type=int, default=3)
    parser.add_argument("--output", default="data/coverage/footprint_coverage.json")
    args = parser.parse_args()

    start = time.perf_counter()
    database = CarbonDatabase.from_yaml(args.table)
    matcher = FootprintMatcher()
    names = load_names(Path(args.input))

    tiers: Counter = Counter()
    keys: Counter = Counter()
    unmatched: dict[str, list[dict]] = {}
    for name in names:
        canonical = normalize_ingredient_name(name)
        match = matcher.match(canonical, database)
        tiers[match.tier.value] += 1
        keys[match.key] += 1
        if match.tier == MatchTier.FALLBACK and name not in unmatched:
            unmatched[name] = [
                {"key": key, "score": round(score, 1)}
                for key, score in matcher.suggest(canonical, database, limit=args.suggestions)
            ]

    elapsed = time.perf_counter() - start
    total = len(names)
    matched = total - tiers[MatchTier.FALLBACK.value]
    print(f"names={total} matched={matched} elapsed_sec={elapsed:.2f}")
    for tier in MatchTier:
        print(f"  {tier.value}: {tiers[tier.value]}")

    if unmatched and args.suggestions > 0:
        print("suggested_keys:")
        for name, suggestions in unmatched.items():
            formatted = ", ".join(f"{s['key']} ({s['score']})" for s in suggestions)
            print(f"  {name}: {formatted}")

    summary = {
        "names": total,
        "coverage": round(matched / total, 4) if total else 0.0,
        "tiers": dict(tiers),
        "keys": dict(keys.most_common()),
        "unmatched": unmatched,
    }
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    print(f"summary_written={output_path}")


if __name__ == "__main__":
    main()
