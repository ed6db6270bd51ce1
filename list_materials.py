"""
Print study materials ranked by revision priority.
Run: python list_materials.py
      python list_materials.py --sort name --asc
      python list_materials.py --limit 5          # the five most urgent
"""
import argparse
import logging
import sys
from pathlib import Path

path = Path(__file__).resolve().parent
if str(path) not in sys.path:
    sys.path.insert(0, str(path))

from db import get_service, get_supabase_uncached
from src.dashboard import SORT_KEYS, TIER_LABELS, format_time_ago, priority_tier, sort_materials, tier_counts
from src.engine import days_since_revision
from src.errors import RevisionHubError


def format_table(rows, now) -> str:
    lines = [f"  {'#':>3}  {'PRIORITY':>8}  {'TIER':<20} {'REVS':>4}  {'LAST REVISED':<14} FILE"]
    for idx, m in enumerate(rows, start=1):
        tier = TIER_LABELS[priority_tier(m["priority"])]
        revised = format_time_ago(days_since_revision(m, now))
        lines.append(
            f"  {idx:3d}  {m['priority']:8.2f}  {tier:<20} {m.get('revision_count') or 0:4d}  {revised:<14} {m['filename']}"
        )
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description="List study materials ranked by revision priority.")
    parser.add_argument("--sort", choices=SORT_KEYS, default="priority", help="Column to sort by (default priority)")
    parser.add_argument("--asc", action="store_true", help="Sort ascending instead of descending")
    parser.add_argument("--limit", type=int, default=None, metavar="N", help="Only show the first N rows")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        service = get_service(get_supabase_uncached())
        ranked = service.load_ranked()
    except (ValueError, RevisionHubError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    now = service.now()
    rows = sort_materials(ranked, args.sort, descending=not args.asc, now=now)
    if args.limit is not None:
        rows = rows[: args.limit]

    stats = tier_counts(ranked)
    print()
    print("=" * 70)
    print(f"REVISION QUEUE  total={stats['total']}  high={stats['high']}  medium={stats['medium']}  low={stats['low']}")
    print("=" * 70)
    if not rows:
        print("  No materials yet. Upload a PDF from the dashboard (streamlit run app.py).")
    else:
        print(format_table(rows, now))
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
