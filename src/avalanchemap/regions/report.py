"""Command line report of a region summary dataset.

Loads region_summary.json and prints the normalization maxima, the
super-region totals and, for a specific filter value, the resolved style of
every micro-region.

Usage:
    python -m avalanchemap.regions.report                         # Maxima + totals
    python -m avalanchemap.regions.report --value 3               # + danger level 3 styles
    python -m avalanchemap.regions.report --category Lawinenprobleme --value Altschnee
    python -m avalanchemap.regions.report --source https://example.org/region_summary.json
"""

import argparse
import logging
import sys
from typing import Optional

import pandas as pd

from avalanchemap.regions.aggregation import totals_to_dataframe
from avalanchemap.regions.fetch import DEFAULT_SUMMARY_SOURCE, load_region_summaries
from avalanchemap.regions.models import ALL_VALUE, Filter, FilterCategory
from avalanchemap.regions.session import DatasetSnapshot, MapSession
from avalanchemap.regions.styles import resolve_style
from avalanchemap.regions.validity import normalize_today

logger = logging.getLogger(__name__)


def region_styles_frame(
    snapshot: DatasetSnapshot,
    region_filter: Filter,
    today: Optional[str] = None,
    scale: str = "choropleth",
) -> pd.DataFrame:
    """Resolve the style of every region in a snapshot.

    Each region is styled as a current micro-region polygon.

    Returns:
        DataFrame with columns code, name, kind, fill_color, label
    """
    rows = []
    for summary in snapshot.store.values():
        style = resolve_style(
            {"id": summary.code, "layer": "micro-regions"},
            region_filter,
            snapshot.store,
            snapshot.maxima,
            today,
            scale,
        )
        rows.append({
            "code": summary.code,
            "name": summary.name,
            "kind": style.kind.value,
            "fill_color": style.fill_color,
            "label": style.label,
        })
    return pd.DataFrame(rows, columns=["code", "name", "kind", "fill_color", "label"])


def print_report(
    snapshot: DatasetSnapshot,
    region_filter: Filter,
    today: Optional[str] = None,
) -> None:
    """Print a dataset report in human-readable format."""
    print()
    print("=" * 60)
    print("Avalanche Region Summary Report")
    print("=" * 60)
    print(f"Regions: {len(snapshot.store)}")
    print(f"Filter: {region_filter.category.value} = {region_filter.value}")
    print()
    print("Maxima:")
    print("-" * 60)
    for key in sorted(snapshot.maxima):
        print(f"  {key:<25} {snapshot.maxima[key]}")

    print()
    print("Super-regions:")
    print("-" * 60)
    print(totals_to_dataframe(snapshot.super_regions).to_string(index=False))

    if not region_filter.is_aggregate:
        print()
        print(f"Region styles ({normalize_today(today)}):")
        print("-" * 60)
        print(region_styles_frame(snapshot, region_filter, today).to_string(index=False))

    print("=" * 60)


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for the dataset report."""
    parser = argparse.ArgumentParser(
        description="Summarize an avalanche region summary dataset",
        epilog="""
Examples:
  python -m avalanchemap.regions.report
  python -m avalanchemap.regions.report --value 3
  python -m avalanchemap.regions.report --category Lawinenprobleme --value Altschnee
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--source",
        default=None,
        help=f"Dataset path or URL (default: {DEFAULT_SUMMARY_SOURCE})",
    )
    parser.add_argument(
        "--category",
        choices=[c.value for c in FilterCategory],
        default=FilterCategory.DANGER_LEVEL.value,
        help="Metric family",
    )
    parser.add_argument(
        "--value",
        default=ALL_VALUE,
        help="Danger level, avalanche problem label or 'alle'",
    )
    parser.add_argument(
        "--date",
        default=None,
        help="Reference date YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    session = MapSession()
    if not session.refresh(lambda: load_region_summaries(args.source)):
        logger.error(f"Could not load dataset: {session.refresh_state.last_error}")
        return 1

    print_report(session.snapshot, Filter(args.category, args.value), args.date)
    return 0


if __name__ == "__main__":
    sys.exit(main())
