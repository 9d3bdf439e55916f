"""Command-line interface for the page analyzer."""

import json
import sys
from pathlib import Path

from pagescope.analyzer import PageAnalyzer
from pagescope.config import AnalysisThresholds, settings
from pagescope.database import get_db_client
from pagescope.logging_config import setup_logging
from pagescope.models import ScrapedRecord
from pagescope.stats import compute_stats, filter_history


def print_record(record: ScrapedRecord):
    """Print an analysis record in a formatted way.

    Args:
        record: The analyzed page
    """
    stats = compute_stats(record)
    seo = record.seo_analysis

    print(f"\n{'=' * 60}")
    print(f"Analysis for: {record.url}")
    print(f"{'=' * 60}")
    print(f"\nTitle: {record.title or '(none)'}")
    print(f"\n📊 SEO Score: {seo.score}/100")
    print("\nChecks:")
    for name, check in seo.checks.items():
        print(f"  • {name.capitalize()}: {check.score:.0f}/100 - {check.message}")

    print("\nContent:")
    print(f"  • Words: {stats.word_count} ({stats.reading_time} min read)")
    print(f"  • Links: {stats.link_count}")
    for link_type in stats.link_types:
        print(f"      {link_type['type']}: {link_type['count']}")
    print(f"  • Images: {stats.image_count}")
    print(f"  • Headings: {stats.heading_count}")
    print(f"  • Readability: {stats.content_analysis.readability_score}")
    print(f"  • Sentiment: {record.text_metrics.sentiment.score:.3f}")

    top = stats.content_analysis.top_keywords
    if top:
        print("\nTop keywords:")
        for keyword in top:
            print(f"  • {keyword.keyword}: {keyword.count} ({keyword.density}%)")

    print("\nPerformance:")
    print(f"  • Load time: {stats.performance.load_time_ms:.0f} ms")
    print(f"  • Page size: {stats.performance.total_size_bytes} bytes")
    print(f"  • DOM nodes: {stats.performance.dom_node_count}")

    if seo.recommendations:
        print("\n💡 Recommendations:")
        for rec in seo.recommendations:
            print(f"  • {rec}")

    print(f"\n{'=' * 60}\n")


def _write_output(output: str, output_file):
    if output_file:
        with open(output_file, "w") as f:
            f.write(output)
        print(f"Results written to {output_file}")
    else:
        print(output)


def _load_thresholds(path):
    """Thresholds from a JSON file, or from PAGESCOPE_THRESHOLD_* when no file is given."""
    if path is None:
        return AnalysisThresholds.from_env()
    if not Path(path).is_file():
        print(f"Thresholds file not found: {path}")
        sys.exit(1)
    try:
        return AnalysisThresholds.from_file(path)
    except json.JSONDecodeError as e:
        print(f"Invalid thresholds file {path}: {e}")
        sys.exit(1)


def analyze_command(args):
    """Analyze a URL and print or save the result."""
    thresholds = _load_thresholds(args.thresholds) if args.thresholds else None

    with PageAnalyzer(thresholds=thresholds, save=not args.no_save) as analyzer:
        response = analyzer.analyze(args.url)

    if args.output == "json":
        _write_output(json.dumps(response.to_dict(), indent=2, default=str), args.output_file)
    elif response.success:
        print_record(response.data)
        if response.saved_to_database:
            print("Saved to database")
    else:
        print(f"\n❌ Failed to analyze {args.url}: {response.error}")

    if not response.success:
        sys.exit(1)


def thresholds_command(args):
    """Print the effective analysis thresholds or save them as a JSON file."""
    thresholds = _load_thresholds(args.thresholds)

    if args.output_file:
        thresholds.save_to_file(args.output_file)
        print(f"Thresholds written to {args.output_file}")
    else:
        print(json.dumps({"thresholds": thresholds.to_dict()}, indent=2))


def history_command(args):
    """List previously stored analyses."""
    db = get_db_client()
    if db is None:
        print("Persistence is disabled (DB_BACKEND=none)")
        sys.exit(1)

    try:
        records = filter_history(
            db.list_records(), search_term=args.search, timeframe=args.timeframe
        )
    finally:
        db.close()

    if args.output == "json":
        output = json.dumps(
            [
                {
                    "id": stored.id,
                    "url": stored.url,
                    "title": stored.title,
                    "scraped_at": stored.scraped_at,
                    "seo_score": stored.record.seo_analysis.score,
                }
                for stored in records
            ],
            indent=2,
            default=str,
        )
        print(output)
        return

    if not records:
        print("No stored analyses found")
        return

    for stored in records:
        print(f"{stored.id}  {stored.scraped_at:%Y-%m-%d %H:%M}  "
              f"{stored.record.seo_analysis.score:>3}/100  {stored.url}")
        if stored.title:
            print(f"    {stored.title}")


def delete_command(args):
    """Delete a stored analysis by id."""
    db = get_db_client()
    if db is None:
        print("Persistence is disabled (DB_BACKEND=none)")
        sys.exit(1)

    try:
        deleted = db.delete_record(args.id)
    finally:
        db.close()

    if deleted:
        print(f"Deleted {args.id}")
    else:
        print(f"No record found with id {args.id}")
        sys.exit(1)


def main(argv=None):
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="PageScope - Analyze a web page's structure, text and SEO quality"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a URL.")
    analyze_parser.add_argument("url", help="URL to analyze (https:// is assumed if omitted)")
    analyze_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    analyze_parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    analyze_parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not store the result in the database",
    )
    analyze_parser.add_argument(
        "--thresholds",
        metavar="FILE",
        help="JSON file with scoring thresholds (default: PAGESCOPE_THRESHOLD_* variables)",
    )
    analyze_parser.set_defaults(func=analyze_command)

    history_parser = subparsers.add_parser("history", help="List stored analyses.")
    history_parser.add_argument(
        "--search", "-s", default="", help="Filter by text in URL or title"
    )
    history_parser.add_argument(
        "--timeframe",
        "-t",
        choices=["all", "day", "week", "month"],
        default="all",
        help="Only show analyses from this period (default: all)",
    )
    history_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    history_parser.set_defaults(func=history_command)

    delete_parser = subparsers.add_parser("delete", help="Delete a stored analysis.")
    delete_parser.add_argument("id", help="Identifier shown by the history command")
    delete_parser.set_defaults(func=delete_command)

    thresholds_parser = subparsers.add_parser(
        "thresholds", help="Show or export the scoring thresholds."
    )
    thresholds_parser.add_argument(
        "--thresholds",
        metavar="FILE",
        help="Start from this JSON file instead of PAGESCOPE_THRESHOLD_* variables",
    )
    thresholds_parser.add_argument(
        "--output-file",
        "-f",
        help="Write the thresholds to this JSON file",
    )
    thresholds_parser.set_defaults(func=thresholds_command)

    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
