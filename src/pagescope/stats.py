"""Summary statistics and history filtering over analysis records."""

from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional

from pagescope.constants import HISTORY_TIMEFRAME_DAYS
from pagescope.models import PageStats, ScrapedRecord, StoredRecord


def compute_stats(record: ScrapedRecord) -> PageStats:
    """Summarize a record for dashboards and text reports.

    Heading and link-type buckets are listed in the order first seen on the page.
    """
    content = record.content

    headings_by_level = Counter(f"h{h.level}" for h in content.headings)
    link_types = Counter(
        'external' if link.is_external else 'internal' for link in content.links
    )

    return PageStats(
        word_count=record.text_metrics.word_count,
        link_count=len(content.links),
        image_count=len(content.images),
        heading_count=len(content.headings),
        reading_time=record.text_metrics.reading_time_minutes,
        heading_chart_data=[
            {'level': level, 'count': count} for level, count in headings_by_level.items()
        ],
        link_types=[
            {'type': link_type, 'count': count} for link_type, count in link_types.items()
        ],
        seo_score=record.seo_analysis.score,
        performance=record.performance,
        content_analysis=record.text_metrics.content_analysis,
    )


def filter_history(
    records: List[StoredRecord],
    search_term: str = "",
    timeframe: str = "all",
    now: Optional[datetime] = None,
) -> List[StoredRecord]:
    """Filter stored records by text and age.

    Args:
        records: Stored records, typically newest first
        search_term: Case-insensitive substring matched against url and title
        timeframe: One of 'all', 'day', 'week', 'month'
        now: Reference time for the timeframe window (defaults to now)

    Returns:
        Matching records in their original order

    Raises:
        ValueError: If the timeframe is unknown
    """
    if timeframe not in HISTORY_TIMEFRAME_DAYS:
        raise ValueError(
            f"Unknown timeframe: '{timeframe}'. "
            f"Supported: {', '.join(HISTORY_TIMEFRAME_DAYS)}"
        )

    days = HISTORY_TIMEFRAME_DAYS[timeframe]
    cutoff = (now or datetime.now()) - timedelta(days=days) if days else None
    term = search_term.strip().lower()

    matches = []
    for stored in records:
        if cutoff is not None and stored.scraped_at < cutoff:
            continue
        if term:
            haystack = f"{stored.url} {stored.title or ''}".lower()
            if term not in haystack:
                continue
        matches.append(stored)
    return matches
