"""Shared fixtures for the page analyzer tests."""

from datetime import datetime

import pytest

from pagescope.models import (
    ContentAnalysis,
    Heading,
    Image,
    KeywordStat,
    Link,
    PageMeta,
    Paragraph,
    PerformanceMetrics,
    ScrapedRecord,
    SentimentResult,
    SeoAnalysis,
    SeoCheck,
    StructuredContent,
    Table,
    TextMetrics,
)


def build_record(
    url: str = "https://example.com/",
    title: str = "Example Domain",
    scraped_at: datetime = None,
    headings=None,
    links=None,
    seo_score: int = 72,
) -> ScrapedRecord:
    """Build a small but fully populated ScrapedRecord."""
    if headings is None:
        headings = [Heading(level=1, text="Example Domain", id="top")]
    if links is None:
        links = [
            Link(href="https://example.com/about", text="About"),
            Link(href="https://www.iana.org/domains", text="More", is_external=True),
        ]

    content = StructuredContent(
        meta=PageMeta(
            title=title,
            description="An example page",
            keywords=["example", "domain"],
            viewport="width=device-width",
            favicon="https://example.com/favicon.ico",
            og_tags={"title": "Example"},
        ),
        full_text="Example Domain This domain is for use in examples.",
        paragraphs=[Paragraph(text="This domain is for use in examples.", html="This domain is for use in examples.")],
        images=[Image(src="https://example.com/logo.png", alt="Logo")],
        links=links,
        headings=headings,
        tables=[Table(headers=["a"], rows=[["1"]])],
    )
    text_metrics = TextMetrics(
        word_count=9,
        reading_time_minutes=1,
        sentiment=SentimentResult(score=0.0, comparative=0.0),
        content_analysis=ContentAnalysis(
            keyword_density={"example": 25.0},
            top_keywords=[KeywordStat(keyword="example", count=1, density=25.0)],
            readability_score=71.5,
            sentence_count=1,
            average_sentence_length=9.0,
            paragraph_count=1,
            average_paragraph_length=9.0,
        ),
    )
    seo = SeoAnalysis(
        score=seo_score,
        checks={"title": SeoCheck(score=50.0, message="Title length should be between 30-60 characters")},
        recommendations=["Title length should be between 30-60 characters (currently 14)"],
    )
    return ScrapedRecord(
        url=url,
        title=title,
        description="An example page",
        content=content,
        performance=PerformanceMetrics(load_time_ms=120.5, resource_count=1, total_size_bytes=512),
        text_metrics=text_metrics,
        seo_analysis=seo,
        scraped_at=scraped_at or datetime(2024, 5, 1, 12, 0, 0),
    )


@pytest.fixture
def sample_record() -> ScrapedRecord:
    """A populated record for persistence and stats tests."""
    return build_record()
