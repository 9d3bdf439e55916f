"""Data models for page analysis.

Everything reachable from a ScrapedRecord is frozen: list fields are stored
as tuples and dict fields as read-only mappings, so a record handed to a
caller and to the storage thread can be shared safely.
"""

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pagescope.constants import RECORD_SCHEMA_VERSION


def _freeze(value: Any) -> Any:
    """Recursively convert lists to tuples and dicts to read-only mappings."""
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def _to_plain(value: Any) -> Any:
    """Recursively convert models to JSON-ready dicts and lists."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class _FrozenModel:
    """Mixin for frozen dataclasses whose collection fields must not change."""

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _freeze(getattr(self, f.name)))


# ============================================================================
# Structured Content Models
# ============================================================================

@dataclass(frozen=True)
class PageMeta(_FrozenModel):
    """Meta information from the document head."""

    title: str = ""
    description: Optional[str] = None
    keywords: tuple[str, ...] = ()
    author: Optional[str] = None
    robots: Optional[str] = None
    viewport: Optional[str] = None
    charset: Optional[str] = None
    favicon: Optional[str] = None  # Absolute URL of the first rel~="icon" link
    og_tags: Mapping[str, str] = field(default_factory=dict)  # 'og:' prefix stripped
    twitter_tags: Mapping[str, str] = field(default_factory=dict)  # 'twitter:' prefix stripped
    other: Mapping[str, str] = field(default_factory=dict)

    def has_tag(self, name: str) -> bool:
        """Check whether a named meta tag is present.

        Accepts plain names ('description'), Open Graph ('og:title') and
        Twitter ('twitter:card') names.
        """
        if name.startswith('og:'):
            return name[3:] in self.og_tags
        if name.startswith('twitter:'):
            return name[8:] in self.twitter_tags
        value = getattr(self, name, None)
        if value is None:
            value = self.other.get(name)
        return bool(value)


@dataclass(frozen=True)
class Paragraph(_FrozenModel):
    text: str
    html: str
    classes: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class Image(_FrozenModel):
    src: str  # Absolute, validated image URL
    alt: Optional[str] = None
    title: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    classes: Optional[str] = None


@dataclass(frozen=True)
class Link(_FrozenModel):
    href: str  # Absolute http(s) URL
    text: str
    title: Optional[str] = None
    rel: Optional[str] = None
    classes: Optional[str] = None
    is_external: bool = False


@dataclass(frozen=True)
class Heading(_FrozenModel):
    level: int  # 1-6
    text: str
    id: Optional[str] = None
    classes: Optional[str] = None


@dataclass(frozen=True)
class ListBlock(_FrozenModel):
    kind: str  # 'ordered' or 'unordered'
    items: tuple[str, ...] = ()


@dataclass(frozen=True)
class Table(_FrozenModel):
    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class Video(_FrozenModel):
    kind: str  # 'video', 'youtube', 'vimeo'
    src: str
    title: str = ""
    width: Optional[str] = None
    height: Optional[str] = None
    embed_html: str = ""


@dataclass(frozen=True)
class Script(_FrozenModel):
    src: Optional[str] = None
    kind: Optional[str] = None  # type attribute
    is_async: bool = False
    defer: bool = False
    inline_content: Optional[str] = None


@dataclass(frozen=True)
class Stylesheet(_FrozenModel):
    kind: str  # 'external' or 'inline'
    href: Optional[str] = None
    content: Optional[str] = None


@dataclass(frozen=True)
class StructuredContent(_FrozenModel):
    """Normalized structural elements of a page."""

    meta: PageMeta = field(default_factory=PageMeta)
    full_text: str = ""
    paragraphs: tuple[Paragraph, ...] = ()
    images: tuple[Image, ...] = ()
    links: tuple[Link, ...] = ()
    headings: tuple[Heading, ...] = ()
    lists: tuple[ListBlock, ...] = ()
    tables: tuple[Table, ...] = ()
    videos: tuple[Video, ...] = ()
    scripts: tuple[Script, ...] = ()
    stylesheets: tuple[Stylesheet, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StructuredContent":
        return cls(
            meta=PageMeta(**data.get('meta', {})),
            full_text=data.get('full_text', ""),
            paragraphs=[Paragraph(**p) for p in data.get('paragraphs', [])],
            images=[Image(**i) for i in data.get('images', [])],
            links=[Link(**l) for l in data.get('links', [])],
            headings=[Heading(**h) for h in data.get('headings', [])],
            lists=[ListBlock(**l) for l in data.get('lists', [])],
            tables=[Table(**t) for t in data.get('tables', [])],
            videos=[Video(**v) for v in data.get('videos', [])],
            scripts=[Script(**s) for s in data.get('scripts', [])],
            stylesheets=[Stylesheet(**s) for s in data.get('stylesheets', [])],
        )


# ============================================================================
# Text Metrics Models
# ============================================================================

@dataclass(frozen=True)
class SentimentResult(_FrozenModel):
    """Lexicon-based polarity of a text."""

    score: float = 0.0
    comparative: float = 0.0
    positive_words: tuple[str, ...] = ()
    negative_words: tuple[str, ...] = ()


@dataclass(frozen=True)
class KeywordStat(_FrozenModel):
    keyword: str
    count: int
    density: float  # percentage of qualifying tokens


@dataclass(frozen=True)
class ContentAnalysis(_FrozenModel):
    """Keyword and readability analysis of the page text."""

    keyword_density: Mapping[str, float] = field(default_factory=dict)
    top_keywords: tuple[KeywordStat, ...] = ()
    readability_score: float = 0.0  # Flesch Reading Ease (0-100, higher is easier)
    sentence_count: int = 1
    average_sentence_length: float = 0.0
    paragraph_count: int = 1
    average_paragraph_length: float = 0.0


@dataclass(frozen=True)
class TextMetrics(_FrozenModel):
    word_count: int = 0
    reading_time_minutes: int = 0
    sentiment: SentimentResult = field(default_factory=SentimentResult)
    content_analysis: ContentAnalysis = field(default_factory=ContentAnalysis)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TextMetrics":
        analysis = dict(data.get('content_analysis', {}))
        analysis['top_keywords'] = [
            KeywordStat(**k) for k in analysis.get('top_keywords', [])
        ]
        return cls(
            word_count=data.get('word_count', 0),
            reading_time_minutes=data.get('reading_time_minutes', 0),
            sentiment=SentimentResult(**data.get('sentiment', {})),
            content_analysis=ContentAnalysis(**analysis),
        )


# ============================================================================
# Performance Models
# ============================================================================

@dataclass(frozen=True)
class PerformanceMetrics:
    """DOM-level resource indicators and timing for one fetch."""

    load_time_ms: float = 0.0  # fetch start to analysis complete
    resource_count: int = 0  # images + scripts + stylesheets
    total_size_bytes: int = 0  # UTF-8 size of the raw HTML
    dom_node_count: int = 0
    script_count: int = 0
    style_count: int = 0
    image_count: int = 0
    font_count: int = 0


# ============================================================================
# SEO Models
# ============================================================================

@dataclass(frozen=True)
class SeoCheck:
    score: float
    message: str


@dataclass(frozen=True)
class SeoAnalysis(_FrozenModel):
    """Composite SEO score with per-check results and recommendations."""

    score: int = 0  # 0-100, rounded mean of all checks
    checks: Mapping[str, SeoCheck] = field(default_factory=dict)  # in evaluation order
    recommendations: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SeoAnalysis":
        return cls(
            score=data.get('score', 0),
            checks={
                name: SeoCheck(**check)
                for name, check in data.get('checks', {}).items()
            },
            recommendations=data.get('recommendations', []),
        )


# ============================================================================
# Pipeline Models
# ============================================================================

@dataclass
class FetchResult:
    """Raw response returned by the fetch collaborator."""

    url: str
    html: str
    status_code: int = 200
    final_url: Optional[str] = None
    elapsed_ms: float = 0.0
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ScrapedRecord:
    """Immutable result of analyzing one page.

    A later scrape of the same URL produces a new record; records are never
    updated in place.
    """

    url: str
    title: str
    description: Optional[str]
    content: StructuredContent
    performance: PerformanceMetrics
    text_metrics: TextMetrics
    seo_analysis: SeoAnalysis
    scraped_at: datetime = field(default_factory=datetime.now)
    schema_version: int = RECORD_SCHEMA_VERSION

    def to_dict(self) -> dict[str, Any]:
        return _to_plain(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrapedRecord":
        """Rehydrate a record previously produced by to_dict().

        Raises:
            ValueError: If the record was written with an unsupported schema version
        """
        version = data.get('schema_version', RECORD_SCHEMA_VERSION)
        if version != RECORD_SCHEMA_VERSION:
            raise ValueError(f"Unsupported record schema version: {version}")

        scraped_at = data.get('scraped_at')
        if isinstance(scraped_at, str):
            scraped_at = datetime.fromisoformat(scraped_at)

        return cls(
            url=data['url'],
            title=data.get('title', ""),
            description=data.get('description'),
            content=StructuredContent.from_dict(data.get('content', {})),
            performance=PerformanceMetrics(**data.get('performance', {})),
            text_metrics=TextMetrics.from_dict(data.get('text_metrics', {})),
            seo_analysis=SeoAnalysis.from_dict(data.get('seo_analysis', {})),
            scraped_at=scraped_at or datetime.now(),
            schema_version=version,
        )


@dataclass
class StoredRecord:
    """A ScrapedRecord as returned by the persistence layer."""

    id: str
    url: str
    title: Optional[str]
    description: Optional[str]
    scraped_at: datetime
    record: ScrapedRecord


@dataclass
class AnalysisResponse:
    """Caller-facing outcome of one analyze() request."""

    success: bool
    data: Optional[ScrapedRecord] = None
    error: Optional[str] = None
    saved_to_database: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            'success': self.success,
            'saved_to_database': self.saved_to_database,
        }
        if self.data is not None:
            result['data'] = self.data.to_dict()
        if self.error is not None:
            result['error'] = self.error
        return result


@dataclass
class PageStats:
    """Summary statistics for dashboards and reports."""

    word_count: int = 0
    link_count: int = 0
    image_count: int = 0
    heading_count: int = 0
    reading_time: int = 0
    heading_chart_data: list[dict[str, Any]] = field(default_factory=list)
    link_types: list[dict[str, Any]] = field(default_factory=list)
    seo_score: int = 0
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    content_analysis: ContentAnalysis = field(default_factory=ContentAnalysis)
