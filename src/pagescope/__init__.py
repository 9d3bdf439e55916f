"""Web page content profiler with text metrics and SEO scoring."""

__version__ = "0.1.0"

from pagescope.analyzer import PageAnalyzer
from pagescope.crawler import WebCrawler, prepare_url
from pagescope.extractor import StructuralExtractor, parse_html
from pagescope.text_metrics import TextMetricsEngine
from pagescope.seo_scorer import SEOScorer
from pagescope.performance import PerformanceSampler
from pagescope.lexicon import Lexicon, load_lexicon
from pagescope.url_utils import (
    normalize_url,
    is_external,
    is_external_substring,
    is_valid_image_url,
)
from pagescope.exceptions import (
    PageScopeError,
    InputError,
    FetchError,
    PersistenceError,
)
from pagescope.models import (
    StructuredContent,
    TextMetrics,
    PerformanceMetrics,
    SeoAnalysis,
    ScrapedRecord,
    StoredRecord,
    AnalysisResponse,
    PageStats,
)
from pagescope.stats import compute_stats, filter_history
from pagescope.config import settings

__all__ = [
    # Core
    "PageAnalyzer",
    "WebCrawler",
    "prepare_url",
    "StructuralExtractor",
    "parse_html",
    "TextMetricsEngine",
    "SEOScorer",
    "PerformanceSampler",
    "Lexicon",
    "load_lexicon",
    # URLs
    "normalize_url",
    "is_external",
    "is_external_substring",
    "is_valid_image_url",
    # Errors
    "PageScopeError",
    "InputError",
    "FetchError",
    "PersistenceError",
    # Models
    "StructuredContent",
    "TextMetrics",
    "PerformanceMetrics",
    "SeoAnalysis",
    "ScrapedRecord",
    "StoredRecord",
    "AnalysisResponse",
    "PageStats",
    # Stats
    "compute_stats",
    "filter_history",
    "settings",
]
