"""Page analyzer that sequences fetch, extraction, metrics, scoring and storage."""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import List, Optional

from pagescope.config import AnalysisThresholds, settings
from pagescope.crawler import WebCrawler, prepare_url
from pagescope.database import AbstractDatabase, get_db_client
from pagescope.exceptions import FetchError, InputError
from pagescope.extractor import StructuralExtractor, parse_html
from pagescope.lexicon import Lexicon, load_lexicon
from pagescope.models import AnalysisResponse, ScrapedRecord
from pagescope.performance import PerformanceSampler
from pagescope.seo_scorer import SEOScorer
from pagescope.text_metrics import TextMetricsEngine

logger = logging.getLogger(__name__)


class PageAnalyzer:
    """Analyzes single pages into immutable ScrapedRecords.

    Each call works on request-local state only. Storage is best effort:
    the write runs on a background thread after the record is built, and a
    failed write is logged without affecting the returned response.
    """

    def __init__(
        self,
        crawler: Optional[WebCrawler] = None,
        database: Optional[AbstractDatabase] = None,
        thresholds: Optional[AnalysisThresholds] = None,
        lexicon: Optional[Lexicon] = None,
        save: bool = True,
    ):
        """Initialize the page analyzer.

        Args:
            crawler: Fetch collaborator (defaults to a WebCrawler from settings)
            database: Storage backend (defaults to get_db_client() when save is True)
            thresholds: Analysis thresholds (defaults to PAGESCOPE_THRESHOLD_* overrides)
            lexicon: Word lists for sentiment and keyword analysis
            save: Whether analysis records are stored
        """
        self.crawler = crawler or WebCrawler()
        self.thresholds = thresholds or AnalysisThresholds.from_env()
        if lexicon is None:
            lexicon = load_lexicon(settings.LEXICON_PATH)

        self.extractor = StructuralExtractor()
        self.text_engine = TextMetricsEngine(lexicon=lexicon, thresholds=self.thresholds)
        self.scorer = SEOScorer(thresholds=self.thresholds)

        self.database = database
        if save and database is None:
            self.database = self._connect_database()
        elif not save:
            self.database = None

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pagescope-store")
        self._pending: List[Future] = []
        self._pending_lock = threading.Lock()

    def _connect_database(self) -> Optional[AbstractDatabase]:
        try:
            return get_db_client()
        except Exception as e:
            logger.warning(f"Storage backend unavailable, records will not be saved: {e}")
            return None

    def analyze(self, url: Optional[str]) -> AnalysisResponse:
        """Fetch and analyze a URL.

        Args:
            url: URL to analyze; https:// is assumed when no scheme is given

        Returns:
            AnalysisResponse. Input and fetch failures are reported with
            success=False rather than raised.
        """
        try:
            record = self.analyze_or_raise(url)
        except (InputError, FetchError) as e:
            logger.error(f"Analysis failed for {url!r}: {e}")
            return AnalysisResponse(success=False, error=str(e))

        saved = self._dispatch_save(record)
        return AnalysisResponse(success=True, data=record, saved_to_database=saved)

    def analyze_or_raise(self, url: Optional[str]) -> ScrapedRecord:
        """Fetch and analyze a URL without storing the result.

        Raises:
            InputError: If the URL is missing or blank
            FetchError: If the page could not be fetched
        """
        valid_url = prepare_url(url)
        started_at = time.perf_counter()
        fetched = self.crawler.fetch(valid_url)
        return self.analyze_html(fetched.html, valid_url, started_at=started_at)

    def analyze_html(
        self,
        html: str,
        url: str,
        started_at: Optional[float] = None,
    ) -> ScrapedRecord:
        """Run the analysis pipeline over already fetched markup.

        Args:
            html: Raw HTML of the page
            url: URL the page was fetched from (base for relative links)
            started_at: time.perf_counter() value when the fetch began

        Returns:
            ScrapedRecord for the page
        """
        sampler = PerformanceSampler(started_at=started_at)
        soup = parse_html(html)

        content = self.extractor.extract(soup, url)
        text_metrics = self.text_engine.analyze(
            content.full_text, paragraph_count=len(content.paragraphs)
        )
        performance = sampler.sample(soup, html)
        seo_analysis = self.scorer.score(content, performance, text_metrics)

        logger.debug(
            f"Analyzed {url}: {text_metrics.word_count} words, "
            f"{len(content.links)} links, {len(content.images)} images"
        )

        return ScrapedRecord(
            url=url,
            title=content.meta.title,
            description=content.meta.description,
            content=content,
            performance=performance,
            text_metrics=text_metrics,
            seo_analysis=seo_analysis,
        )

    def _dispatch_save(self, record: ScrapedRecord) -> bool:
        """Queue a background write. Returns False when storage is not configured."""
        if self.database is None:
            return False

        future = self._executor.submit(self._save, record)
        with self._pending_lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)
        return True

    def _save(self, record: ScrapedRecord) -> Optional[str]:
        try:
            record_id = self.database.save_record(record)
        except Exception as e:
            logger.error(f"Failed to save record for {record.url}: {e}")
            return None
        logger.info(f"Saved record {record_id} for {record.url}")
        return record_id

    def wait_for_pending_writes(self, timeout: Optional[float] = None) -> None:
        """Block until queued storage writes have finished."""
        with self._pending_lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def close(self) -> None:
        """Finish queued writes and release the crawler and database."""
        self._executor.shutdown(wait=True)
        self.crawler.close()
        if self.database is not None:
            self.database.close()

    def __enter__(self) -> "PageAnalyzer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
