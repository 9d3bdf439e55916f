"""Rule-based SEO scoring with per-check recommendations."""

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from pagescope.config import AnalysisThresholds, default_thresholds
from pagescope.constants import MAX_CHECK_SCORE, REQUIRED_META_TAGS, SEO_CHECK_NAMES
from pagescope.models import (
    Heading,
    PerformanceMetrics,
    SeoAnalysis,
    SeoCheck,
    StructuredContent,
    TextMetrics,
)

logger = logging.getLogger(__name__)

# (score, message, recommendation used when score < 100)
CheckOutcome = Tuple[float, str, str]


class SEOScorer:
    """Evaluates ten independent quality checks and averages them.

    Every check yields a score in [0, 100]. The overall score is the
    unweighted mean rounded half up. Each check scoring below 100 adds one
    recommendation, in check order.
    """

    def __init__(self, thresholds: Optional[AnalysisThresholds] = None):
        """Initialize scorer with configurable thresholds.

        Args:
            thresholds: Analysis thresholds configuration
        """
        self.thresholds = thresholds or default_thresholds

    def score(
        self,
        content: StructuredContent,
        performance: PerformanceMetrics,
        text_metrics: TextMetrics,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SeoAnalysis:
        """Run all checks against an analyzed page.

        Args:
            content: Extracted structure
            performance: Sampled performance metrics
            text_metrics: Computed text metrics
            title: Page title (defaults to content.meta.title)
            description: Meta description (defaults to content.meta.description)

        Returns:
            SeoAnalysis with overall score, checks and recommendations
        """
        title = content.meta.title if title is None else title
        description = content.meta.description if description is None else description

        evaluators: Dict[str, Callable[[], CheckOutcome]] = {
            'title': lambda: self.check_title(title),
            'description': lambda: self.check_description(description),
            'headings': lambda: self.check_headings(content.headings),
            'images': lambda: self.check_images(content),
            'links': lambda: self.check_links(content),
            'meta': lambda: self.check_meta(content),
            'performance': lambda: self.check_performance(performance),
            'readability': lambda: self.check_readability(text_metrics),
            'keywords': lambda: self.check_keywords(text_metrics),
            'mobile': lambda: self.check_mobile(content),
        }

        checks: Dict[str, SeoCheck] = {}
        recommendations: List[str] = []

        for name in SEO_CHECK_NAMES:
            check_score, message, recommendation = evaluators[name]()
            check_score = max(0.0, min(float(MAX_CHECK_SCORE), check_score))
            checks[name] = SeoCheck(score=check_score, message=message)
            if check_score < MAX_CHECK_SCORE and recommendation not in recommendations:
                recommendations.append(recommendation)

        mean = sum(c.score for c in checks.values()) / len(checks)
        overall = max(0, min(MAX_CHECK_SCORE, math.floor(mean + 0.5)))

        logger.info(
            f"SEO score {overall}/100 ({len(recommendations)} recommendations)"
        )

        return SeoAnalysis(score=overall, checks=checks, recommendations=recommendations)

    def check_title(self, title: Optional[str]) -> CheckOutcome:
        t = self.thresholds
        length = len(title or "")
        if t.title_min <= length <= t.title_max:
            return MAX_CHECK_SCORE, 'Title length is optimal', ''
        message = f'Title length should be between {t.title_min}-{t.title_max} characters'
        return t.title_fail_score, message, f'{message} (currently {length})'

    def check_description(self, description: Optional[str]) -> CheckOutcome:
        t = self.thresholds
        if description and t.meta_description_min <= len(description) <= t.meta_description_max:
            return MAX_CHECK_SCORE, 'Description length is optimal', ''
        message = (
            f'Description length should be between '
            f'{t.meta_description_min}-{t.meta_description_max} characters'
        )
        if not description:
            return t.description_fail_score, message, 'Add a meta description'
        return t.description_fail_score, message, f'{message} (currently {len(description)})'

    def check_headings(self, headings: List[Heading]) -> CheckOutcome:
        """Exactly one H1, and no heading deeper than its predecessor by more than one level."""
        t = self.thresholds
        h1_count = sum(1 for h in headings if h.level == 1)

        if h1_count != 1:
            message = f'Use exactly one H1 heading (found {h1_count})'
            return t.headings_fail_score, message, message

        for previous, current in zip(headings, headings[1:]):
            if current.level - previous.level > t.max_heading_level_increase:
                message = (
                    f'Improve heading hierarchy: h{previous.level} is followed '
                    f'by h{current.level}'
                )
                return t.headings_fail_score, message, message

        return MAX_CHECK_SCORE, 'Heading structure is optimal', ''

    def check_images(self, content: StructuredContent) -> CheckOutcome:
        total = len(content.images)
        if total == 0:
            return MAX_CHECK_SCORE, 'All images have alt text', ''

        with_alt = sum(1 for img in content.images if img.alt)
        image_score = (with_alt / total) * 100
        if with_alt == total:
            return image_score, 'All images have alt text', ''
        message = f'{total - with_alt} of {total} images missing alt text'
        return image_score, message, f'Add alt text to {total - with_alt} images'

    def check_links(self, content: StructuredContent) -> CheckOutcome:
        external = sum(1 for link in content.links if link.is_external)
        internal = len(content.links) - external

        if internal > 0 and external > 0:
            return MAX_CHECK_SCORE, 'Good mix of internal and external links', ''
        message = 'Consider adding more diverse links'
        missing = 'internal' if internal == 0 else 'external'
        return self.thresholds.links_fail_score, message, f'{message} (no {missing} links found)'

    def check_meta(self, content: StructuredContent) -> CheckOutcome:
        missing = [name for name in REQUIRED_META_TAGS if not content.meta.has_tag(name)]
        if not missing:
            return MAX_CHECK_SCORE, 'Meta tags are well-defined', ''
        message = f"Add missing meta tags: {', '.join(missing)}"
        return self.thresholds.meta_fail_score, message, message

    def check_performance(self, performance: PerformanceMetrics) -> CheckOutcome:
        t = self.thresholds
        perf_score = min(
            float(MAX_CHECK_SCORE),
            MAX_CHECK_SCORE - (performance.load_time_ms / t.performance_ms_per_point),
        )
        if perf_score >= t.performance_excellent_score:
            message = 'Performance is excellent'
        else:
            message = 'Performance needs improvement'
        recommendation = f'Reduce page load time (currently {performance.load_time_ms:.0f} ms)'
        return perf_score, message, recommendation

    def check_readability(self, text_metrics: TextMetrics) -> CheckOutcome:
        readability = text_metrics.content_analysis.readability_score
        if readability >= self.thresholds.min_readability_score:
            message = 'Content is readable'
        else:
            message = 'Improve content readability'
        recommendation = (
            f'Use shorter sentences and simpler words to improve readability '
            f'(score {readability:.1f})'
        )
        return readability, message, recommendation

    def check_keywords(self, text_metrics: TextMetrics) -> CheckOutcome:
        if text_metrics.content_analysis.top_keywords:
            return MAX_CHECK_SCORE, 'Keywords are well distributed', ''
        message = 'Add more relevant keywords'
        return self.thresholds.keywords_fail_score, message, message

    def check_mobile(self, content: StructuredContent) -> CheckOutcome:
        if content.meta.viewport is not None:
            return MAX_CHECK_SCORE, 'Page is mobile-friendly', ''
        message = 'Optimize for mobile devices'
        return self.thresholds.mobile_fail_score, message, 'Add a viewport meta tag to optimize for mobile devices'
