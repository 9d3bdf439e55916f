"""Text metrics - word count, reading time, sentiment, readability and keywords."""

import logging
import math
import re
from collections import Counter
from typing import Dict, List, Optional, Tuple

from pagescope.config import AnalysisThresholds, default_thresholds
from pagescope.constants import (
    FLESCH_BASE,
    FLESCH_FORMULA,
    FLESCH_SENTENCE_WEIGHT,
    FLESCH_SYLLABLE_WEIGHT,
    READABILITY_MAX,
    READABILITY_MIN,
)
from pagescope.lexicon import Lexicon, load_lexicon
from pagescope.models import (
    ContentAnalysis,
    KeywordStat,
    SentimentResult,
    TextMetrics,
)

logger = logging.getLogger(__name__)

SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
NON_WORD_RE = re.compile(r'\W+')
NON_VOWEL_RE = re.compile(r'[^aeiouy]+')


class TextMetricsEngine:
    """Computes heuristic text metrics from flattened page text."""

    FLESCH_FORMULA = FLESCH_FORMULA

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        thresholds: Optional[AnalysisThresholds] = None,
        exclude_stop_words: bool = False,
    ):
        """Initialize the engine.

        Args:
            lexicon: Sentiment/stop-word lists (defaults to the bundled lexicon)
            thresholds: Analysis thresholds configuration
            exclude_stop_words: Drop lexicon stop words from keyword analysis
        """
        self.lexicon = lexicon or load_lexicon()
        self.thresholds = thresholds or default_thresholds
        self.exclude_stop_words = exclude_stop_words

    def analyze(self, text: str, paragraph_count: int = 0) -> TextMetrics:
        """Compute all text metrics for a page.

        Args:
            text: Visible body text
            paragraph_count: Number of non-empty paragraphs on the page

        Returns:
            TextMetrics for the text
        """
        word_count = self.count_words(text)
        sentence_count = max(1, len(self.split_sentences(text)))
        paragraph_count = max(1, paragraph_count)

        keyword_density, top_keywords = self.analyze_keywords(text)

        content_analysis = ContentAnalysis(
            keyword_density=keyword_density,
            top_keywords=top_keywords,
            readability_score=self.calculate_readability(text),
            sentence_count=sentence_count,
            average_sentence_length=round(word_count / sentence_count, 2),
            paragraph_count=paragraph_count,
            average_paragraph_length=round(word_count / paragraph_count, 2),
        )

        return TextMetrics(
            word_count=word_count,
            reading_time_minutes=self.reading_time(word_count),
            sentiment=self.analyze_sentiment(text),
            content_analysis=content_analysis,
        )

    def count_words(self, text: str) -> int:
        """Number of whitespace-separated tokens."""
        return len(text.split())

    def reading_time(self, word_count: int) -> int:
        """Reading time in whole minutes, rounded up. Zero for empty text."""
        if word_count <= 0:
            return 0
        return math.ceil(word_count / self.thresholds.words_per_minute)

    def split_sentences(self, text: str) -> List[str]:
        """Split text into non-empty sentences on runs of . ! ?"""
        sentences = SENTENCE_SPLIT_RE.split(text)
        return [s.strip() for s in sentences if s.strip()]

    def analyze_sentiment(self, text: str) -> SentimentResult:
        """Score polarity by matching whitespace tokens against the lexicon.

        score is (positive - negative) / total_words. comparative divides
        score by total_words a second time; stored records depend on that
        value so it is kept as is.
        """
        words = text.lower().split()
        total = len(words)

        positive_words = [w for w in words if w in self.lexicon.positive]
        negative_words = [w for w in words if w in self.lexicon.negative]

        score = (len(positive_words) - len(negative_words)) / total if total else 0.0
        comparative = score / total if total else 0.0

        return SentimentResult(
            score=score,
            comparative=comparative,
            positive_words=positive_words,
            negative_words=negative_words,
        )

    def count_syllables(self, word: str) -> int:
        """Count contiguous vowel groups in a word (heuristic)."""
        return sum(1 for group in NON_VOWEL_RE.split(word.lower()) if group)

    def calculate_readability(self, text: str) -> float:
        """Approximate Flesch Reading Ease, clamped to [0, 100].

        Returns 0.0 for text with no words.
        """
        words = text.split()
        word_count = len(words)
        if word_count == 0:
            return READABILITY_MIN

        sentence_count = max(1, len(self.split_sentences(text)))
        total_syllables = sum(self.count_syllables(word) for word in words)

        words_per_sentence = word_count / sentence_count
        syllables_per_word = total_syllables / word_count

        score = (
            FLESCH_BASE
            - (FLESCH_SENTENCE_WEIGHT * words_per_sentence)
            - (FLESCH_SYLLABLE_WEIGHT * syllables_per_word)
        )

        score = max(READABILITY_MIN, min(READABILITY_MAX, score))
        return round(score, 1)

    def analyze_keywords(self, text: str) -> Tuple[Dict[str, float], List[KeywordStat]]:
        """Find the most frequent qualifying tokens.

        Tokens are lowercased, split on non-word characters and kept when
        longer than the minimum keyword length. Ties keep first-seen order.

        Returns:
            Tuple of (keyword -> density map for the top keywords, ranked KeywordStat list)
        """
        min_length = self.thresholds.min_keyword_length
        tokens = [t for t in NON_WORD_RE.split(text.lower()) if len(t) > min_length]

        if self.exclude_stop_words:
            tokens = [t for t in tokens if t not in self.lexicon.stop_words]

        if not tokens:
            return {}, []

        total = len(tokens)
        counts = Counter(tokens)

        top_keywords = [
            KeywordStat(
                keyword=word,
                count=count,
                density=round((count / total) * 100, 2),
            )
            for word, count in counts.most_common(self.thresholds.top_keywords_count)
        ]
        keyword_density = {k.keyword: k.density for k in top_keywords}

        return keyword_density, top_keywords
