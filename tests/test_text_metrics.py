"""Tests for the text metrics engine."""

import pytest

from pagescope.config import AnalysisThresholds
from pagescope.lexicon import Lexicon
from pagescope.text_metrics import TextMetricsEngine


class TestTextMetricsEngine:
    """Test suite for TextMetricsEngine."""

    @pytest.fixture
    def engine(self):
        """Create an engine with the bundled lexicon."""
        return TextMetricsEngine()

    def test_count_words(self, engine):
        assert engine.count_words("  one two\n three  ") == 3
        assert engine.count_words("") == 0

    @pytest.mark.parametrize("words,minutes", [
        (0, 0),
        (1, 1),
        (200, 1),
        (201, 2),
        (250, 2),
    ])
    def test_reading_time_rounds_up(self, engine, words, minutes):
        assert engine.reading_time(words) == minutes

    def test_reading_time_uses_configured_speed(self):
        engine = TextMetricsEngine(thresholds=AnalysisThresholds(words_per_minute=100))
        assert engine.reading_time(250) == 3

    def test_split_sentences(self, engine):
        assert engine.split_sentences("First. Second!! Third?") == ["First", "Second", "Third"]
        assert engine.split_sentences("No punctuation") == ["No punctuation"]
        assert engine.split_sentences("") == []

    def test_count_syllables_simple_words(self, engine):
        """Test syllable counting for simple words."""
        assert engine.count_syllables("the") == 1
        assert engine.count_syllables("hello") == 2
        assert engine.count_syllables("beautiful") == 3
        assert engine.count_syllables("rhythm") == 1

    def test_count_syllables_edge_cases(self, engine):
        assert engine.count_syllables("") == 0
        assert engine.count_syllables("queue") == 1
        assert engine.count_syllables("HELLO") == 2


class TestSentiment:
    """Lexicon sentiment scoring."""

    @pytest.fixture
    def engine(self):
        return TextMetricsEngine()

    def test_mixed_sentiment(self, engine):
        result = engine.analyze_sentiment("good good bad")

        assert result.score == pytest.approx(1 / 3)
        assert result.comparative == pytest.approx(1 / 9)
        assert result.positive_words == ("good", "good")
        assert result.negative_words == ("bad",)

    def test_case_insensitive(self, engine):
        result = engine.analyze_sentiment("GREAT Awful")
        assert result.positive_words == ("great",)
        assert result.negative_words == ("awful",)
        assert result.score == 0

    def test_empty_text(self, engine):
        result = engine.analyze_sentiment("")
        assert result.score == 0
        assert result.comparative == 0
        assert result.positive_words == ()

    def test_score_bounded(self, engine):
        for text in ["best best best", "worst worst", "plain words only"]:
            assert -1 <= engine.analyze_sentiment(text).score <= 1

    def test_punctuation_attached_words_do_not_match(self, engine):
        """Tokens are whitespace-split, so trailing punctuation prevents a match."""
        result = engine.analyze_sentiment("This is good.")
        assert result.positive_words == ()

    def test_custom_lexicon(self):
        lexicon = Lexicon.from_words(positive=["Sunny"], negative=["rainy"])
        engine = TextMetricsEngine(lexicon=lexicon)

        result = engine.analyze_sentiment("sunny days beat rainy good days")

        assert result.positive_words == ("sunny",)
        assert result.negative_words == ("rainy",)
        assert result.score == 0


class TestReadability:
    """Flesch Reading Ease approximation."""

    @pytest.fixture
    def engine(self):
        return TextMetricsEngine()

    def test_empty_text(self, engine):
        assert engine.calculate_readability("") == 0.0

    def test_single_word_clamped_to_max(self, engine):
        assert engine.calculate_readability("cat") == 100.0

    def test_dense_text_clamped_to_min(self, engine):
        text = "internationalization " * 50
        assert engine.calculate_readability(text) == 0.0

    def test_typical_text_in_range(self, engine):
        text = (
            "The committee considered several alternative proposals. "
            "Ultimately, representatives unanimously recommended additional investigation."
        )
        score = engine.calculate_readability(text)
        assert 0.0 <= score <= 100.0
        assert score < 60.0


class TestKeywords:
    """Keyword frequency and density."""

    @pytest.fixture
    def engine(self):
        return TextMetricsEngine()

    def test_top_keywords_ranked(self, engine):
        density, top = engine.analyze_keywords("python code python tests code python data")

        assert [(k.keyword, k.count) for k in top] == [
            ("python", 3),
            ("code", 2),
            ("tests", 1),
            ("data", 1),
        ]
        assert top[0].density == 42.86
        assert density == {"python": 42.86, "code": 28.57, "tests": 14.29, "data": 14.29}

    def test_short_tokens_ignored(self, engine):
        density, top = engine.analyze_keywords("the fox and cat ran far")
        assert density == {}
        assert top == []

    def test_at_most_ten_keywords(self, engine):
        words = [f"keyword{chr(ord('a') + i)}" for i in range(15)]
        _, top = engine.analyze_keywords(" ".join(words))
        assert len(top) == 10

    def test_density_matches_count(self, engine):
        text = "alpha beta gamma alpha delta alpha beta epsilon"
        _, top = engine.analyze_keywords(text)
        total = 8
        for keyword in top:
            assert keyword.density == pytest.approx(100 * keyword.count / total, abs=0.01)

    def test_case_and_punctuation_normalized(self, engine):
        _, top = engine.analyze_keywords("Python, PYTHON! python.")
        assert top[0].keyword == "python"
        assert top[0].count == 3

    def test_stop_words_kept_by_default(self, engine):
        _, top = engine.analyze_keywords("that word that thing")
        assert top[0].keyword == "that"

    def test_stop_words_excluded_when_enabled(self):
        lexicon = Lexicon.from_words(positive=[], negative=[], stop_words=["that"])
        engine = TextMetricsEngine(lexicon=lexicon, exclude_stop_words=True)

        _, top = engine.analyze_keywords("that word that thing")

        assert [k.keyword for k in top] == ["word", "thing"]


class TestAnalyze:
    """Full text metrics computation."""

    @pytest.fixture
    def engine(self):
        return TextMetricsEngine()

    def test_analyze(self, engine):
        metrics = engine.analyze("One two three. Four five!", paragraph_count=0)

        assert metrics.word_count == 5
        assert metrics.reading_time_minutes == 1
        analysis = metrics.content_analysis
        assert analysis.sentence_count == 2
        assert analysis.average_sentence_length == 2.5
        assert analysis.paragraph_count == 1
        assert analysis.average_paragraph_length == 5.0

    def test_analyze_empty_text(self, engine):
        metrics = engine.analyze("")

        assert metrics.word_count == 0
        assert metrics.reading_time_minutes == 0
        assert metrics.sentiment.score == 0
        analysis = metrics.content_analysis
        assert analysis.sentence_count == 1
        assert analysis.paragraph_count == 1
        assert analysis.readability_score == 0.0
        assert analysis.top_keywords == ()
        assert analysis.average_sentence_length == 0.0

    def test_paragraph_average(self, engine):
        text = " ".join(["word"] * 12)
        metrics = engine.analyze(text, paragraph_count=5)
        assert metrics.content_analysis.paragraph_count == 5
        assert metrics.content_analysis.average_paragraph_length == 2.4
