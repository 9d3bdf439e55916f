# src/pagescope/constants.py
"""Centralized constants for the page analyzer.

This module contains magic numbers and fixed values that are used across
multiple modules. For user-configurable thresholds, see config.py and
AnalysisThresholds.
"""

# =============================================================================
# Text Metrics Constants
# =============================================================================

# Average adult reading speed used for reading time estimates
WORDS_PER_MINUTE = 200

# Tokens must be strictly longer than this to count as keywords
MIN_KEYWORD_LENGTH = 3

# Number of top keywords to report
TOP_KEYWORDS_COUNT = 10

# Flesch Reading Ease formula components
FLESCH_BASE = 206.835
FLESCH_SENTENCE_WEIGHT = 1.015
FLESCH_SYLLABLE_WEIGHT = 84.6

# Flesch Reading Ease formula (for documentation)
FLESCH_FORMULA = "206.835 - 1.015 * (words/sentences) - 84.6 * (syllables/words)"

# Readability score bounds
READABILITY_MIN = 0.0
READABILITY_MAX = 100.0


# =============================================================================
# URL Constants
# =============================================================================

# File extensions accepted as image URLs
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp', '.svg')

# Schemes considered for external link classification
WEB_SCHEMES = ('http', 'https')

# Substrings identifying embedded video players in iframe src attributes
VIDEO_HOST_MARKERS = {
    'youtube.com': 'youtube',
    'youtube-nocookie.com': 'youtube',
    'youtu.be': 'youtube',
    'vimeo.com': 'vimeo',
}


# =============================================================================
# Fetch Constants
# =============================================================================

# Default request timeout in seconds
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10

# Maximum redirects followed before the fetch fails
DEFAULT_MAX_REDIRECTS = 5

# Default scheme prepended to URLs entered without one
DEFAULT_URL_SCHEME = "https://"


# =============================================================================
# SEO Scoring Constants
# =============================================================================

# Order in which checks are evaluated and recommendations emitted
SEO_CHECK_NAMES = (
    'title',
    'description',
    'headings',
    'images',
    'links',
    'meta',
    'performance',
    'readability',
    'keywords',
    'mobile',
)

# Meta tags that must all be present for the meta check to pass
REQUIRED_META_TAGS = (
    'description',
    'viewport',
    'robots',
    'og:title',
    'og:description',
    'twitter:card',
)

# Perfect check score
MAX_CHECK_SCORE = 100


# =============================================================================
# Persistence Constants
# =============================================================================

# Version tag written with every stored record
RECORD_SCHEMA_VERSION = 2

# History timeframe windows in days
HISTORY_TIMEFRAME_DAYS = {
    'all': None,
    'day': 1,
    'week': 7,
    'month': 30,
}
