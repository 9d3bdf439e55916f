from dotenv import load_dotenv
from dataclasses import dataclass
from pathlib import Path
import json
import logging
import os

from pagescope.constants import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    MIN_KEYWORD_LENGTH,
    TOP_KEYWORDS_COUNT,
    WORDS_PER_MINUTE,
)

load_dotenv()  # Loads variables from .env file

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (compatible; PageScope/1.0; +https://github.com/pagescope/pagescope)"
)


class Settings:
    """
    Manages application settings loaded from environment variables.
    """
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///pagescope.db")  # Default to SQLite

    # Database backend configuration
    DB_BACKEND = os.getenv("DB_BACKEND", "local")  # 'local', 'turso' or 'none'
    TURSO_DATABASE_URL = os.getenv("TURSO_DATABASE_URL")  # e.g., libsql://your-db.turso.io
    TURSO_AUTH_TOKEN = os.getenv("TURSO_AUTH_TOKEN")

    USER_AGENT = os.getenv("USER_AGENT", DEFAULT_USER_AGENT)
    FETCH_TIMEOUT = int(os.getenv("FETCH_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)))
    MAX_REDIRECTS = int(os.getenv("MAX_REDIRECTS", str(DEFAULT_MAX_REDIRECTS)))

    # Optional JSON word list replacing the bundled sentiment lexicon
    LEXICON_PATH = os.getenv("LEXICON_PATH")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")


settings = Settings()


@dataclass
class AnalysisThresholds:
    """Configurable thresholds for SEO scoring and text metrics."""

    # Title / description length windows (characters)
    title_min: int = 30
    title_max: int = 60
    meta_description_min: int = 120
    meta_description_max: int = 160

    # Scores given when a check fails
    title_fail_score: int = 50
    description_fail_score: int = 50
    headings_fail_score: int = 60
    links_fail_score: int = 70
    meta_fail_score: int = 70
    keywords_fail_score: int = 50
    mobile_fail_score: int = 50

    # Heading levels may deepen by at most this much between neighbours
    max_heading_level_increase: int = 1

    # Performance check loses one point per this many milliseconds
    performance_ms_per_point: float = 1000.0
    performance_excellent_score: float = 90.0

    # Readability (Flesch Reading Ease) considered "good" at or above this
    min_readability_score: float = 60.0

    # Text metrics
    words_per_minute: int = WORDS_PER_MINUTE
    min_keyword_length: int = MIN_KEYWORD_LENGTH
    top_keywords_count: int = TOP_KEYWORDS_COUNT

    @classmethod
    def from_env(cls) -> "AnalysisThresholds":
        """Load thresholds from environment variables.

        Environment variables should be prefixed with PAGESCOPE_THRESHOLD_
        e.g., PAGESCOPE_THRESHOLD_TITLE_MAX=70

        Returns:
            AnalysisThresholds with values from environment
        """
        thresholds = cls()
        prefix = "PAGESCOPE_THRESHOLD_"

        for field_name in thresholds.__dataclass_fields__:
            env_key = f"{prefix}{field_name.upper()}"
            env_value = os.getenv(env_key)

            if env_value is not None:
                field_type = thresholds.__dataclass_fields__[field_name].type
                try:
                    if field_type in (int, "int"):
                        setattr(thresholds, field_name, int(env_value))
                    elif field_type in (float, "float"):
                        setattr(thresholds, field_name, float(env_value))
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_key}: {env_value!r}")

        return thresholds

    @classmethod
    def from_file(cls, path: str) -> "AnalysisThresholds":
        """Load thresholds from a JSON configuration file.

        Args:
            path: Path to JSON configuration file

        Returns:
            AnalysisThresholds with values from file
        """
        thresholds = cls()
        file_path = Path(path)

        if not file_path.exists():
            return thresholds

        with open(file_path, 'r') as f:
            config = json.load(f)

        threshold_config = config.get('thresholds', config)

        for field_name in thresholds.__dataclass_fields__:
            if field_name in threshold_config:
                setattr(thresholds, field_name, threshold_config[field_name])

        return thresholds

    def to_dict(self) -> dict:
        """Convert thresholds to dictionary.

        Returns:
            Dictionary of all threshold values
        """
        return {
            field_name: getattr(self, field_name)
            for field_name in self.__dataclass_fields__
        }

    def save_to_file(self, path: str) -> None:
        """Save current thresholds to a JSON file.

        Args:
            path: Path to save configuration
        """
        with open(path, 'w') as f:
            json.dump({'thresholds': self.to_dict()}, f, indent=2)


# Global default thresholds instance
default_thresholds = AnalysisThresholds()
