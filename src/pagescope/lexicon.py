"""Word lists used by the sentiment and keyword heuristics."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent / "data" / "lexicon.json"


@dataclass(frozen=True)
class Lexicon:
    """Closed-vocabulary word lists.

    Words are stored lowercased. Tests and callers can build their own
    instance instead of loading the bundled resource.
    """

    positive: frozenset[str] = field(default_factory=frozenset)
    negative: frozenset[str] = field(default_factory=frozenset)
    stop_words: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_words(
        cls,
        positive: Iterable[str],
        negative: Iterable[str],
        stop_words: Iterable[str] = (),
    ) -> "Lexicon":
        return cls(
            positive=frozenset(w.lower() for w in positive),
            negative=frozenset(w.lower() for w in negative),
            stop_words=frozenset(w.lower() for w in stop_words),
        )


def load_lexicon(path: Optional[str] = None) -> Lexicon:
    """Load a lexicon from a JSON word-list file.

    The file holds "positive", "negative" and optionally "stop_words" arrays.

    Args:
        path: File to load. Defaults to the bundled lexicon.

    Returns:
        Lexicon built from the file

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValueError: If the file is not a JSON object with the expected lists
    """
    file_path = Path(path) if path else DEFAULT_LEXICON_PATH

    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Lexicon file {file_path} must contain a JSON object")

    for key in ('positive', 'negative'):
        if not isinstance(data.get(key), list):
            raise ValueError(f"Lexicon file {file_path} is missing the '{key}' list")

    lexicon = Lexicon.from_words(
        positive=data['positive'],
        negative=data['negative'],
        stop_words=data.get('stop_words', []),
    )
    logger.debug(
        f"Loaded lexicon from {file_path}: {len(lexicon.positive)} positive, "
        f"{len(lexicon.negative)} negative, {len(lexicon.stop_words)} stop words"
    )
    return lexicon
