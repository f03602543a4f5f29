"""Hot-word counting over chat messages."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Mapping
from pathlib import Path

MAX_MESSAGES = 10000
DEFAULT_MESSAGES = 1000
TOP_N = 20

_CHINESE = re.compile(r"[一-龥]+")


def load_stopwords(path: str | Path) -> list[str]:
    """Read a newline-separated stopword file, sorted."""
    text = Path(path).read_text(encoding="utf-8").replace("\r", "")
    return sorted(text.split("\n"))


def is_chinese_word(text: str) -> bool:
    """True when ``text`` is made only of CJK ideographs."""
    return _CHINESE.fullmatch(text) is not None


def clamp_message_count(count: int) -> int:
    """Cap the number of messages at 10000; 0 means the default of 1000."""
    if count > MAX_MESSAGES:
        return MAX_MESSAGES
    if count == 0:
        return DEFAULT_MESSAGES
    return count


def rank_by_word_count(frequencies: Mapping[str, int]) -> list[tuple[str, int]]:
    """Pairs of (word, count), most frequent first."""
    return sorted(frequencies.items(), key=lambda pair: pair[1], reverse=True)


class WordCounter:
    """Counts Chinese words that are not stopwords."""

    def __init__(self, stopwords: Iterable[str] = ()):
        self._stopwords = frozenset(stopwords)
        self._counts: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._counts)

    def add(self, words: Iterable[str]) -> None:
        """Count each word after trimming, skipping stopwords and non-Chinese text."""
        for word in words:
            word = word.strip()
            if is_chinese_word(word) and word not in self._stopwords:
                self._counts[word] += 1

    def top(self, n: int = TOP_N) -> list[tuple[str, int]]:
        """The ``n`` most frequent words with their counts."""
        return rank_by_word_count(self._counts)[:n]