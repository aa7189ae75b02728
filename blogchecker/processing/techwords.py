"""
Techword Matcher
================

Compiles a techword list into one case-insensitive regular expression and
counts matches in sanitized entry text.

Words are split by shape:

- words containing a Latin letter or digit (``[a-zA-Z0-9À-ÿ]``) must stand
  alone: the characters on either side must be a text edge or something
  outside that class, so ``Go`` never matches inside ``Golang``. The signs
  ``×`` and ``÷`` sit in that range but still separate words;
- words without such a character (symbols, emoji, CJK terms) match anywhere
  as plain substrings.
"""

import re
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..utils.logging import get_logger_for_component


WORD_CHARS = "a-zA-Z0-9À-ÿ"
_WORD_CHAR_PATTERN = re.compile(f"[{WORD_CHARS}]")

# Same range minus the math signs \u00d7 and \u00f7, which separate words
BOUNDARY_CHARS = "a-zA-Z0-9\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u00ff"

# Never matches anything, for empty word lists
_NOTHING = "(?!)"


@dataclass(frozen=True)
class TechwordPattern:
    """Compiled techword matcher. Immutable once built."""

    regex: re.Pattern
    space_delimited: Tuple[str, ...]
    non_space_delimited: Tuple[str, ...]

    @property
    def word_count(self) -> int:
        return len(self.space_delimited) + len(self.non_space_delimited)

    @property
    def is_empty(self) -> bool:
        return self.word_count == 0


def is_space_delimited(word: str) -> bool:
    """True if the word contains at least one Latin letter or digit."""
    return _WORD_CHAR_PATTERN.search(word) is not None


def normalize_words(words: Iterable[str]) -> List[str]:
    """Strip entries, drop blanks and duplicates, order longest first.

    Ordering is by length (descending) then case-insensitively by text, so
    the same set of words always yields the same alternation regardless of
    file order, and longer literals win over their own prefixes.
    """
    seen = set()
    cleaned: List[str] = []
    for word in words:
        if not isinstance(word, str):
            continue
        word = word.strip()
        if not word:
            continue
        key = word.casefold()
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(word)

    return sorted(cleaned, key=lambda w: (-len(w), w.casefold(), w))


def _alternation(words: Sequence[str]) -> str:
    return "|".join(re.escape(word) for word in words)


def compile_techwords(words: Iterable[str]) -> TechwordPattern:
    """Build a TechwordPattern from a word list.

    Args:
        words: Techwords; entries are literal text, never regex syntax

    Returns:
        Compiled, immutable pattern
    """
    normalized = normalize_words(words)
    space_delimited = tuple(w for w in normalized if is_space_delimited(w))
    non_space_delimited = tuple(w for w in normalized if not is_space_delimited(w))

    branches = []
    if space_delimited:
        branches.append(
            f"(?<![{BOUNDARY_CHARS}])(?:{_alternation(space_delimited)})(?![{BOUNDARY_CHARS}])"
        )
    if non_space_delimited:
        branches.append(f"(?:{_alternation(non_space_delimited)})")

    source = "|".join(branches) if branches else _NOTHING

    return TechwordPattern(
        regex=re.compile(source, re.IGNORECASE),
        space_delimited=space_delimited,
        non_space_delimited=non_space_delimited,
    )


def count_techwords(pattern: TechwordPattern, text: Optional[str]) -> int:
    """Count non-overlapping techword matches, scanning left to right."""
    if not text:
        return 0
    return sum(1 for _ in pattern.regex.finditer(text))


def find_techwords(pattern: TechwordPattern, text: Optional[str]) -> List[str]:
    """Return matched substrings in the order they occur."""
    if not text:
        return []
    return [match.group(0) for match in pattern.regex.finditer(text)]


class TechwordPatternProvider:
    """Builds the shared TechwordPattern once, on first use.

    The loader is called at most once per provider even under concurrent
    first access; later calls return the same pattern object.
    """

    def __init__(self, loader: Callable[[], Iterable[str]]):
        """Initialize provider.

        Args:
            loader: Callable returning the word list (e.g. reads TECHWORDS_PATH)
        """
        self._loader = loader
        self._pattern: Optional[TechwordPattern] = None
        self._lock = threading.Lock()
        self.logger = get_logger_for_component("techwords")

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "TechwordPatternProvider":
        """Provider over a fixed in-memory word list."""
        words = list(words)
        return cls(lambda: words)

    @property
    def initialized(self) -> bool:
        return self._pattern is not None

    def get(self) -> TechwordPattern:
        """Return the pattern, building it on first call."""
        pattern = self._pattern
        if pattern is not None:
            return pattern

        with self._lock:
            if self._pattern is None:
                words = list(self._loader())
                built = compile_techwords(words)
                self.logger.info(
                    f"Compiled techword pattern: {len(built.space_delimited)} space-delimited, "
                    f"{len(built.non_space_delimited)} non-space-delimited words"
                )
                self._pattern = built
            return self._pattern
