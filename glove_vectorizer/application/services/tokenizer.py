from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, List
import re

# Runs of unicode letters and/or numbers. [^\W_] is \w without the underscore,
# i.e. exactly the characters for which str.isalnum() is true.
_TOKEN_RE = re.compile(r"[^\W_]+")

# basic English stopwords + every single ASCII letter
DEFAULT_STOPWORDS: FrozenSet[str] = frozenset(
    ["the", "an", "of", "in", "and", "to", "was", "is", "for", "on", "as"]
    + [chr(c) for c in range(ord("a"), ord("z") + 1)]
)


def tokenize(text: str) -> List[str]:
    # "Hello, world-123!" -> ['Hello', 'world', '123']
    return _TOKEN_RE.findall(text or "")


@dataclass(frozen=True)
class StopwordFilter:
    """Case-insensitive stopword membership test. Built once at startup."""

    words: FrozenSet[str] = field(default=DEFAULT_STOPWORDS)

    @classmethod
    def default(cls) -> "StopwordFilter":
        return cls()

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "StopwordFilter":
        return cls(words=frozenset(w.strip().lower() for w in words if w.strip()))

    @classmethod
    def from_file(cls, path: Path, base: Iterable[str] = DEFAULT_STOPWORDS) -> "StopwordFilter":
        """One word per line; blank lines and '#' comments are ignored."""
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        extra = [ln for ln in lines if ln.strip() and not ln.lstrip().startswith("#")]
        return cls.from_words(list(base) + extra)

    def is_stopword(self, token: str) -> bool:
        return token.lower() in self.words

    def __len__(self) -> int:
        return len(self.words)
