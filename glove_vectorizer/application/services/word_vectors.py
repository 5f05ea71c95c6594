from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional
from loguru import logger
import numpy as np

from glove_vectorizer.application.errors import StoreError
from glove_vectorizer.application.services.tokenizer import StopwordFilter
from glove_vectorizer.application.services.word_store import WordStore, decode_vector


@dataclass
class WordVectorLookup:
    """
    Resolves tokens to stored vectors.

    resolve() is a two-step lookup: the token as given, then its lowercase
    form. None means "not found" and the token is simply skipped; a read
    error on the exact lookup or an undecodable value raises StoreError.
    """
    store: WordStore
    dimension: int
    stopwords: StopwordFilter

    def _exact(self, token: str) -> Optional[bytes]:
        return self.store.get(token.encode("utf-8"))

    def _lowercase(self, token: str) -> Optional[bytes]:
        lowered = token.lower()
        try:
            return self.store.get(lowered.encode("utf-8"))
        except StoreError as e:
            # a failed retry counts as a miss
            logger.warning("Lowercase lookup for '{}' failed, treating as not found: {}", lowered, e)
            return None

    def resolve(self, token: str) -> Optional[np.ndarray]:
        raw = self._exact(token)
        if raw is None:
            raw = self._lowercase(token)
            if raw is None:
                return None
        return decode_vector(raw, self.dimension)

    def vector_for_word(self, token: str) -> Optional[np.ndarray]:
        if self.stopwords.is_stopword(token):
            return None
        return self.resolve(token)

    def vectors_for_words(self, tokens: Iterable[str]) -> List[np.ndarray]:
        """Vectors for the tokens that resolved, in token order."""
        vectors: List[np.ndarray] = []
        for token in tokens:
            vec = self.vector_for_word(token)
            if vec is not None:
                vectors.append(vec)
        return vectors
