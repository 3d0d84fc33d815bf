# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
Dictionary index for the Soletra generator.

Groups a flat word list by normalized form (uppercase, no diacritics) and
answers letter-subset queries. The index is built once per process through
``DictionaryProvider`` and shared read-only afterwards.
"""

import logging
import threading
import time
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from models import normalize_word


MIN_WORD_LENGTH = 4

logger = logging.getLogger(__name__)


class DictionaryIndex:
    """
    Read-only mapping of normalized word -> original spellings.

    Accented spellings that normalize to the same key are kept together,
    e.g. 'AVOS' -> ['avós', 'avôs'].
    """

    def __init__(self, entries: Optional[Mapping[str, Iterable[str]]] = None):
        index: Dict[str, Tuple[str, ...]] = {}
        for normalized, originals in (entries or {}).items():
            index[normalized] = tuple(originals)
        self._entries = MappingProxyType(index)
        # Distinct letters per word, used by every subset query
        self._letters: Dict[str, FrozenSet[str]] = {
            word: frozenset(word) for word in index
        }

    @classmethod
    def build(cls, word_list_text: str, min_length: int = MIN_WORD_LENGTH) -> 'DictionaryIndex':
        """
        Index a newline-delimited word list.

        Lines are trimmed; entries shorter than ``min_length`` after
        normalization are skipped.
        """
        start_time = time.time()
        grouped: Dict[str, List[str]] = {}
        line_count = 0

        for line in word_list_text.splitlines():
            original = line.strip()
            if not original:
                continue
            line_count += 1
            normalized = normalize_word(original)
            if len(normalized) < min_length:
                continue
            spellings = grouped.setdefault(normalized, [])
            if original not in spellings:
                spellings.append(original)

        index = cls(grouped)
        elapsed = (time.time() - start_time) * 1000
        logger.info(
            f"Dictionary indexed: {line_count} words, "
            f"{len(index)} unique in {elapsed:.0f}ms"
        )
        return index

    @classmethod
    def from_file(cls, path: str, min_length: int = MIN_WORD_LENGTH) -> 'DictionaryIndex':
        """
        Load and index a word list file.

        An unreadable file yields an empty index; callers treat an empty
        dictionary as a valid, degenerate state.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not load dictionary {path}: {e}")
            return cls()

        logger.debug(f"Loading dictionary from {path}")
        return cls.build(text, min_length=min_length)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word: str) -> bool:
        return normalize_word(word) in self._entries

    def __iter__(self):
        return iter(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def originals(self, word: str) -> List[str]:
        """Original spellings for a word (any spelling is accepted)."""
        return list(self._entries.get(normalize_word(word), ()))

    def find_by_subset_and_required(
        self,
        letters: Iterable[str],
        required: str,
        min_length: int = MIN_WORD_LENGTH,
    ) -> List[str]:
        """
        Every indexed word whose letters all come from ``letters`` and that
        contains ``required`` at least once. Letters may repeat in a word.

        Returns normalized words in dictionary order.
        """
        letter_pool = frozenset(normalize_word(''.join(letters)))
        center = normalize_word(required)
        if len(center) != 1:
            return []

        results = []
        for word, word_letters in self._letters.items():
            if len(word) < min_length:
                continue
            if center not in word_letters:
                continue
            if word_letters <= letter_pool:
                results.append(word)
        return results


class DictionaryProvider:
    """
    Lazily builds a DictionaryIndex exactly once.

    Concurrent first calls to ``get()`` block on a lock so only one of them
    loads the word list; everyone receives the same index object.

    Usage:
        provider = DictionaryProvider("data/palavras.txt")
        index = provider.get()
    """

    def __init__(
        self,
        path: Optional[str] = None,
        loader: Optional[Callable[[], DictionaryIndex]] = None,
    ):
        """
        Args:
            path: Word list file, loaded with DictionaryIndex.from_file
            loader: Zero-argument factory used instead of ``path`` (tests
                    pass a fake dictionary here)
        """
        if loader is None and path is None:
            raise ValueError("DictionaryProvider needs a path or a loader")
        self.path = path
        self._loader = loader or (lambda: DictionaryIndex.from_file(path))
        self._index: Optional[DictionaryIndex] = None
        self._lock = threading.Lock()
        self.load_count = 0

    @classmethod
    def from_index(cls, index: DictionaryIndex) -> 'DictionaryProvider':
        """Provider around an already built index."""
        provider = cls(loader=lambda: index)
        provider.get()
        return provider

    @property
    def loaded(self) -> bool:
        return self._index is not None

    def get(self) -> DictionaryIndex:
        """Return the index, building it on first use."""
        index = self._index
        if index is not None:
            return index

        with self._lock:
            if self._index is None:
                self._index = self._loader()
                self.load_count += 1
                if self._index.is_empty():
                    logger.warning("Dictionary is empty - Soletra will find no words")
            return self._index
