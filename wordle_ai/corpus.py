"""
Word Corpus
===========

An immutable, deduplicated set of same-length words for one language.

Besides the word set, the corpus keeps a numpy char-code matrix so the
numba kernels in feedback.py can score whole word lists at once:

- every letter of the corpus alphabet gets a code 0..n_letters-1
- letters outside the alphabet map to n_letters ("unknown"), which never
  matches a corpus letter
"""

import logging
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidAlphabet, InvalidWordLength
from .language import Language

logger = logging.getLogger(__name__)


def normalize_word(word: str) -> str:
    """Words compare case-insensitively; str.casefold would turn 'ß' into 'ss'."""
    return word.strip().lower()


class Corpus:
    """
    Read-only word list shared by every game and simulation trial.

    Words are kept sorted, so index order is lexical order.
    """

    def __init__(self, words: Sequence[str], language: Optional[Language] = None):
        self.words: Tuple[str, ...] = tuple(words)
        self.language = language
        self.word_length = len(self.words[0])
        self.word_set: FrozenSet[str] = frozenset(self.words)
        self.index: Dict[str, int] = {w: i for i, w in enumerate(self.words)}

        letters = sorted(set(''.join(self.words)))
        self.letter_codes: Dict[str, int] = {c: i for i, c in enumerate(letters)}
        self.n_letters = len(letters)

        self.chars = self._words_to_chars(self.words)
        self.chars.setflags(write=False)
        self._hash = None

    @classmethod
    def from_words(cls, words: Iterable[str], language: Optional[Language] = None,
                   word_length: Optional[int] = None) -> "Corpus":
        """
        Normalize, deduplicate and validate a word list.

        Raises:
            ValueError: the list is empty
            InvalidWordLength: a word differs from word_length (or from the
                first word when word_length is None)
            InvalidAlphabet: a word uses letters outside the language alphabet
        """
        normalized = sorted({normalize_word(w) for w in words if w.strip()})
        if not normalized:
            raise ValueError("Word list is empty")

        expected = word_length if word_length is not None else len(normalized[0])
        alphabet = language.alphabet if language is not None else None
        for w in normalized:
            if len(w) != expected:
                raise InvalidWordLength(w, expected)
            if alphabet is not None:
                extra = set(w) - alphabet
                if extra:
                    raise InvalidAlphabet(w, extra)

        return cls(normalized, language)

    def _words_to_chars(self, words: Sequence[str]) -> np.ndarray:
        """Convert words to a (n_words, word_length) char code array."""
        arr = np.full((len(words), self.word_length), self.n_letters, dtype=np.int32)
        for i, w in enumerate(words):
            for j, c in enumerate(w):
                arr[i, j] = self.letter_codes.get(c, self.n_letters)
        return arr

    def encode(self, word: str) -> np.ndarray:
        """Char codes for one word, which need not be in the corpus."""
        return self._words_to_chars([word])[0]

    def encode_many(self, words: Sequence[str]) -> np.ndarray:
        """Char codes for several words, reusing the corpus rows where possible."""
        if all(w in self.index for w in words):
            return self.chars[[self.index[w] for w in words]].reshape(len(words), self.word_length)
        return self._words_to_chars(words)

    def without(self, words: Iterable[str]) -> "Corpus":
        """A new corpus with the given words removed."""
        dropped = {normalize_word(w) for w in words}
        kept = [w for w in self.words if w not in dropped]
        if not kept:
            raise ValueError("Removing these words would leave the corpus empty")
        return Corpus(kept, self.language)

    def random_word(self, rng: np.random.Generator) -> str:
        return self.words[int(rng.integers(len(self.words)))]

    def __contains__(self, word) -> bool:
        return isinstance(word, str) and normalize_word(word) in self.word_set

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash((self.language, self.words))
        return self._hash

    def __getstate__(self):
        # str hashes differ between processes
        state = self.__dict__.copy()
        state['_hash'] = None
        return state

    def __eq__(self, other) -> bool:
        if not isinstance(other, Corpus):
            return NotImplemented
        return self.language == other.language and self.words == other.words

    def __repr__(self) -> str:
        lang = self.language.code if self.language else "?"
        return f"Corpus({len(self.words)} words, length={self.word_length}, language={lang})"


# ============================================================================
# LOADING
# ============================================================================

def load_words(filepath: str) -> List[str]:
    """Load word list from file."""
    with open(filepath, 'r', encoding='utf-8') as f:
        return [normalize_word(line) for line in f if line.strip()]


def load_corpus(filepath: str, language: Language = Language.ENGLISH,
                word_length: int = 5) -> Corpus:
    """
    Load a corpus from a one-word-per-line file.

    Lines of the wrong length are skipped rather than rejected.
    """
    words = load_words(filepath)
    kept = [w for w in words if len(w) == word_length]
    skipped = len(words) - len(kept)
    if skipped:
        logger.info("Skipped %d words of the wrong length in %s", skipped, filepath)
    corpus = Corpus.from_words(kept, language=language, word_length=word_length)
    logger.info("Loaded %s from %s", corpus, filepath)
    return corpus
