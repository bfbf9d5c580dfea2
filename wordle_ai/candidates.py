"""
Candidate Filter
================

A word stays a candidate iff, had it been the secret, it would have
produced exactly the feedback that was observed. Applying this test for
every guess in a history gives the same set regardless of order.
"""

from collections import defaultdict
from typing import AbstractSet, Dict, FrozenSet, Iterable, List

import numpy as np

from .corpus import Corpus
from .feedback import compute_entropy, compute_feedback_row, feedback_pattern, n_patterns
from .game import Guess


def filter_candidates(candidates: Iterable[str], guess: Guess) -> FrozenSet[str]:
    """
    Keep the candidates consistent with one scored guess.

    May return an empty set; callers decide whether that is an error.
    """
    pattern = guess.pattern
    return frozenset(c for c in candidates if feedback_pattern(c, guess.word) == pattern)


def filter_history(candidates: Iterable[str], history: Iterable[Guess]) -> FrozenSet[str]:
    """Apply filter_candidates for every guess in turn."""
    remaining = frozenset(candidates)
    for guess in history:
        remaining = filter_candidates(remaining, guess)
    return remaining


def partition_candidates(guess: str, candidates: Iterable[str]) -> Dict[int, List[str]]:
    """Group candidates by the feedback pattern the guess would produce."""
    partitions = defaultdict(list)
    for c in sorted(candidates):
        partitions[feedback_pattern(c, guess)].append(c)
    return dict(partitions)


def partition_sizes(guess: str, candidates: AbstractSet[str], corpus: Corpus) -> np.ndarray:
    """Bucket sizes indexed by pattern code, computed with the numba kernel."""
    answers = corpus.encode_many(sorted(candidates))
    row = compute_feedback_row(corpus.encode(guess), answers, corpus.n_letters)
    return np.bincount(row, minlength=n_patterns(corpus.word_length))


def guess_entropy(guess: str, candidates: AbstractSet[str], corpus: Corpus) -> float:
    """Expected information, in bits, from guessing a word against the candidates."""
    if not candidates:
        return 0.0
    return float(compute_entropy(partition_sizes(guess, candidates, corpus), len(candidates)))
