"""
Feedback Engine
===============

Per-letter feedback for a guess against a secret, with duplicate-letter
accounting:

1. positional matches are marked CORRECT first and use up one occurrence
   of the letter in the secret
2. the remaining positions are PRESENT while unused occurrences of the
   letter remain, ABSENT otherwise

A feedback sequence is also encoded as an integer pattern
sum(f[i] * 3**i), so the all-correct pattern for 5 letters is 242.

score() is the reference implementation. The numba kernels below operate
on the char-code matrices built by Corpus and are used where whole word
lists are scored at once.
"""

from collections import Counter
from enum import IntEnum
from typing import Iterable, Tuple, Union

import numpy as np
from numba import jit, prange


# ============================================================================
# CONSTANTS
# ============================================================================

class LetterFeedback(IntEnum):
    ABSENT = 0
    PRESENT = 1
    CORRECT = 2


# Single-letter codes used by pattern strings: B(lack), Y(ellow), G(reen)
FEEDBACK_CHARS = {
    LetterFeedback.ABSENT: 'B',
    LetterFeedback.PRESENT: 'Y',
    LetterFeedback.CORRECT: 'G',
}
CHAR_FEEDBACK = {c: f for f, c in FEEDBACK_CHARS.items()}

Feedback = Tuple[LetterFeedback, ...]


def n_patterns(word_length: int) -> int:
    """Number of distinct feedback patterns: 3^L."""
    return 3 ** word_length


def correct_pattern(word_length: int) -> int:
    """Pattern code of an all-CORRECT feedback."""
    return n_patterns(word_length) - 1


# ============================================================================
# REFERENCE IMPLEMENTATION
# ============================================================================

def score(secret: str, guess: str) -> Feedback:
    """
    Compute feedback for a guess against a secret of the same length.

    >>> feedback_to_string(score("crane", "react"))
    'YYGYB'
    """
    if len(secret) != len(guess):
        raise ValueError(f"Length mismatch: '{secret}' vs '{guess}'")

    feedback = [LetterFeedback.ABSENT] * len(guess)
    remaining = Counter(secret)

    # First pass: mark correct positions
    for i, (g, s) in enumerate(zip(guess, secret)):
        if g == s:
            feedback[i] = LetterFeedback.CORRECT
            remaining[g] -= 1

    # Second pass: mark present letters while occurrences remain
    for i, g in enumerate(guess):
        if feedback[i] == LetterFeedback.CORRECT:
            continue
        if remaining[g] > 0:
            feedback[i] = LetterFeedback.PRESENT
            remaining[g] -= 1

    return tuple(feedback)


def feedback_pattern(secret: str, guess: str) -> int:
    """Integer pattern code of score(secret, guess)."""
    return feedback_to_pattern(score(secret, guess))


def is_all_correct(feedback: Iterable[LetterFeedback]) -> bool:
    return all(f == LetterFeedback.CORRECT for f in feedback)


# ============================================================================
# PATTERN CODEC
# ============================================================================

def feedback_to_pattern(feedback: Iterable[LetterFeedback]) -> int:
    """Convert a feedback sequence to its integer code."""
    result = 0
    multiplier = 1
    for f in feedback:
        result += int(f) * multiplier
        multiplier *= 3
    return result


def pattern_to_feedback(pattern: int, word_length: int) -> Feedback:
    """Convert an integer code back to a feedback sequence."""
    if not 0 <= pattern < n_patterns(word_length):
        raise ValueError(f"Invalid pattern {pattern} for word length {word_length}")
    feedback = []
    for _ in range(word_length):
        feedback.append(LetterFeedback(pattern % 3))
        pattern //= 3
    return tuple(feedback)


def feedback_to_string(feedback: Union[int, Iterable[LetterFeedback]], word_length: int = 5) -> str:
    """Render feedback as a B/Y/G string, e.g. 'BBYGG'."""
    if isinstance(feedback, (int, np.integer)) and not isinstance(feedback, LetterFeedback):
        feedback = pattern_to_feedback(int(feedback), word_length)
    return ''.join(FEEDBACK_CHARS[LetterFeedback(f)] for f in feedback)


def parse_feedback(text: str) -> Feedback:
    """
    Parse a B/Y/G string. '-', '.', '0' are accepted for absent, '1' for
    present and '2' for correct; case is ignored.
    """
    aliases = {'-': 'B', '.': 'B', '0': 'B', '1': 'Y', '2': 'G'}
    feedback = []
    for c in text.strip().upper():
        c = aliases.get(c, c)
        if c not in CHAR_FEEDBACK:
            raise ValueError(f"Invalid feedback character '{c}' in '{text}' (use B, Y or G)")
        feedback.append(CHAR_FEEDBACK[c])
    return tuple(feedback)


# ============================================================================
# NUMBA-ACCELERATED FEEDBACK COMPUTATION
# ============================================================================

@jit(nopython=True, cache=True)
def compute_feedback(guess: np.ndarray, answer: np.ndarray, n_letters: int) -> int:
    """
    Compute the feedback pattern for a guess against an answer.

    Args:
        guess: shape (L,) array of char codes
        answer: shape (L,) array of char codes
        n_letters: alphabet size; code n_letters is the unknown letter

    Returns:
        Integer feedback pattern (0 to 3^L - 1)
    """
    length = guess.shape[0]
    feedback = np.zeros(length, dtype=np.int64)
    answer_counts = np.zeros(n_letters + 1, dtype=np.int64)

    for i in range(length):
        answer_counts[answer[i]] += 1

    # First pass: mark greens
    for i in range(length):
        if guess[i] == answer[i]:
            feedback[i] = 2
            answer_counts[guess[i]] -= 1

    # Second pass: mark yellows
    for i in range(length):
        if feedback[i] == 0 and answer_counts[guess[i]] > 0:
            feedback[i] = 1
            answer_counts[guess[i]] -= 1

    pattern = 0
    multiplier = 1
    for i in range(length):
        pattern += feedback[i] * multiplier
        multiplier *= 3
    return pattern


@jit(nopython=True, cache=True)
def compute_feedback_row(guess: np.ndarray, answer_chars: np.ndarray, n_letters: int) -> np.ndarray:
    """Feedback patterns of one guess against every answer row."""
    n_answers = answer_chars.shape[0]
    result = np.zeros(n_answers, dtype=np.int64)
    for j in range(n_answers):
        result[j] = compute_feedback(guess, answer_chars[j], n_letters)
    return result


@jit(nopython=True, cache=True)
def compute_entropy(sizes: np.ndarray, total: int) -> float:
    """Shannon entropy (bits) of a partition given its bucket sizes."""
    if total == 0:
        return 0.0

    entropy = 0.0
    for s in sizes:
        if s > 0:
            p = s / total
            entropy -= p * np.log2(p)

    return entropy


@jit(nopython=True, parallel=True, cache=True)
def compute_entropies(guess_chars: np.ndarray, answer_chars: np.ndarray,
                      n_letters: int, n_patterns: int) -> np.ndarray:
    """
    Expected information of every guess against a set of possible answers.

    For each guess the answers are bucketed by the feedback pattern they
    would produce; the result is the entropy of that partition. Guesses are
    processed in parallel and the full feedback matrix is never stored.

    Args:
        guess_chars: shape (n_guesses, L) array of char codes
        answer_chars: shape (n_answers, L) array of char codes

    Returns:
        shape (n_guesses,) array of entropies in bits
    """
    n_guesses = guess_chars.shape[0]
    n_answers = answer_chars.shape[0]
    result = np.zeros(n_guesses, dtype=np.float64)

    for i in prange(n_guesses):
        sizes = np.zeros(n_patterns, dtype=np.int64)
        for j in range(n_answers):
            sizes[compute_feedback(guess_chars[i], answer_chars[j], n_letters)] += 1
        result[i] = compute_entropy(sizes, n_answers)

    return result
