import math
from itertools import product

import pytest

from wordle_ai.candidates import (
    filter_candidates,
    filter_history,
    guess_entropy,
    partition_candidates,
    partition_sizes,
)
from wordle_ai.corpus import Corpus
from wordle_ai.feedback import LetterFeedback, parse_feedback, score
from wordle_ai.game import Guess


def scored(secret, word):
    return Guess(word, score(secret, word))


def test_filter_keeps_only_consistent_words(corpus):
    remaining = filter_candidates(corpus.word_set, scored("crane", "slate"))
    assert "crane" in remaining
    assert "slate" not in remaining
    for word in remaining:
        assert score(word, "slate") == score("crane", "slate")


def test_filter_example():
    words = ["apple", "about", "hello"]
    guess = Guess("apple", parse_feedback("GBBBB"))
    assert filter_candidates(words, guess) == frozenset({"about"})


def test_secret_always_survives(corpus):
    for secret, word in product(corpus, repeat=2):
        assert secret in filter_candidates(corpus.word_set, scored(secret, word))


def test_filter_order_independent(corpus):
    g1 = scored("crate", "slate")
    g2 = scored("crate", "react")
    one_way = filter_candidates(filter_candidates(corpus.word_set, g1), g2)
    other_way = filter_candidates(filter_candidates(corpus.word_set, g2), g1)
    assert one_way == other_way == filter_history(corpus.word_set, [g1, g2])
    assert "crate" in one_way


def test_inconsistent_feedback_gives_empty_set(corpus):
    guess = Guess("crane", (LetterFeedback.CORRECT,) * 5)
    assert filter_candidates(corpus.word_set - {"crane"}, guess) == frozenset()


def test_partitions_cover_all_candidates(corpus):
    parts = partition_candidates("slate", corpus.word_set)
    assert sum(len(p) for p in parts.values()) == len(corpus)
    sizes = partition_sizes("slate", corpus.word_set, corpus)
    assert sizes.sum() == len(corpus)
    for pattern, words in parts.items():
        assert sizes[pattern] == len(words)


def test_guess_entropy_hand_computed(probe_corpus):
    # abcde splits {abcde | abcdf, abcdg, abcdh | efghz}: sizes 1, 3, 1
    expected = -(2 * 0.2 * math.log2(0.2) + 0.6 * math.log2(0.6))
    assert guess_entropy("abcde", probe_corpus.word_set, probe_corpus) == pytest.approx(expected)
    # efghz puts every word in its own bucket
    assert guess_entropy("efghz", probe_corpus.word_set, probe_corpus) == pytest.approx(math.log2(5))
    assert guess_entropy("efghz", frozenset(), probe_corpus) == 0.0


def test_guess_entropy_matches_partition_sizes(corpus):
    for word in ["slate", "crane", "mamma"]:
        parts = partition_candidates(word, corpus.word_set)
        total = len(corpus)
        expected = -sum(len(p) / total * math.log2(len(p) / total) for p in parts.values())
        assert guess_entropy(word, corpus.word_set, corpus) == pytest.approx(expected)


def test_guess_entropy_for_word_outside_corpus():
    corpus = Corpus.from_words(["abcde", "abcdf"])
    assert guess_entropy("zzzzf", corpus.word_set, corpus) == pytest.approx(1.0)
