import pytest

from wordle_ai.corpus import Corpus
from wordle_ai.language import Language


SMALL_WORDS = [
    "about", "apple", "caret", "cater", "crane", "crate", "eerie", "erase", "geese",
    "hello", "jazzy", "mamma", "react", "slate", "speed", "trace", "world",
]

# Four near-identical candidates and one probe word that separates them all
PROBE_WORDS = ["abcde", "abcdf", "abcdg", "abcdh", "efghz"]


@pytest.fixture
def corpus():
    return Corpus.from_words(SMALL_WORDS, language=Language.ENGLISH)


@pytest.fixture
def probe_corpus():
    return Corpus.from_words(PROBE_WORDS)


@pytest.fixture
def word_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("\n".join(SMALL_WORDS + ["toolong", "tiny", ""]) + "\n", encoding="utf-8")
    return str(path)
