"""Exceptions raised by the game, the candidate filter and the agents."""


class WordleError(Exception):
    """Base class for all recoverable puzzle errors."""


class InvalidGuess(WordleError, ValueError):
    """A word was refused by the game or the corpus."""

    def __init__(self, word: str, message: str = None):
        self.word = word
        super().__init__(message or f"Invalid guess: '{word}'")


class InvalidWordLength(InvalidGuess):
    def __init__(self, word: str, expected: int):
        self.expected = expected
        super().__init__(word, f"'{word}' has {len(word)} letters, expected {expected}")


class WordNotInCorpus(InvalidGuess):
    def __init__(self, word: str):
        super().__init__(word, f"'{word}' is not in the word list")


class InvalidAlphabet(InvalidGuess):
    def __init__(self, word: str, letters):
        self.letters = ''.join(sorted(letters))
        super().__init__(word, f"'{word}' uses letters outside the alphabet: {self.letters}")


class GameAlreadyOver(WordleError):
    """A guess was submitted after the game reached Won or Lost."""


class EmptyCandidateSet(WordleError):
    """
    No word is consistent with the feedback seen so far.

    Either the feedback was entered wrongly or the secret is not in the
    corpus. Callers recover from it; it is never a crash.
    """
