"""
Game State Machine
==================

One puzzle instance: a hidden secret, the guesses made so far and the
terminal status.

    IN_PROGRESS --all-correct feedback--> WON
    IN_PROGRESS --max guesses used------> LOST
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .config import GameConfig
from .corpus import Corpus, normalize_word
from .errors import GameAlreadyOver, InvalidWordLength, WordNotInCorpus
from .feedback import Feedback, feedback_to_pattern, feedback_to_string, is_all_correct, score

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.IN_PROGRESS


@dataclass(frozen=True)
class Guess:
    """A guessed word and the feedback it received."""
    word: str
    feedback: Feedback

    @property
    def pattern(self) -> int:
        return feedback_to_pattern(self.feedback)

    @property
    def is_correct(self) -> bool:
        return is_all_correct(self.feedback)

    def __str__(self) -> str:
        return f"{self.word} {feedback_to_string(self.feedback)}"


class Game:
    """
    A single game against a hidden secret.

    The secret is validated for length only, so a game can be played against
    a word the corpus does not contain.
    """

    def __init__(self, corpus: Corpus, secret: str, config: GameConfig = None):
        self.corpus = corpus
        self.config = config or GameConfig(language=corpus.language or GameConfig.language,
                                           word_length=corpus.word_length)
        if self.config.word_length != corpus.word_length:
            raise ValueError(f"Config word length {self.config.word_length} does not match "
                             f"corpus word length {corpus.word_length}")
        if self.config.max_guesses < 1:
            raise ValueError("max_guesses must be at least 1")

        secret = normalize_word(secret)
        if len(secret) != corpus.word_length:
            raise InvalidWordLength(secret, corpus.word_length)

        self._secret = secret
        self._guesses = []
        self._status = GameStatus.IN_PROGRESS

    @classmethod
    def start(cls, corpus: Corpus, secret: Optional[str] = None, max_guesses: Optional[int] = None,
              rng: Optional[np.random.Generator] = None, allow_unknown_words: bool = False) -> "Game":
        """
        Start a game with an empty guess history.

        When no secret is given one is drawn uniformly from the corpus.
        """
        if secret is None:
            rng = rng if rng is not None else np.random.default_rng()
            secret = corpus.random_word(rng)
        config = GameConfig(
            language=corpus.language or GameConfig.language,
            word_length=corpus.word_length,
            max_guesses=max_guesses if max_guesses is not None else GameConfig.max_guesses,
            allow_unknown_words=allow_unknown_words,
        )
        return cls(corpus, secret, config)

    @property
    def secret(self) -> str:
        """The hidden word; agents only ever see the guess history."""
        return self._secret

    @property
    def guesses(self) -> Tuple[Guess, ...]:
        return tuple(self._guesses)

    @property
    def turns(self) -> int:
        return len(self._guesses)

    @property
    def max_guesses(self) -> int:
        return self.config.max_guesses

    @property
    def guesses_left(self) -> int:
        return self.config.max_guesses - len(self._guesses)

    def status(self) -> GameStatus:
        return self._status

    def validate(self, word: str) -> str:
        """
        Normalize a guess and apply the corpus-membership policy.

        Raises:
            InvalidWordLength: wrong number of letters
            WordNotInCorpus: off-corpus word while allow_unknown_words is off
        """
        word = normalize_word(word)
        if len(word) != self.corpus.word_length:
            raise InvalidWordLength(word, self.corpus.word_length)
        if not self.config.allow_unknown_words and word not in self.corpus:
            raise WordNotInCorpus(word)
        return word

    def submit_guess(self, word: str) -> Guess:
        """
        Score a guess, record it and update the status.

        Raises:
            GameAlreadyOver: the game is already WON or LOST
            InvalidGuess: see validate(); a rejected guess does not use a turn
        """
        if self._status.is_terminal:
            raise GameAlreadyOver(f"Game is over ({self._status.value}); '{word}' not accepted")

        word = self.validate(word)
        guess = Guess(word, score(self._secret, word))
        self._guesses.append(guess)

        if guess.is_correct:
            self._status = GameStatus.WON
        elif len(self._guesses) >= self.config.max_guesses:
            self._status = GameStatus.LOST

        logger.debug("Turn %d: %s -> %s", len(self._guesses), guess, self._status.value)
        return guess

    def __repr__(self) -> str:
        return f"Game(turn={self.turns}/{self.max_guesses}, status={self._status.value})"
