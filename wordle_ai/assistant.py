"""
Solving assistant: an agent proposes words for a game played elsewhere and
the user reports the feedback the real game showed.
"""

import logging
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union

from .agents import Agent
from .candidates import filter_candidates
from .corpus import Corpus, normalize_word
from .errors import EmptyCandidateSet, InvalidWordLength
from .feedback import Feedback, LetterFeedback, is_all_correct, parse_feedback
from .game import Guess

logger = logging.getLogger(__name__)


class AssistantSession:
    """Tracks candidates and rejected words across one assisted game."""

    def __init__(self, agent: Agent, corpus: Corpus):
        self.agent = agent
        self.base_corpus = corpus
        self.reset()

    def reset(self) -> None:
        self.corpus = self.base_corpus
        self.candidates: FrozenSet[str] = self.base_corpus.word_set
        self.history: List[Guess] = []
        self.rejected: set = set()
        self.solved = False

    def suggest(self) -> str:
        """
        Next word to try.

        Raises:
            EmptyCandidateSet: no word fits the reported feedback
        """
        return self.agent.choose_guess(self.candidates, self.corpus, tuple(self.history))

    def record(self, word: str, feedback: Union[str, Sequence[LetterFeedback]]) -> Guess:
        """Apply the feedback the real game gave for a word."""
        word = normalize_word(word)
        if len(word) != self.corpus.word_length:
            raise InvalidWordLength(word, self.corpus.word_length)

        parsed: Feedback = parse_feedback(feedback) if isinstance(feedback, str) else tuple(
            LetterFeedback(f) for f in feedback)
        if len(parsed) != len(word):
            raise ValueError(f"Feedback has {len(parsed)} letters, '{word}' has {len(word)}")

        guess = Guess(word, parsed)
        self.history.append(guess)
        self.candidates = filter_candidates(self.candidates, guess)
        self.solved = is_all_correct(parsed)
        logger.debug("Recorded %s, %d candidates left", guess, len(self.candidates))
        return guess

    def reject(self, word: str) -> None:
        """
        Never suggest a word the real game refused.

        Raises:
            EmptyCandidateSet: the word is the last one left in the corpus;
                the session is left unchanged
        """
        word = normalize_word(word)
        corpus = self.corpus
        if word in corpus:
            if len(corpus) == 1:
                raise EmptyCandidateSet(f"'{word}' is the last word in the list and cannot be rejected")
            corpus = corpus.without([word])

        self.corpus = corpus
        self.rejected.add(word)
        self.candidates = self.candidates - {word}
        logger.warning("'%s' was rejected by the game and will not be suggested again", word)

    @property
    def turns(self) -> int:
        return len(self.history)

    def top_candidates(self, limit: int = 10) -> Tuple[str, ...]:
        return tuple(sorted(self.candidates)[:limit])

    def last_guess(self) -> Optional[Guess]:
        return self.history[-1] if self.history else None
