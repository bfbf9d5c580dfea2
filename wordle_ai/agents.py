"""
Agent Strategies
================

Guess-selection policies. Every agent answers one question:

    choose_guess(candidates, corpus, history) -> word

where candidates are the corpus words still consistent with the history.
The set of strategies is closed (AgentKind); create_agent() maps a kind
to its implementation.

- RANDOM: any corpus word, ignores feedback (baseline)
- RANDOM_FILTERED: any remaining candidate
- HEURISTIC: candidate with the highest position-weighted letter frequency
- ENTROPY: corpus word whose feedback best splits the candidates
"""

import copy
import logging
import time
from enum import Enum
from typing import AbstractSet, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import ENTROPY_TOLERANCE
from .corpus import Corpus
from .errors import EmptyCandidateSet
from .feedback import compute_entropies, n_patterns
from .game import Guess

logger = logging.getLogger(__name__)


class AgentKind(Enum):
    RANDOM = "random"
    RANDOM_FILTERED = "random-filtered"
    HEURISTIC = "heuristic"
    ENTROPY = "entropy"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_name(cls, name: str) -> "AgentKind":
        key = name.strip().lower().replace('_', '-')
        for kind in cls:
            if kind.value == key:
                return kind
        known = ", ".join(kind.value for kind in cls)
        raise ValueError(f"Unknown agent '{name}' (expected one of: {known})")


_LABELS = {
    AgentKind.RANDOM: "Random Guesser",
    AgentKind.RANDOM_FILTERED: "Random with Filtering",
    AgentKind.HEURISTIC: "Heuristic Guesser",
    AgentKind.ENTROPY: "Entropy Guesser",
}


# ============================================================================
# BASE CLASS
# ============================================================================

class Agent:
    """Base class for guess-selection strategies."""

    kind: AgentKind

    def __init__(self, seed=None):
        self.rng = np.random.default_rng(seed)

    @property
    def name(self) -> str:
        return self.kind.label

    def choose_guess(self, candidates: AbstractSet[str], corpus: Corpus,
                     history: Sequence[Guess]) -> str:
        raise NotImplementedError

    def spawn(self, seed=None) -> "Agent":
        """Copy of this agent with its own random source."""
        agent = copy.copy(self)
        agent.rng = np.random.default_rng(seed)
        return agent

    def warm_up(self, corpus: Corpus) -> None:
        """Precompute per-corpus state before games are dispatched."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _require_candidates(candidates: AbstractSet[str]) -> List[str]:
    if not candidates:
        raise EmptyCandidateSet("No word is consistent with the feedback so far")
    return sorted(candidates)


# ============================================================================
# RANDOM AGENTS
# ============================================================================

class RandomAgent(Agent):
    """Uniform over the whole corpus, every turn."""

    kind = AgentKind.RANDOM

    def choose_guess(self, candidates, corpus, history):
        return corpus.random_word(self.rng)


class RandomFilteringAgent(Agent):
    """Uniform over the words still consistent with the feedback."""

    kind = AgentKind.RANDOM_FILTERED

    def choose_guess(self, candidates, corpus, history):
        words = _require_candidates(candidates)
        return words[int(self.rng.integers(len(words)))]


# ============================================================================
# HEURISTIC AGENT
# ============================================================================

def letter_scores(words: Sequence[str], corpus: Corpus) -> Tuple[np.ndarray, np.ndarray]:
    """
    Frequency scores for each word in a candidate list.

    Returns two integer arrays (so ties are exact):
        positional: for each word, sum over positions of how many candidates
            have the same letter at that position
        overall: for each word, sum over its distinct letters of how many
            candidates contain that letter anywhere
    """
    chars = corpus.encode_many(words)
    n_words, length = chars.shape
    n_codes = corpus.n_letters + 1

    pos_counts = np.zeros((length, n_codes), dtype=np.int64)
    for i in range(length):
        pos_counts[i] = np.bincount(chars[:, i], minlength=n_codes)
    positional = pos_counts[np.arange(length), chars].sum(axis=1)

    presence = np.zeros((n_words, n_codes), dtype=np.int64)
    presence[np.arange(n_words)[:, None], chars] = 1
    letter_counts = presence.sum(axis=0)
    overall = (presence * letter_counts).sum(axis=1)

    return positional, overall


class HeuristicAgent(Agent):
    """
    Picks the candidate built from the most common letters in the most
    common positions.

    Ties on the positional score are broken by overall letter frequency,
    then by lexical order, so the agent is deterministic.
    """

    kind = AgentKind.HEURISTIC

    def choose_guess(self, candidates, corpus, history):
        words = _require_candidates(candidates)
        if len(words) == 1:
            return words[0]

        positional, overall = letter_scores(words, corpus)
        # lexsort sorts by the last key first; words are already lexical
        order = np.lexsort((np.arange(len(words)), -overall, -positional))
        return words[int(order[0])]


# ============================================================================
# ENTROPY AGENT
# ============================================================================

def rank_by_entropy(entropies: np.ndarray, is_candidate: np.ndarray,
                    top: Optional[int] = None) -> List[int]:
    """
    Word indices ordered best guess first.

    Entropies within ENTROPY_TOLERANCE of the highest value not yet placed
    count as tied; within a tie candidates come first, then lower indices.
    """
    by_entropy = np.argsort(-entropies, kind='stable')
    limit = len(by_entropy) if top is None else min(top, len(by_entropy))

    order: List[int] = []
    start = 0
    while len(order) < limit:
        floor = entropies[by_entropy[start]] - ENTROPY_TOLERANCE
        end = start + 1
        while end < len(by_entropy) and entropies[by_entropy[end]] >= floor:
            end += 1
        tied = [int(i) for i in by_entropy[start:end]]
        order.extend(sorted(tied, key=lambda i: (not is_candidate[i], i)))
        start = end
    return order[:limit]


class EntropyAgent(Agent):
    """
    Picks the corpus word with the highest expected information.

    Any corpus word may be guessed, including words already ruled out as
    the secret, since such probes can split the candidates better. Ties are
    broken in favour of words that are still candidates, then lexical order.

    The opening guess depends only on the corpus, so it is computed once
    per corpus and cached.
    """

    kind = AgentKind.ENTROPY

    def __init__(self, seed=None):
        super().__init__(seed)
        self._openings: Dict[Corpus, str] = {}

    def spawn(self, seed=None):
        agent = super().spawn(seed)
        agent._openings = dict(self._openings)
        return agent

    def warm_up(self, corpus):
        if corpus in self._openings:
            return
        start = time.time()
        self._openings[corpus] = self._best_guess(corpus.word_set, corpus)
        logger.info("Entropy opening guess for %s: %s (%.1fs)",
                    corpus, self._openings[corpus], time.time() - start)

    def entropies(self, candidates: AbstractSet[str], corpus: Corpus) -> np.ndarray:
        """Expected information of every corpus word against the candidates."""
        answers = corpus.encode_many(sorted(candidates))
        return compute_entropies(corpus.chars, answers, corpus.n_letters,
                                 n_patterns(corpus.word_length))

    def _ranked(self, candidates: AbstractSet[str], corpus: Corpus,
                top: Optional[int] = None) -> List[Tuple[str, float]]:
        entropies = self.entropies(candidates, corpus)
        is_candidate = np.fromiter((w in candidates for w in corpus.words), dtype=bool,
                                   count=len(corpus))
        # corpus order is lexical, so index order settles the remaining ties
        return [(corpus.words[i], float(entropies[i]))
                for i in rank_by_entropy(entropies, is_candidate, top)]

    def _best_guess(self, candidates: AbstractSet[str], corpus: Corpus) -> str:
        return self._ranked(candidates, corpus, top=1)[0][0]

    def choose_guess(self, candidates, corpus, history):
        words = _require_candidates(candidates)

        # With one or two words left every useful guess is worth at most one
        # bit and a candidate guess can win outright
        if len(words) <= 2:
            return words[0]

        if corpus in self._openings and candidates == corpus.word_set:
            return self._openings[corpus]

        return self._best_guess(frozenset(words), corpus)

    def rank_guesses(self, candidates: AbstractSet[str], corpus: Corpus,
                     top: int = 10) -> List[Tuple[str, float]]:
        """The best guesses with their entropies, highest first, ties broken as in choose_guess."""
        if not candidates:
            return []
        return self._ranked(candidates, corpus, top)


# ============================================================================
# FACTORY
# ============================================================================

def create_agent(kind: AgentKind, seed: Optional[int] = None) -> Agent:
    """Build the agent for a strategy kind."""
    if kind is AgentKind.RANDOM:
        return RandomAgent(seed)
    elif kind is AgentKind.RANDOM_FILTERED:
        return RandomFilteringAgent(seed)
    elif kind is AgentKind.HEURISTIC:
        return HeuristicAgent(seed)
    elif kind is AgentKind.ENTROPY:
        return EntropyAgent(seed)
    raise ValueError(f"Unsupported agent kind: {kind!r}")
