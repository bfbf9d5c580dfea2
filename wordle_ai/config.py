"""
Configuration
=============

Constants and settings objects shared by the game, the agents and the
simulation harness. Settings are always passed explicitly; nothing here is
mutable process state.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .language import Language


# ============================================================================
# CONSTANTS
# ============================================================================

WORD_LENGTH = 5
MAX_GUESSES = 6

# Entropies closer than this are treated as equal when breaking ties
ENTROPY_TOLERANCE = 1e-9

# Log simulation progress every N finished trials
PROGRESS_EVERY = 100


# ============================================================================
# SETTINGS
# ============================================================================

@dataclass(frozen=True)
class GameConfig:
    """
    Settings for a single puzzle.

    allow_unknown_words selects the off-corpus guess policy: when False
    (the default) a guess must be a corpus word, when True any word of the
    right length is scored.
    """
    language: Language = Language.ENGLISH
    word_length: int = WORD_LENGTH
    max_guesses: int = MAX_GUESSES
    allow_unknown_words: bool = False


@dataclass(frozen=True)
class SimulationConfig:
    """Settings for a batch of simulated games."""
    num_games: int = 1000
    seed: Optional[int] = None
    workers: Optional[int] = None
    max_guesses: int = MAX_GUESSES
    progress_every: int = PROGRESS_EVERY

    @classmethod
    def from_env(cls, **overrides) -> "SimulationConfig":
        """Build a config from WORDLE_AI_* environment variables."""
        workers = os.getenv('WORDLE_AI_WORKERS')
        seed = os.getenv('WORDLE_AI_SEED')
        values = {
            'workers': int(workers) if workers else None,
            'seed': int(seed) if seed else None,
            'max_guesses': int(os.getenv('WORDLE_AI_MAX_GUESSES', MAX_GUESSES)),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
