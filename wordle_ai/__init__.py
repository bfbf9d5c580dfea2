"""
Wordle AI
=========

Feedback engine, game state machine and solving agents for Wordle-style
puzzles, with a simulation harness for comparing strategies.
"""

__version__ = "1.0.0"

from .agents import (Agent, AgentKind, EntropyAgent, HeuristicAgent, RandomAgent,
                     RandomFilteringAgent, create_agent)
from .assistant import AssistantSession
from .candidates import filter_candidates, filter_history, guess_entropy, partition_candidates
from .config import GameConfig, SimulationConfig
from .corpus import Corpus, load_corpus, load_words
from .errors import (EmptyCandidateSet, GameAlreadyOver, InvalidAlphabet, InvalidGuess,
                     InvalidWordLength, WordleError, WordNotInCorpus)
from .feedback import LetterFeedback, feedback_to_string, parse_feedback, score
from .game import Game, GameStatus, Guess
from .language import Language
from .simulate import SimulationResult, compare_agents, play_game, simulate
