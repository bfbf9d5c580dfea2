"""
Simulation Harness
==================

Plays many independent games with one agent and aggregates the outcome.

Each trial gets its own SeedSequence child, from which both the secret and
the agent's random source are drawn, so results depend only on the master
seed and not on scheduling. Trials run in a process pool when more than
one worker is requested and are folded into one SimulationResult in
whatever order they finish; the counts are plain sums, and
SimulationResult.merge combines partial results in any order.
"""

import logging
import multiprocessing as mp
import os
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from numba import set_num_threads

from .agents import Agent, AgentKind, create_agent
from .candidates import filter_candidates
from .config import MAX_GUESSES, PROGRESS_EVERY, SimulationConfig
from .corpus import Corpus
from .errors import EmptyCandidateSet
from .game import Game, GameStatus

logger = logging.getLogger(__name__)


# ============================================================================
# RESULTS
# ============================================================================

@dataclass(frozen=True)
class TrialResult:
    """Outcome of one simulated game."""
    secret: str
    won: bool
    turns: int
    guesses: Tuple[str, ...]
    anomaly: Optional[str] = None


@dataclass
class SimulationResult:
    """
    Aggregate statistics for one agent.

    average_turns and turn_distribution cover won games only; lost games
    are counted in losses.
    """
    agent: str = ""
    games: int = 0
    wins: int = 0
    total_turns: int = 0
    turn_distribution: Counter = field(default_factory=Counter)
    anomalies: int = 0
    cancelled: bool = False
    elapsed: float = 0.0

    @property
    def losses(self) -> int:
        return self.games - self.wins

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games else 0.0

    @property
    def average_turns(self) -> float:
        return self.total_turns / self.wins if self.wins else 0.0

    @property
    def min_turns(self) -> Optional[int]:
        return min(self.turn_distribution) if self.turn_distribution else None

    @property
    def max_turns(self) -> Optional[int]:
        return max(self.turn_distribution) if self.turn_distribution else None

    def add(self, trial: TrialResult) -> None:
        self.games += 1
        if trial.won:
            self.wins += 1
            self.total_turns += trial.turns
            self.turn_distribution[trial.turns] += 1
        if trial.anomaly is not None:
            self.anomalies += 1

    def merge(self, other: "SimulationResult") -> "SimulationResult":
        """Combine two partial results; order does not matter."""
        return SimulationResult(
            agent=self.agent or other.agent,
            games=self.games + other.games,
            wins=self.wins + other.wins,
            total_turns=self.total_turns + other.total_turns,
            turn_distribution=self.turn_distribution + other.turn_distribution,
            anomalies=self.anomalies + other.anomalies,
            cancelled=self.cancelled or other.cancelled,
            elapsed=max(self.elapsed, other.elapsed),
        )

    def as_dict(self) -> Dict:
        return {
            'win_rate': self.win_rate,
            'average_turns': self.average_turns,
            'turn_distribution': dict(sorted(self.turn_distribution.items())),
        }


# ============================================================================
# SINGLE GAME
# ============================================================================

def play_game(agent: Agent, corpus: Corpus, secret: str,
              max_guesses: int = MAX_GUESSES) -> TrialResult:
    """
    Play one game to completion.

    An empty candidate set ends the game as a loss with an anomaly note
    instead of propagating.
    """
    game = Game.start(corpus, secret=secret, max_guesses=max_guesses)
    candidates = corpus.word_set

    while not game.status().is_terminal:
        try:
            word = agent.choose_guess(candidates, corpus, game.guesses)
        except EmptyCandidateSet as e:
            logger.warning("Trial for '%s' with %s ended early: %s", secret, agent.name, e)
            return TrialResult(secret, False, game.turns, _words(game), anomaly=str(e))

        guess = game.submit_guess(word)
        candidates = filter_candidates(candidates, guess)
        logger.debug("%s turn %d: %s (%d candidates left)", agent.name, game.turns, guess, len(candidates))

    won = game.status() is GameStatus.WON
    return TrialResult(secret, won, game.turns, _words(game))


def _words(game: Game) -> Tuple[str, ...]:
    return tuple(g.word for g in game.guesses)


def run_trial(agent: Agent, corpus: Corpus, seed: np.random.SeedSequence,
              max_guesses: int = MAX_GUESSES) -> TrialResult:
    """Draw a secret and an agent random source from the trial seed, then play."""
    secret_seed, agent_seed = seed.spawn(2)
    secret = corpus.random_word(np.random.default_rng(secret_seed))
    return play_game(agent.spawn(agent_seed), corpus, secret, max_guesses)


# ============================================================================
# WORKER POOL
# ============================================================================

_worker_state = {}


def _init_worker(agent: Agent, corpus: Corpus, max_guesses: int) -> None:
    # One numba thread per process; the pool already uses every core
    set_num_threads(1)
    _worker_state['agent'] = agent
    _worker_state['corpus'] = corpus
    _worker_state['max_guesses'] = max_guesses


def _run_trial_in_worker(seed: np.random.SeedSequence) -> TrialResult:
    return run_trial(_worker_state['agent'], _worker_state['corpus'], seed,
                     _worker_state['max_guesses'])


def _resolve_workers(workers: Optional[int], num_games: int) -> int:
    if workers is None:
        workers = os.cpu_count() or 1
    return max(1, min(workers, num_games))


# ============================================================================
# SIMULATION
# ============================================================================

def simulate(agent, corpus: Corpus, num_games: int, seed: Optional[int] = None,
             max_guesses: int = MAX_GUESSES, workers: Optional[int] = 1,
             should_stop: Optional[Callable[[], bool]] = None,
             progress_every: int = PROGRESS_EVERY) -> SimulationResult:
    """
    Run num_games independent games and aggregate the results.

    Args:
        agent: an Agent, or an AgentKind to build one from
        corpus: shared read-only word list; secrets are drawn from it
        num_games: number of trials
        seed: master seed; the same seed gives the same secrets and results
        max_guesses: turn limit per game
        workers: process count; None uses every CPU, 1 runs in-process
        should_stop: polled between trials; returning True cancels the run
        progress_every: log progress every N trials

    Returns:
        SimulationResult (cancelled=True if stopped early)
    """
    if isinstance(agent, AgentKind):
        agent = create_agent(agent, seed)
    if num_games < 0:
        raise ValueError("num_games must not be negative")

    result = SimulationResult(agent=agent.name)
    if num_games == 0:
        return result

    workers = _resolve_workers(workers, num_games)
    seeds = np.random.SeedSequence(seed).spawn(num_games)
    agent.warm_up(corpus)

    logger.info("Simulating %d games with %s on %s (%d workers)",
                num_games, agent.name, corpus, workers)
    start = time.time()

    def collect(trials: Iterable[TrialResult]) -> None:
        for trial in trials:
            result.add(trial)
            if progress_every and result.games % progress_every == 0:
                elapsed = time.time() - start
                rate = result.games / elapsed if elapsed > 0 else 0
                logger.info("[%d/%d] %.1f games/s, win rate=%.3f, avg=%.4f",
                            result.games, num_games, rate, result.win_rate, result.average_turns)
            if should_stop is not None and result.games < num_games and should_stop():
                result.cancelled = True
                return

    if workers == 1:
        collect(run_trial(agent, corpus, s, max_guesses) for s in seeds)
    else:
        ctx = mp.get_context("spawn")
        chunksize = max(1, num_games // (workers * 4))
        with ctx.Pool(workers, initializer=_init_worker,
                      initargs=(agent, corpus, max_guesses)) as pool:
            collect(pool.imap_unordered(_run_trial_in_worker, seeds, chunksize))
            if result.cancelled:
                pool.terminate()

    result.elapsed = time.time() - start
    if result.cancelled:
        logger.warning("Simulation with %s cancelled after %d of %d games",
                       agent.name, result.games, num_games)
    else:
        logger.info("Finished %d games with %s in %.1fs: win rate=%.3f, avg turns=%.4f",
                    result.games, agent.name, result.elapsed, result.win_rate, result.average_turns)
    return result


def simulate_config(agent, corpus: Corpus, config: SimulationConfig, **kwargs) -> SimulationResult:
    """simulate() with its settings taken from a SimulationConfig."""
    return simulate(agent, corpus, config.num_games, seed=config.seed,
                    max_guesses=config.max_guesses, workers=config.workers,
                    progress_every=config.progress_every, **kwargs)


def compare_agents(kinds: Sequence[AgentKind], corpus: Corpus, num_games: int,
                   seed: Optional[int] = None, **kwargs) -> Dict[AgentKind, SimulationResult]:
    """
    Simulate several agents on the same secrets.

    Trial i draws its secret from the i-th child of the master seed, so with
    a shared seed every agent faces the same sequence of secrets.
    """
    results = {}
    for kind in kinds:
        results[kind] = simulate(create_agent(kind, seed), corpus, num_games, seed=seed, **kwargs)
    return results


def secrets_for(corpus: Corpus, num_games: int, seed: Optional[int] = None) -> List[str]:
    """The secrets simulate() would draw for a given seed."""
    secrets = []
    for s in np.random.SeedSequence(seed).spawn(num_games):
        secret_seed, _ = s.spawn(2)
        secrets.append(corpus.random_word(np.random.default_rng(secret_seed)))
    return secrets
