"""
Command line shell
==================

    wordle-ai simulate  --words words.txt --agent heuristic --agent entropy --games 500
    wordle-ai assistant --words words.txt --agent entropy
    wordle-ai play      --words words.txt
    wordle-ai trace     --words words.txt --secret jazzy

All text formatting and all waiting for user input happen here.
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

import numpy as np

from .agents import AgentKind, EntropyAgent, create_agent
from .assistant import AssistantSession
from .candidates import filter_candidates, guess_entropy, partition_candidates
from .config import MAX_GUESSES, SimulationConfig
from .corpus import Corpus, load_corpus
from .errors import EmptyCandidateSet, InvalidGuess, WordleError
from .feedback import feedback_to_string
from .game import Game, GameStatus
from .language import Language
from .simulate import SimulationResult, compare_agents

logger = logging.getLogger(__name__)


def setup_logging(level: str = 'INFO') -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root = logging.getLogger('wordle_ai')
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())


# ============================================================================
# OUTPUT
# ============================================================================

def print_results(result: SimulationResult, max_guesses: int = MAX_GUESSES, out=None):
    """Pretty print simulation results."""
    out = out or sys.stdout
    print("\n" + "=" * 50, file=out)
    print(f"SIMULATION RESULTS: {result.agent}", file=out)
    print("=" * 50, file=out)
    print(f"Games played: {result.games}" + (" (cancelled)" if result.cancelled else ""), file=out)
    print(f"Wins: {result.wins} ({100 * result.win_rate:.1f}%)", file=out)
    print(f"Losses: {result.losses}" + (f" ({result.anomalies} anomalies)" if result.anomalies else ""),
          file=out)
    print(f"Average guesses: {result.average_turns:.4f}", file=out)
    lo = result.min_turns if result.min_turns is not None else "N/A"
    hi = result.max_turns if result.max_turns is not None else "N/A"
    print(f"Min: {lo} | Max: {hi}", file=out)
    if result.elapsed > 0:
        print(f"Time: {result.elapsed:.1f}s ({result.games / result.elapsed:.1f} games/sec)", file=out)
    print("\nDistribution:", file=out)
    for n in range(1, max_guesses + 1):
        count = result.turn_distribution.get(n, 0)
        pct = 100 * count / result.games if result.games else 0.0
        bar = "█" * int(pct / 2)
        print(f"  {n}: {count:5d} ({pct:5.2f}%) {bar}", file=out)
    print("=" * 50, file=out)


def format_guess(guess) -> str:
    return f"{guess.word.upper()}  {feedback_to_string(guess.feedback)}"


# ============================================================================
# COMMANDS
# ============================================================================

def _load(args) -> Corpus:
    return load_corpus(args.words, Language.from_code(args.language), args.length)


def cmd_simulate(args) -> int:
    corpus = _load(args)
    config = SimulationConfig.from_env(num_games=args.games, seed=args.seed,
                                       workers=args.workers, max_guesses=args.max_guesses)
    kinds = [AgentKind.from_name(a) for a in (args.agent or [k.value for k in AgentKind])]
    results = compare_agents(kinds, corpus, config.num_games, seed=config.seed,
                             max_guesses=config.max_guesses, workers=config.workers,
                             progress_every=config.progress_every)
    for result in results.values():
        print_results(result, config.max_guesses)
    return 0


def cmd_assistant(args, read: Callable[[str], str] = input) -> int:
    corpus = _load(args)
    agent = create_agent(AgentKind.from_name(args.agent), args.seed)
    session = AssistantSession(agent, corpus)
    print("Enter the feedback the game shows as B/Y/G (e.g. BYBGB),")
    print("'x' if the game rejected the word, 'r' to restart, 'q' to quit.")

    while not session.solved:
        try:
            suggestion = session.suggest()
        except EmptyCandidateSet:
            print("No word fits that feedback. Check your input; restarting.")
            session.reset()
            continue

        print(f"\nTry: {suggestion.upper()}  ({len(session.candidates)} candidates left)")
        if isinstance(agent, EntropyAgent) and len(session.candidates) > 2:
            ranked = agent.rank_guesses(session.candidates, session.corpus, top=5)
            print("  " + ", ".join(f"{w} {h:.2f} bits" for w, h in ranked))

        answer = read("Feedback> ").strip()
        if answer.lower() == 'q':
            return 0
        if answer.lower() == 'r':
            session.reset()
            continue
        if answer.lower() == 'x':
            try:
                session.reject(suggestion)
            except EmptyCandidateSet as e:
                print(f"  {e}; restarting.")
                session.reset()
            continue

        word = suggestion
        if ' ' in answer:
            word, answer = answer.split(None, 1)
        try:
            session.record(word, answer)
        except (InvalidGuess, ValueError) as e:
            print(f"  {e}")

    print(f"\nSolved in {session.turns} guesses!")
    return 0


def cmd_play(args, read: Callable[[str], str] = input) -> int:
    corpus = _load(args)
    rng = np.random.default_rng(args.seed)
    game = Game.start(corpus, max_guesses=args.max_guesses, rng=rng,
                      allow_unknown_words=args.allow_unknown)

    while game.status() is GameStatus.IN_PROGRESS:
        word = read(f"Guess {game.turns + 1}/{game.max_guesses}> ").strip()
        if not word:
            continue
        try:
            guess = game.submit_guess(word)
        except InvalidGuess as e:
            print(f"  {e}")
            continue
        print(f"  {format_guess(guess)}")

    if game.status() is GameStatus.WON:
        print(f"\nSolved in {game.turns} guesses!")
    else:
        print(f"\nOut of guesses. The word was {game.secret.upper()}.")
    return 0


def cmd_trace(args) -> int:
    """Trace one game turn by turn with candidate partitions."""
    corpus = _load(args)
    agent = create_agent(AgentKind.from_name(args.agent), args.seed)
    game = Game.start(corpus, secret=args.secret, max_guesses=args.max_guesses,
                      allow_unknown_words=True)
    candidates = corpus.word_set

    print(f"\n=== Tracing {agent.name} for: {game.secret} ===\n")
    while game.status() is GameStatus.IN_PROGRESS:
        print(f"Turn {game.turns + 1}: {len(candidates)} candidates")
        if len(candidates) <= 10:
            for c in sorted(candidates):
                parts = partition_candidates(c, candidates)
                print(f"    entropy({c}) = {guess_entropy(c, candidates, corpus):.4f}, "
                      f"partitions: {len(parts)}")
        try:
            word = agent.choose_guess(candidates, corpus, game.guesses)
        except EmptyCandidateSet:
            print(f"  ERROR: {game.secret} not in remaining candidates!")
            return 1

        ent = guess_entropy(word, candidates, corpus)
        guess = game.submit_guess(word)
        print(f"  Guess: {format_guess(guess)} (entropy={ent:.4f})")
        candidates = filter_candidates(candidates, guess)

    if game.status() is GameStatus.WON:
        print(f"\n✓ Solved in {game.turns} guesses!")
        return 0
    print(f"\n✗ Failed to solve in {game.max_guesses} guesses")
    return 1


# ============================================================================
# MAIN
# ============================================================================

def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='wordle-ai', description="Wordle solver and simulator")
    parser.add_argument('--log-level', default='INFO')
    sub = parser.add_subparsers(dest='command', required=True)

    def common(p):
        p.add_argument('--words', required=True, help="word list, one word per line")
        p.add_argument('--language', default=Language.ENGLISH.code,
                       choices=[lang.code for lang in Language])
        p.add_argument('--length', type=positive_int, default=5)
        p.add_argument('--seed', type=int, default=None)
        p.add_argument('--max-guesses', type=positive_int, default=None,
                       help=f"turn limit (default {MAX_GUESSES}, or $WORDLE_AI_MAX_GUESSES for simulate)")

    agents = [k.value for k in AgentKind]

    p = sub.add_parser('simulate', help="compare agents over many games")
    common(p)
    p.add_argument('--agent', action='append', choices=agents)
    p.add_argument('--games', type=int, default=1000)
    p.add_argument('--workers', type=int, default=None)
    p.set_defaults(func=cmd_simulate)

    p = sub.add_parser('assistant', help="get suggestions for a game played elsewhere")
    common(p)
    p.add_argument('--agent', default=AgentKind.ENTROPY.value, choices=agents)
    p.set_defaults(func=cmd_assistant)

    p = sub.add_parser('play', help="play a game in the terminal")
    common(p)
    p.add_argument('--allow-unknown', action='store_true', help="score words not in the list")
    p.set_defaults(func=cmd_play)

    p = sub.add_parser('trace', help="trace an agent solving a given word")
    common(p)
    p.add_argument('--secret', required=True)
    p.add_argument('--agent', default=AgentKind.ENTROPY.value, choices=agents)
    p.set_defaults(func=cmd_trace)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return args.func(args)
    except WordleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        logger.error("Could not load word list: %s", e)
        return 1
    except (EOFError, KeyboardInterrupt):
        return 130


if __name__ == "__main__":
    sys.exit(main())
