import io
import logging

import numpy as np
import pytest

from wordle_ai.cli import build_parser, cmd_assistant, cmd_play, main, print_results
from wordle_ai.corpus import load_corpus
from wordle_ai.feedback import feedback_to_string, score
from wordle_ai.game import Game
from wordle_ai.simulate import SimulationResult, TrialResult


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger("wordle_ai").handlers.clear()


def scripted(lines):
    answers = iter(lines)
    return lambda prompt: next(answers)


def test_simulate_command(word_file, capsys):
    code = main(['simulate', '--words', word_file, '--agent', 'heuristic', '--agent', 'random',
                 '--games', '5', '--seed', '1', '--workers', '1'])
    out = capsys.readouterr().out
    assert code == 0
    assert "SIMULATION RESULTS: Heuristic Guesser" in out
    assert "SIMULATION RESULTS: Random Guesser" in out


def test_trace_command(word_file, capsys):
    code = main(['trace', '--words', word_file, '--secret', 'crate', '--agent', 'heuristic',
                 '--max-guesses', '17'])
    out = capsys.readouterr().out
    assert code == 0
    assert "Solved in" in out


def test_bad_secret_reports_error(word_file, capsys):
    code = main(['trace', '--words', word_file, '--secret', 'toolong'])
    assert code == 2
    assert "expected 5" in capsys.readouterr().err


def test_missing_word_file(tmp_path):
    assert main(['play', '--words', str(tmp_path / 'missing.txt')]) == 1


def test_play_command_reprompts_on_invalid_guess(word_file, capsys):
    args = build_parser().parse_args(['play', '--words', word_file, '--seed', '3'])
    secret = Game.start(load_corpus(word_file), rng=np.random.default_rng(3)).secret

    code = cmd_play(args, read=scripted(["zzzzz", "toolong", secret]))
    out = capsys.readouterr().out
    assert code == 0
    assert "not in the word list" in out
    assert "Solved in 1 guesses!" in out


def test_assistant_command(word_file, capsys):
    args = build_parser().parse_args(['assistant', '--words', word_file, '--agent', 'heuristic'])
    secret = "world"
    state = {}

    def read(prompt):
        out = capsys.readouterr().out
        word = out.rsplit("Try: ", 1)[1].split()[0].lower()
        state['last'] = word
        return feedback_to_string(score(secret, word))

    assert cmd_assistant(args, read=read) == 0
    assert state['last'] == secret
    assert "Solved in" in capsys.readouterr().out


def test_print_results():
    result = SimulationResult(agent="Heuristic Guesser")
    result.add(TrialResult("crane", True, 3, ()))
    result.add(TrialResult("jazzy", False, 6, ()))
    out = io.StringIO()
    print_results(result, out=out)
    text = out.getvalue()
    assert "Wins: 1 (50.0%)" in text
    assert "Average guesses: 3.0000" in text
    assert "Min: 3 | Max: 3" in text


def test_assistant_recovers_when_last_word_is_rejected(tmp_path, capsys):
    path = tmp_path / "one.txt"
    path.write_text("crane\n", encoding="utf-8")
    args = build_parser().parse_args(['assistant', '--words', str(path), '--agent', 'heuristic'])

    assert cmd_assistant(args, read=scripted(["x", "q"])) == 0
    out = capsys.readouterr().out
    assert "cannot be rejected; restarting." in out
    assert out.count("Try: CRANE") == 2


def test_max_guesses_defaults_to_environment(word_file, monkeypatch, capsys):
    assert build_parser().parse_args(['simulate', '--words', word_file]).max_guesses is None
    monkeypatch.setenv('WORDLE_AI_MAX_GUESSES', '3')
    code = main(['simulate', '--words', word_file, '--agent', 'heuristic',
                 '--games', '2', '--seed', '1', '--workers', '1'])
    out = capsys.readouterr().out
    assert code == 0
    assert "\n  3: " in out
    assert "\n  4: " not in out


@pytest.mark.parametrize("flag", ['--max-guesses', '--length'])
def test_non_positive_numbers_are_rejected_by_the_parser(word_file, flag, capsys):
    with pytest.raises(SystemExit) as exc:
        main(['play', '--words', word_file, flag, '0'])
    assert exc.value.code == 2
    assert "must be at least 1" in capsys.readouterr().err
