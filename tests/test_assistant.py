import pytest

from wordle_ai.agents import EntropyAgent, HeuristicAgent
from wordle_ai.assistant import AssistantSession
from wordle_ai.corpus import Corpus
from wordle_ai.errors import EmptyCandidateSet, InvalidWordLength
from wordle_ai.feedback import feedback_to_string, score


@pytest.mark.parametrize("agent", [HeuristicAgent(), EntropyAgent()])
def test_session_solves_with_reported_feedback(corpus, agent):
    session = AssistantSession(agent, corpus)
    secret = "geese"
    for _ in range(len(corpus)):
        word = session.suggest()
        session.record(word, feedback_to_string(score(secret, word)))
        if session.solved:
            break
    assert session.solved
    assert session.last_guess().word == secret
    assert session.candidates == frozenset({secret})


def test_rejected_words_are_not_suggested_again(corpus):
    session = AssistantSession(HeuristicAgent(), corpus)
    first = session.suggest()
    session.reject(first)
    assert first in session.rejected
    assert first not in session.candidates
    assert first not in session.corpus
    assert session.suggest() != first


def test_contradictory_feedback_empties_candidates(corpus):
    session = AssistantSession(HeuristicAgent(), corpus)
    # no word in the list starts with "cran" and ends in something other than "e"
    session.record("crane", "GGGGB")
    with pytest.raises(EmptyCandidateSet):
        session.suggest()
    session.reset()
    assert session.candidates == corpus.word_set
    assert session.turns == 0


def test_record_validates_input(corpus):
    session = AssistantSession(HeuristicAgent(), corpus)
    with pytest.raises(InvalidWordLength):
        session.record("cranes", "BBBBBB")
    with pytest.raises(ValueError):
        session.record("crane", "BBB")
    assert session.turns == 0


def test_top_candidates(corpus):
    session = AssistantSession(HeuristicAgent(), corpus)
    session.record("crane", "GGGBG")
    assert session.top_candidates() == ("crate",)


def test_rejecting_the_last_word_leaves_session_unchanged():
    corpus = Corpus.from_words(["crane"])
    session = AssistantSession(HeuristicAgent(), corpus)
    with pytest.raises(EmptyCandidateSet):
        session.reject("crane")
    assert session.rejected == set()
    assert session.candidates == frozenset({"crane"})
    assert session.corpus is corpus
    assert session.suggest() == "crane"


def test_rejecting_a_word_outside_the_list(corpus):
    session = AssistantSession(HeuristicAgent(), corpus)
    session.reject("zzzzz")
    assert session.rejected == {"zzzzz"}
    assert session.corpus is corpus
