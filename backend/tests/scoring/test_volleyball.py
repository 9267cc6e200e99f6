import os, sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

import random

import pytest

from volleytracker.scoring import volleyball
from volleytracker.services.validation import ValidationError


def _score_points(side, count, state):
    for _ in range(count):
        state = volleyball.apply({"type": "POINT", "by": side}, state)
    return state


def _win_set(side, state):
    target = volleyball.points_needed(state["config"], state["currentSet"])
    return _score_points(side, target, state)


def test_straight_set_records_and_resets():
    state = volleyball.init_state({})
    state = _score_points("home", 25, state)
    assert state["sets"] == [{"homeScore": 25, "awayScore": 0, "completed": True}]
    assert state["currentSet"] == 2
    assert state["score"] == {"home": 0, "away": 0}
    assert state["active"] is True


def test_win_by_two_extends_set():
    state = volleyball.init_state({})
    state = _score_points("home", 24, state)
    state = _score_points("away", 24, state)
    for side in ("home", "away", "home"):
        state = volleyball.apply({"type": "POINT", "by": side}, state)
        assert state["sets"] == []
    state = volleyball.apply({"type": "POINT", "by": "home"}, state)
    assert state["sets"] == [{"homeScore": 27, "awayScore": 25, "completed": True}]
    assert state["currentSet"] == 2


def test_deciding_set_uses_its_own_target():
    state = volleyball.init_state({"decidingSetPointsTo": 15})
    for side in ("home", "away", "home", "away"):
        state = _win_set(side, state)
    assert state["currentSet"] == 5
    state = _score_points("away", 10, state)
    state = _score_points("home", 15, state)
    assert state["active"] is False
    assert len(state["sets"]) == 5
    assert state["sets"][-1] == {"homeScore": 15, "awayScore": 10, "completed": True}
    assert volleyball.match_winner(state) == "home"
    # Final score stays on the board
    assert state["score"] == {"home": 15, "away": 10}


def test_end_set_closes_fifth_set_early():
    state = volleyball.init_state({})
    for side in ("home", "away", "home", "away"):
        state = _win_set(side, state)
    state = _score_points("home", 15, state)
    state = _score_points("away", 10, state)
    state = volleyball.apply({"type": "END_SET"}, state)
    assert state["active"] is False
    assert state["sets"][-1] == {"homeScore": 15, "awayScore": 10, "completed": True}


def test_third_set_win_ends_match_and_rejects_points():
    state = volleyball.init_state({})
    for _ in range(3):
        state = _win_set("away", state)
    assert state["active"] is False
    assert volleyball.sets_won(state["sets"]) == {"home": 0, "away": 3}
    with pytest.raises(volleyball.MatchEndedError):
        volleyball.apply({"type": "POINT", "by": "home"}, state)
    assert state["sets"][-1]["awayScore"] == 25


def test_best_of_three_needs_two_sets():
    state = volleyball.init_state({"bestOf": 3})
    state = _win_set("home", state)
    assert state["active"] is True
    state = _win_set("home", state)
    assert state["active"] is False
    assert volleyball.summary(state)["winner"] == "home"


def test_apply_does_not_mutate_input():
    state = volleyball.init_state({})
    before = volleyball.snapshot(state)
    volleyball.apply({"type": "POINT", "by": "home"}, state)
    assert volleyball.snapshot(state) == before


def test_point_then_undo_restores_state():
    state = _score_points("home", 24, volleyball.init_state({}))
    history = (volleyball.snapshot(state),)
    after = volleyball.apply({"type": "POINT", "by": "home"}, state)
    assert after["currentSet"] == 2

    restored, remaining = volleyball.undo(after, history)
    assert restored == state
    assert remaining == ()


def test_undo_with_empty_history_is_noop():
    state = volleyball.init_state({})
    restored, remaining = volleyball.undo(state, ())
    assert restored is state
    assert remaining == ()


def test_undo_rejected_after_match_end():
    state = volleyball.apply({"type": "END_MATCH"}, volleyball.init_state({}))
    with pytest.raises(volleyball.MatchEndedError):
        volleyball.undo(state, (volleyball.snapshot(volleyball.init_state({})),))


def test_push_snapshot_drops_oldest_beyond_limit():
    history = ()
    for n in range(5):
        history = volleyball.push_snapshot(history, {"n": n}, limit=3)
    assert [s["n"] for s in history] == [2, 3, 4]


def test_end_match_twice_is_rejected():
    state = volleyball.apply({"type": "END_MATCH"}, volleyball.init_state({}))
    assert state["active"] is False
    with pytest.raises(volleyball.MatchEndedError):
        volleyball.apply({"type": "END_MATCH"}, state)


def test_score_correction_replaces_running_score():
    state = _score_points("home", 3, volleyball.init_state({}))
    state = volleyball.apply(
        {"type": "SCORE", "homeScore": 10, "awayScore": 12, "currentSet": 1}, state
    )
    assert state["score"] == {"home": 10, "away": 12}


def test_score_correction_must_match_completed_sets():
    state = volleyball.init_state({})
    with pytest.raises(ValidationError):
        volleyball.apply(
            {"type": "SCORE", "homeScore": 1, "awayScore": 1, "currentSet": 3}, state
        )


def test_sets_correction_realigns_current_set():
    state = volleyball.init_state({})
    sets = [
        {"homeScore": 25, "awayScore": 20, "completed": True},
        {"homeScore": 18, "awayScore": 25, "completed": True},
    ]
    state = volleyball.apply({"type": "SETS", "sets": sets}, state)
    assert state["sets"] == sets
    assert state["currentSet"] == 3


def test_sets_correction_cannot_decide_match():
    state = volleyball.init_state({})
    sets = [{"homeScore": 25, "awayScore": 20, "completed": True}] * 3
    with pytest.raises(ValidationError):
        volleyball.apply({"type": "SETS", "sets": sets}, state)


def test_unknown_event_rejected():
    with pytest.raises(ValidationError):
        volleyball.apply({"type": "TIMEOUT"}, volleyball.init_state({}))


def test_point_requires_known_side():
    with pytest.raises(ValidationError):
        volleyball.apply({"type": "POINT", "by": "A"}, volleyball.init_state({}))


def test_score_correction_cannot_leave_won_set_unrecorded():
    state = volleyball.init_state({})
    with pytest.raises(ValidationError, match="already decides the set"):
        volleyball.apply(
            {"type": "SCORE", "homeScore": 30, "awayScore": 10, "currentSet": 1},
            state,
        )
    state = volleyball.apply(
        {"type": "SCORE", "homeScore": 24, "awayScore": 23, "currentSet": 1}, state
    )
    state = volleyball.apply({"type": "POINT", "by": "away"}, state)
    assert state["sets"] == []
    assert state["score"] == {"home": 24, "away": 24}


@pytest.mark.parametrize("seed", range(8))
def test_random_play_keeps_board_consistent(seed):
    rng = random.Random(seed)
    state = volleyball.init_state({"pointsTo": 7, "decidingSetPointsTo": 5})
    history = ()
    for _ in range(400):
        if not state["active"]:
            break
        roll = rng.random()
        if roll < 0.1 and history:
            state, history = volleyball.undo(state, history)
        else:
            event = (
                {"type": "END_SET"}
                if roll < 0.13
                else {"type": "POINT", "by": rng.choice(volleyball.SIDES)}
            )
            snap = volleyball.snapshot(state)
            state = volleyball.apply(event, state)
            history = volleyball.push_snapshot(history, snap)

        assert min(state["score"].values()) >= 0
        if state["active"]:
            assert len(state["sets"]) == state["currentSet"] - 1
            assert volleyball.set_winner(state) is None
        else:
            assert len(state["sets"]) == state["currentSet"]
    assert state["active"] is False
