"""Volleyball scoring engine.

Rally scoring to 25 points with a win-by-2 requirement. Matches default to
best-of-5 sets. The deciding set uses ``decidingSetPointsTo``, which defaults
to the regular target so every set is played to 25 unless configured.

``apply`` never mutates the state it is given; the returned state is a fresh
copy, so previous states can be kept around as undo snapshots.
"""

from copy import deepcopy
from typing import Dict, List, Optional, Tuple

from ..services.validation import (
    ValidationError,
    validate_score_update,
    validate_set_records,
)

SIDES = ("home", "away")
EVENT_TYPES = ("POINT", "END_SET", "END_MATCH", "SCORE", "SETS")


class MatchEndedError(Exception):
    """Raised when a transition is attempted on a match that has ended."""


def init_state(config: Dict) -> Dict:
    """Initialise scoreboard state for volleyball."""

    points_to = config.get("pointsTo", 25)
    return {
        "config": {
            "pointsTo": points_to,
            "winBy": config.get("winBy", 2),
            "bestOf": config.get("bestOf", 5),
            "decidingSetPointsTo": config.get("decidingSetPointsTo") or points_to,
        },
        "currentSet": 1,
        "score": {"home": 0, "away": 0},
        "sets": [],
        "active": True,
    }


def _other(side: str) -> str:
    return "away" if side == "home" else "home"


def points_needed(config: Dict, set_number: int) -> int:
    if set_number >= config.get("bestOf", 5):
        return config.get("decidingSetPointsTo") or config.get("pointsTo", 25)
    return config.get("pointsTo", 25)


def sets_needed(config: Dict) -> int:
    return config.get("bestOf", 5) // 2 + 1


def sets_won(sets: List[Dict]) -> Dict[str, int]:
    won = {"home": 0, "away": 0}
    for s in sets:
        if not s.get("completed"):
            continue
        if s["homeScore"] > s["awayScore"]:
            won["home"] += 1
        elif s["awayScore"] > s["homeScore"]:
            won["away"] += 1
    return won


def set_winner(state: Dict) -> Optional[str]:
    """Return the side that has won the set in progress, if any."""

    cfg = state["config"]
    target = points_needed(cfg, state["currentSet"])
    win_by = cfg.get("winBy", 2)
    for side in SIDES:
        ps, po = state["score"][side], state["score"][_other(side)]
        if ps >= target and ps - po >= win_by:
            return side
    return None


def _match_decided(state: Dict) -> bool:
    cfg = state["config"]
    won = sets_won(state["sets"])
    needed = sets_needed(cfg)
    return (
        state["currentSet"] >= cfg.get("bestOf", 5)
        or won["home"] >= needed
        or won["away"] >= needed
    )


def match_winner(state: Dict) -> Optional[str]:
    """Return the winning side once the match has ended."""

    if state["active"]:
        return None
    won = sets_won(state["sets"])
    if won["home"] == won["away"]:
        return None
    return "home" if won["home"] > won["away"] else "away"


def _complete_set(state: Dict) -> None:
    state["sets"].append(
        {
            "homeScore": state["score"]["home"],
            "awayScore": state["score"]["away"],
            "completed": True,
        }
    )
    if _match_decided(state):
        # Final scores stay on the board once the match is over.
        state["active"] = False
        return
    state["currentSet"] += 1
    state["score"]["home"] = state["score"]["away"] = 0


def _apply_score_correction(event: Dict, state: Dict) -> None:
    best_of = state["config"].get("bestOf", 5)
    home, away, current_set = validate_score_update(
        event.get("homeScore"),
        event.get("awayScore"),
        event.get("currentSet", state["currentSet"]),
        max_set=best_of,
    )
    if current_set != len(state["sets"]) + 1:
        raise ValidationError(
            f"currentSet must be {len(state['sets']) + 1} after "
            f"{len(state['sets'])} completed set(s)."
        )
    state["score"]["home"] = home
    state["score"]["away"] = away
    state["currentSet"] = current_set
    # A corrected score may never leave a won set on the board.
    if set_winner(state) is not None:
        raise ValidationError("score already decides the set; use end-set")


def _apply_sets_correction(event: Dict, state: Dict) -> None:
    cfg = state["config"]
    best_of = cfg.get("bestOf", 5)
    records = validate_set_records(event.get("sets"), max_sets=best_of - 1)
    won = sets_won(records)
    if max(won.values()) >= sets_needed(cfg):
        raise ValidationError("Corrected sets must not decide the match; end it instead.")
    state["sets"] = records
    state["currentSet"] = len(records) + 1


def apply(event: Dict, state: Dict) -> Dict:
    """Apply an event to ``state`` and return the resulting state."""

    kind = event.get("type")
    if kind not in EVENT_TYPES:
        raise ValidationError(f"invalid volleyball event {kind!r}")
    if not state["active"]:
        raise MatchEndedError("match has already ended")

    state = deepcopy(state)

    if kind == "POINT":
        side = event.get("by")
        if side not in SIDES:
            raise ValidationError("points must be scored by 'home' or 'away'")
        state["score"][side] += 1
        if set_winner(state) is not None:
            _complete_set(state)
    elif kind == "END_SET":
        _complete_set(state)
    elif kind == "END_MATCH":
        state["active"] = False
    elif kind == "SCORE":
        _apply_score_correction(event, state)
    else:
        _apply_sets_correction(event, state)

    return state


def snapshot(state: Dict) -> Dict:
    """Capture the parts of ``state`` an undo restores."""

    return {
        "score": dict(state["score"]),
        "currentSet": state["currentSet"],
        "sets": deepcopy(state["sets"]),
    }


def push_snapshot(
    history: Tuple[Dict, ...], snap: Dict, limit: Optional[int] = None
) -> Tuple[Dict, ...]:
    """Return a new history with ``snap`` on top, keeping at most ``limit`` entries."""

    history = history + (snap,)
    if limit is not None and limit > 0 and len(history) > limit:
        history = history[-limit:]
    return history


def undo(state: Dict, history: Tuple[Dict, ...]) -> Tuple[Dict, Tuple[Dict, ...]]:
    """Restore the most recent snapshot.

    An empty history leaves the state untouched. Ended matches are never
    reopened.
    """

    if not state["active"]:
        raise MatchEndedError("match has already ended")
    if not history:
        return state, history

    snap = history[-1]
    state = deepcopy(state)
    state["score"] = dict(snap["score"])
    state["currentSet"] = snap["currentSet"]
    state["sets"] = deepcopy(snap["sets"])
    return state, history[:-1]


def summary(state: Dict) -> Dict:
    return {
        "score": state["score"],
        "currentSet": state["currentSet"],
        "sets": state["sets"],
        "setsWon": sets_won(state["sets"]),
        "active": state["active"],
        "winner": match_winner(state),
        "config": state["config"],
    }
