"""Drive the volleyball state machine against stored games.

Every transition reads the game, computes the next state with the pure
engine in :mod:`volleytracker.scoring.volleyball`, then writes all fields back
in a single ``save``. Engine errors are raised before any field is touched.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from ..config import DEFAULT_RULES
from ..exceptions import GameNotFound, InvalidArgument, MatchEnded
from ..history import UndoHistory
from ..models import Game
from ..schemas import GameCreate, GameOut, SetRecord
from ..scoring import volleyball
from ..storage import Storage
from .validation import ValidationError

logger = logging.getLogger(__name__)


def game_state(game: Game) -> Dict[str, Any]:
    """Build engine state from a stored game."""

    state = volleyball.init_state(game.rules or DEFAULT_RULES)
    state["currentSet"] = game.current_set
    state["score"] = {"home": game.home_score, "away": game.away_score}
    state["sets"] = [dict(s) for s in (game.sets or [])]
    state["active"] = bool(game.is_active)
    return state


def _store_state(game: Game, state: Dict[str, Any]) -> None:
    game.current_set = state["currentSet"]
    game.home_score = state["score"]["home"]
    game.away_score = state["score"]["away"]
    # Always assign a new list so the JSON column registers the change.
    game.sets = [dict(s) for s in state["sets"]]
    game.is_active = state["active"]


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite returns naive datetimes; stored values are always UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def serialize_game(game: Game, undo_depth: int = 0) -> GameOut:
    return GameOut(
        id=game.id,
        homeTeamName=game.home_team_name,
        awayTeamName=game.away_team_name,
        currentSet=game.current_set,
        homeScore=game.home_score,
        awayScore=game.away_score,
        sets=[SetRecord(**s) for s in (game.sets or [])],
        isActive=bool(game.is_active),
        createdAt=_as_utc(game.created_at),
        rules=dict(game.rules or {}),
        undoDepth=undo_depth if game.is_active else 0,
    )


def new_game(body: GameCreate) -> Game:
    """Build an unsaved game at set 1, 0-0."""

    rules = dict(DEFAULT_RULES)
    if body.rules is not None:
        overrides = body.rules.model_dump(exclude_unset=True, exclude_none=True)
        rules.update(overrides)
        if "pointsTo" in overrides and "decidingSetPointsTo" not in overrides:
            rules["decidingSetPointsTo"] = overrides["pointsTo"]
    state = volleyball.init_state(rules)

    game = Game(
        id=uuid.uuid4().hex,
        home_team_name=body.homeTeamName,
        away_team_name=body.awayTeamName,
        rules=state["config"],
        created_at=datetime.now(timezone.utc),
    )
    _store_state(game, state)
    return game


async def create_game(storage: Storage, body: GameCreate) -> Game:
    game = new_game(body)
    await storage.save(game)
    logger.info(
        "Created game %s: %s vs %s (best of %d)",
        game.id,
        game.home_team_name,
        game.away_team_name,
        game.rules["bestOf"],
    )
    return game


async def require_game(storage: Storage, game_id: str) -> Game:
    game = await storage.get_game(game_id)
    if game is None:
        raise GameNotFound(game_id)
    return game


async def apply_event(
    storage: Storage,
    history: UndoHistory,
    game_id: str,
    event: Dict[str, Any],
) -> Game:
    """Apply one engine event to a stored game and record the undo snapshot."""

    game = await require_game(storage, game_id)
    state = game_state(game)
    try:
        new_state = volleyball.apply(event, state)
    except volleyball.MatchEndedError:
        raise MatchEnded(game_id)
    except ValidationError as exc:
        raise InvalidArgument(exc.detail)

    _store_state(game, new_state)
    await storage.save(game)

    if not new_state["active"]:
        await history.invalidate(game_id)
        logger.info(
            "Game %s ended after %d set(s): %s",
            game_id,
            len(new_state["sets"]),
            volleyball.sets_won(new_state["sets"]),
        )
    else:
        await history.push(game_id, volleyball.snapshot(state))
        if len(new_state["sets"]) > len(state["sets"]):
            last = new_state["sets"][-1]
            logger.info(
                "Game %s: set %d completed %d-%d",
                game_id,
                len(new_state["sets"]),
                last["homeScore"],
                last["awayScore"],
            )
    return game


async def score_point(
    storage: Storage, history: UndoHistory, game_id: str, team: str
) -> Game:
    return await apply_event(storage, history, game_id, {"type": "POINT", "by": team})


async def end_set(storage: Storage, history: UndoHistory, game_id: str) -> Game:
    return await apply_event(storage, history, game_id, {"type": "END_SET"})


async def end_match(storage: Storage, history: UndoHistory, game_id: str) -> Game:
    return await apply_event(storage, history, game_id, {"type": "END_MATCH"})


async def correct_score(
    storage: Storage,
    history: UndoHistory,
    game_id: str,
    home_score: int,
    away_score: int,
    current_set: int,
) -> Game:
    event = {
        "type": "SCORE",
        "homeScore": home_score,
        "awayScore": away_score,
        "currentSet": current_set,
    }
    return await apply_event(storage, history, game_id, event)


async def correct_sets(
    storage: Storage,
    history: UndoHistory,
    game_id: str,
    sets: list[dict[str, Any]],
) -> Game:
    return await apply_event(storage, history, game_id, {"type": "SETS", "sets": sets})


async def undo_last(storage: Storage, history: UndoHistory, game_id: str) -> Game:
    """Revert the most recent transition; a no-op when nothing is recorded."""

    game = await require_game(storage, game_id)
    state = game_state(game)
    if not state["active"]:
        raise MatchEnded(game_id)

    snap = await history.pop(game_id)
    if snap is None:
        return game

    new_state, _ = volleyball.undo(state, (snap,))
    _store_state(game, new_state)
    try:
        await storage.save(game)
    except Exception:
        await history.push(game_id, snap)
        raise
    logger.info(
        "Game %s: undo restored set %d at %d-%d",
        game_id,
        new_state["currentSet"],
        new_state["score"]["home"],
        new_state["score"]["away"],
    )
    return game
