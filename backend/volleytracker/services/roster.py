from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Sequence, Tuple

from ..exceptions import ImportFormatError, MatchEnded, PlayerNotFound
from ..models import Game, Player
from ..schemas import GameCreate, PlayerCreate, PlayerOut
from ..storage import Storage
from .csv_io import CsvFormatError, decode_upload, parse_roster
from .games import new_game, require_game

logger = logging.getLogger(__name__)


def serialize_player(p: Player) -> PlayerOut:
    return PlayerOut(
        id=p.id,
        gameId=p.game_id,
        teamType=p.team_type,
        jerseyNumber=p.jersey_number or 0,
        name=p.name,
        position=p.position or "Unknown",
        kills=p.kills or 0,
        assists=p.assists or 0,
        digs=p.digs or 0,
        blocks=p.blocks or 0,
        aces=p.aces or 0,
        errors=p.errors or 0,
    )


def _new_player(game_id: str, fields: Dict[str, Any]) -> Player:
    return Player(
        id=uuid.uuid4().hex,
        game_id=game_id,
        team_type=fields["team_type"],
        jersey_number=fields.get("jersey_number", 0),
        name=fields["name"],
        position=fields.get("position") or "Unknown",
        kills=fields.get("kills", 0),
        assists=fields.get("assists", 0),
        digs=fields.get("digs", 0),
        blocks=fields.get("blocks", 0),
        aces=fields.get("aces", 0),
        errors=fields.get("errors", 0),
    )


async def create_player(storage: Storage, body: PlayerCreate) -> Player:
    game = await require_game(storage, body.gameId)
    if not game.is_active:
        raise MatchEnded(game.id)
    player = _new_player(
        game.id,
        {
            "team_type": body.teamType,
            "jersey_number": body.jerseyNumber,
            "name": body.name,
            "position": body.position,
        },
    )
    await storage.save(player)
    return player


async def list_players(storage: Storage, game_id: str) -> Sequence[Player]:
    await require_game(storage, game_id)
    return await storage.list_players(game_id)


async def delete_player(storage: Storage, player_id: str) -> Player:
    player = await storage.get_player(player_id)
    if player is None:
        raise PlayerNotFound(player_id)
    await storage.delete(player)
    return player


def _parse_upload(raw: bytes) -> List[Dict[str, Any]]:
    try:
        return parse_roster(decode_upload(raw))
    except CsvFormatError as exc:
        raise ImportFormatError(exc.detail)


async def import_roster(
    storage: Storage, game_id: str, raw: bytes
) -> Tuple[Game, List[Player]]:
    """Append the players of a roster CSV to an active game."""

    game = await require_game(storage, game_id)
    if not game.is_active:
        raise MatchEnded(game_id)
    rows = _parse_upload(raw)
    players = [_new_player(game.id, row) for row in rows]
    await storage.save(*players)
    logger.info("Imported %d player(s) into game %s", len(players), game.id)
    return game, players


async def import_game(
    storage: Storage, body: GameCreate, raw: bytes
) -> Tuple[Game, List[Player]]:
    """Create a game from a roster CSV; nothing is stored if the file is invalid."""

    rows = _parse_upload(raw)
    game = new_game(body)
    players = [_new_player(game.id, row) for row in rows]
    await storage.save(game, *players)
    logger.info("Imported %d player(s) into new game %s", len(players), game.id)
    return game, players
