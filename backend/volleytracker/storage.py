"""Storage abstraction for games and players.

Services only talk to the :class:`Storage` protocol. ``SqlStorage`` wraps a
SQLAlchemy ``AsyncSession`` and is what the API uses; ``MemoryStorage`` keeps
everything in process-local dicts and is handy for tests and scripts.
"""

from __future__ import annotations

from typing import Protocol, Sequence, Union

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .db import get_session
from .models import Game, Player

Entity = Union[Game, Player]


class Storage(Protocol):
    async def get_game(self, game_id: str) -> Game | None: ...

    async def list_games(self) -> Sequence[Game]: ...

    async def get_player(self, player_id: str) -> Player | None: ...

    async def list_players(self, game_id: str) -> Sequence[Player]: ...

    async def save(self, *entities: Entity) -> None:
        """Persist all ``entities`` together, or none of them."""
        ...

    async def delete(self, entity: Entity) -> None: ...


def _player_order(player: Player) -> tuple[int, str]:
    return (player.jersey_number or 0, player.name or "")


class SqlStorage:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_game(self, game_id: str) -> Game | None:
        return await self._session.get(Game, game_id)

    async def list_games(self) -> Sequence[Game]:
        stmt = select(Game).order_by(Game.created_at.desc())
        return (await self._session.execute(stmt)).scalars().all()

    async def get_player(self, player_id: str) -> Player | None:
        return await self._session.get(Player, player_id)

    async def list_players(self, game_id: str) -> Sequence[Player]:
        stmt = (
            select(Player)
            .where(Player.game_id == game_id)
            .order_by(Player.jersey_number, Player.name)
        )
        return (await self._session.execute(stmt)).scalars().all()

    async def save(self, *entities: Entity) -> None:
        try:
            for entity in entities:
                self._session.add(entity)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

    async def delete(self, entity: Entity) -> None:
        await self._session.delete(entity)
        await self._session.commit()


class MemoryStorage:
    def __init__(self) -> None:
        self._games: dict[str, Game] = {}
        self._players: dict[str, Player] = {}

    async def get_game(self, game_id: str) -> Game | None:
        return self._games.get(game_id)

    async def list_games(self) -> Sequence[Game]:
        return sorted(
            self._games.values(), key=lambda g: g.created_at, reverse=True
        )

    async def get_player(self, player_id: str) -> Player | None:
        return self._players.get(player_id)

    async def list_players(self, game_id: str) -> Sequence[Player]:
        players = [p for p in self._players.values() if p.game_id == game_id]
        return sorted(players, key=_player_order)

    async def save(self, *entities: Entity) -> None:
        for entity in entities:
            if not isinstance(entity, (Game, Player)):
                raise TypeError(f"cannot store {type(entity).__name__}")
        for entity in entities:
            if isinstance(entity, Game):
                self._games[entity.id] = entity
            else:
                self._players[entity.id] = entity

    async def delete(self, entity: Entity) -> None:
        if isinstance(entity, Game):
            self._games.pop(entity.id, None)
            for pid in [p.id for p in self._players.values() if p.game_id == entity.id]:
                self._players.pop(pid, None)
        else:
            self._players.pop(entity.id, None)


async def get_storage(session: AsyncSession = Depends(get_session)) -> Storage:
    """FastAPI dependency returning the database-backed storage."""

    return SqlStorage(session)
