import asyncio

from sqlalchemy import select

from volleytracker import db
from volleytracker.config import DEFAULT_RULES
from volleytracker.models import Game, Player

DEMO_GAME_ID = "demo-game"

DEMO_ROSTER = [
    ("home", 1, "Ana Lima", "Setter"),
    ("home", 7, "Beatriz Costa", "Outside Hitter"),
    ("home", 12, "Carla Souza", "Middle Blocker"),
    ("home", 3, "Daniela Rocha", "Libero"),
    ("away", 4, "Emma Clarke", "Setter"),
    ("away", 9, "Freya Walsh", "Opposite"),
    ("away", 11, "Grace Murphy", "Outside Hitter"),
    ("away", 15, "Hannah Byrne", "Middle Blocker"),
]


async def main():
    await db.create_all()
    async with db.AsyncSessionLocal() as s:
        existing = (
            await s.execute(select(Game).where(Game.id == DEMO_GAME_ID))
        ).scalar_one_or_none()
        if existing is None:
            s.add(
                Game(
                    id=DEMO_GAME_ID,
                    home_team_name="Lions",
                    away_team_name="Tigers",
                    current_set=1,
                    home_score=0,
                    away_score=0,
                    sets=[],
                    rules=dict(DEFAULT_RULES),
                    is_active=True,
                )
            )
            await s.commit()

        existing_players = {
            x.id
            for x in (
                await s.execute(select(Player).where(Player.game_id == DEMO_GAME_ID))
            ).scalars().all()
        }
        for team, number, name, position in DEMO_ROSTER:
            pid = f"{DEMO_GAME_ID}-{team}-{number}"
            if pid not in existing_players:
                s.add(
                    Player(
                        id=pid,
                        game_id=DEMO_GAME_ID,
                        team_type=team,
                        jersey_number=number,
                        name=name,
                        position=position,
                    )
                )
        await s.commit()


if __name__ == "__main__":
    asyncio.run(main())
