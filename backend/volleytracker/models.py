from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    JSON,
    Integer,
    Boolean,
    Index,
)
from sqlalchemy.sql import func
from .db import Base


class Game(Base):
    __tablename__ = "game"
    id = Column(String, primary_key=True)
    home_team_name = Column(String, nullable=False)
    away_team_name = Column(String, nullable=False)
    current_set = Column(Integer, nullable=False, default=1)
    home_score = Column(Integer, nullable=False, default=0)
    away_score = Column(Integer, nullable=False, default=0)
    sets = Column(JSON, nullable=False, default=list)  # completed set records, in order
    rules = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Player(Base):
    __tablename__ = "player"
    id = Column(String, primary_key=True)
    game_id = Column(String, ForeignKey("game.id", ondelete="CASCADE"), nullable=False)
    team_type = Column(String, nullable=False)  # "home" | "away"
    jersey_number = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    position = Column(String, nullable=False, default="Unknown")
    kills = Column(Integer, nullable=False, default=0)
    assists = Column(Integer, nullable=False, default=0)
    digs = Column(Integer, nullable=False, default=0)
    blocks = Column(Integer, nullable=False, default=0)
    aces = Column(Integer, nullable=False, default=0)
    errors = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_player_game_id", "game_id"),
    )
