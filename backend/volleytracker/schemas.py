from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator, field_validator, ConfigDict

STAT_TYPES = ("kills", "assists", "digs", "blocks", "aces", "errors")

TeamType = Literal["home", "away"]
StatType = Literal["kills", "assists", "digs", "blocks", "aces", "errors"]


def _normalize_team(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field} must not be empty")
    return trimmed


class RulesIn(BaseModel):
    pointsTo: int = Field(25, ge=1, le=99)
    winBy: int = Field(2, ge=1, le=5)
    bestOf: Literal[1, 3, 5] = 5
    decidingSetPointsTo: Optional[int] = Field(default=None, ge=1, le=99)

    model_config = ConfigDict(extra="forbid")


class GameCreate(BaseModel):
    homeTeamName: str = Field(..., min_length=1, max_length=100)
    awayTeamName: str = Field(..., min_length=1, max_length=100)
    rules: Optional[RulesIn] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("homeTeamName", "awayTeamName", mode="before")
    @classmethod
    def _validate_team_name(cls, value: str, info) -> str:
        return _require_text(value, info.field_name)


class SetRecord(BaseModel):
    homeScore: int = Field(..., ge=0)
    awayScore: int = Field(..., ge=0)
    completed: bool = True


class GameOut(BaseModel):
    """Scoreboard state of a game."""

    id: str
    homeTeamName: str
    awayTeamName: str
    currentSet: int
    homeScore: int
    awayScore: int
    sets: List[SetRecord] = Field(default_factory=list)
    isActive: bool
    createdAt: Optional[datetime] = None
    rules: Dict[str, Any] = Field(default_factory=dict)
    undoDepth: int = 0


class ScoreUpdate(BaseModel):
    homeScore: int = Field(..., ge=0)
    awayScore: int = Field(..., ge=0)
    currentSet: int = Field(..., ge=1, le=5)


class SetsUpdate(BaseModel):
    sets: List[SetRecord]


class PointIn(BaseModel):
    team: TeamType

    @field_validator("team", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        return _normalize_team(value)


class PlayerCreate(BaseModel):
    gameId: str = Field(..., min_length=1)
    teamType: TeamType
    jerseyNumber: int = Field(0, ge=0, le=999)
    name: str = Field(..., min_length=1, max_length=50)
    position: str = Field("Unknown", max_length=30)

    model_config = ConfigDict(extra="forbid")

    @field_validator("teamType", mode="before")
    @classmethod
    def _normalize_team_type(cls, value: Any) -> Any:
        return _normalize_team(value)

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _require_text(value, "name")

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Optional[str]) -> str:
        if value is None:
            return "Unknown"
        if not isinstance(value, str):
            raise ValueError("position must be a string")
        return value.strip() or "Unknown"


class PlayerOut(BaseModel):
    id: str
    gameId: str
    teamType: TeamType
    jerseyNumber: int
    name: str
    position: str
    kills: int = 0
    assists: int = 0
    digs: int = 0
    blocks: int = 0
    aces: int = 0
    errors: int = 0
    totalPoints: int = 0

    @model_validator(mode="after")
    def _compute_total_points(self) -> "PlayerOut":
        # Errors are tracked but never count towards a player's points.
        self.totalPoints = (
            self.kills + self.assists + self.digs + self.blocks + self.aces
        )
        return self


class StatUpdate(BaseModel):
    playerId: str = Field(..., min_length=1)
    statType: StatType
    increment: bool


class TeamTotalsOut(BaseModel):
    kills: int = 0
    assists: int = 0
    digs: int = 0
    blocks: int = 0
    aces: int = 0
    errors: int = 0
    points: int = 0


class SetRowOut(BaseModel):
    setNumber: int
    homeScore: int
    awayScore: int
    completed: bool


class SetsWonOut(BaseModel):
    home: int = 0
    away: int = 0


class GameSummaryOut(BaseModel):
    """Read-only report for a game and its roster."""

    game: GameOut
    setsWon: SetsWonOut
    winner: Optional[TeamType] = None
    teams: Dict[TeamType, TeamTotalsOut]
    sets: List[SetRowOut] = Field(default_factory=list)
    players: List[PlayerOut] = Field(default_factory=list)


class RosterImportOut(BaseModel):
    """Result of a CSV roster import."""

    gameId: str
    count: int
    game: GameOut
    players: List[PlayerOut] = Field(default_factory=list)
