from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..scoring import volleyball

STAT_FIELDS = ("kills", "assists", "digs", "blocks", "aces", "errors")
# Errors are excluded from the points a player contributes.
POINT_FIELDS = ("kills", "assists", "digs", "blocks", "aces")
TEAMS = ("home", "away")


def player_points(player: Any) -> int:
    """Return kills + assists + digs + blocks + aces for a player."""
    return sum(int(getattr(player, field, 0) or 0) for field in POINT_FIELDS)


def team_totals(players: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    """Sum each stat counter (and points) per team.

    Both teams are always present, even without players.
    """
    totals: Dict[str, Dict[str, int]] = {
        team: {field: 0 for field in STAT_FIELDS + ("points",)} for team in TEAMS
    }
    for player in players:
        team = totals.get(player.team_type)
        if team is None:
            continue
        for field in STAT_FIELDS:
            team[field] += int(getattr(player, field, 0) or 0)
        team["points"] += player_points(player)
    return totals


def set_rows(sets: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten completed set records into numbered export rows."""
    return [
        {
            "setNumber": index,
            "homeScore": s.get("homeScore", 0),
            "awayScore": s.get("awayScore", 0),
            "completed": bool(s.get("completed")),
        }
        for index, s in enumerate(sets or [], start=1)
    ]


def roster_rows(players: Iterable[Any]) -> List[Dict[str, Any]]:
    """Flat roster with every counter, tagged by team."""
    return [
        {
            "name": p.name,
            "team": p.team_type,
            "jerseyNumber": p.jersey_number,
            "position": p.position,
            **{field: int(getattr(p, field, 0) or 0) for field in STAT_FIELDS},
        }
        for p in players
    ]


def match_result(state: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "setsWon": volleyball.sets_won(state["sets"]),
        "winner": volleyball.match_winner(state),
    }
