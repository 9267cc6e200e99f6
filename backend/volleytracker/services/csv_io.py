"""CSV roster import and stats/set-score exports."""

from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable, List, Sequence

from .summary import STAT_FIELDS, roster_rows, set_rows

ROSTER_HEADERS = [
    "Player Name",
    "Team",
    "Kills",
    "Assists",
    "Digs",
    "Blocks",
    "Aces",
    "Errors",
]
TEAMS = ("home", "away")


class CsvFormatError(Exception):
    """Raised when an uploaded roster file cannot be imported."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def decode_upload(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise CsvFormatError("Roster file must be UTF-8 encoded text.")


def _parse_count(value: Any, header: str, line: int) -> int:
    text = (value or "").strip()
    if not text:
        return 0
    try:
        count = int(text)
    except ValueError:
        raise CsvFormatError(f"Row {line}: {header} must be an integer (got {text!r}).")
    if count < 0:
        raise CsvFormatError(f"Row {line}: {header} must be >= 0.")
    return count


def parse_roster(text: str) -> List[Dict[str, Any]]:
    """Parse a roster CSV into player dicts.

    Every header in ``ROSTER_HEADERS`` is required; ``Position`` and
    ``Jersey Number`` are optional. The whole file is validated before anything
    is returned, so callers never see a partial roster.
    """

    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)
    fieldnames = [(name or "").strip() for name in (reader.fieldnames or [])]
    missing = [h for h in ROSTER_HEADERS if h not in fieldnames]
    if missing:
        raise CsvFormatError(f"Missing required column(s): {', '.join(missing)}.")
    reader.fieldnames = fieldnames

    players: List[Dict[str, Any]] = []
    # Header is line 1
    for line, row in enumerate(reader, start=2):
        if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
            continue
        name = (row.get("Player Name") or "").strip()
        if not name:
            raise CsvFormatError(f"Row {line}: Player Name is required.")
        team = (row.get("Team") or "").strip().lower()
        if team not in TEAMS:
            raise CsvFormatError(f"Row {line}: Team must be 'home' or 'away'.")
        player = {
            "name": name,
            "team_type": team,
            "position": (row.get("Position") or "").strip() or "Unknown",
            "jersey_number": _parse_count(row.get("Jersey Number"), "Jersey Number", line),
        }
        for field, header in zip(STAT_FIELDS, ROSTER_HEADERS[2:]):
            player[field] = _parse_count(row.get(header), header, line)
        players.append(player)

    if not players:
        raise CsvFormatError("Roster file must contain at least one player row.")
    return players


def _write(rows: Iterable[Sequence[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def players_csv(players: Iterable[Any]) -> str:
    rows: List[List[Any]] = [ROSTER_HEADERS]
    for row in roster_rows(players):
        rows.append([row["name"], row["team"], *(row[f] for f in STAT_FIELDS)])
    return _write(rows)


def sets_csv(sets: List[Dict[str, Any]], home_team: str, away_team: str) -> str:
    rows: List[List[Any]] = [
        ["Set Number", f"{home_team} Score", f"{away_team} Score", "Completed"]
    ]
    for row in set_rows(sets):
        rows.append(
            [
                row["setNumber"],
                row["homeScore"],
                row["awayScore"],
                "Yes" if row["completed"] else "No",
            ]
        )
    return _write(rows)
