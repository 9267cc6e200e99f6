import csv
import io
from types import SimpleNamespace

import pytest

from volleytracker.services.csv_io import (
    CsvFormatError,
    decode_upload,
    parse_roster,
    players_csv,
    sets_csv,
)

HEADER = "Player Name,Team,Kills,Assists,Digs,Blocks,Aces,Errors"


def test_parse_roster_defaults_optional_columns():
    players = parse_roster(f"{HEADER}\nAna Lima, Home ,3,,1,0,0,2\n\n")
    assert players == [
        {
            "name": "Ana Lima",
            "team_type": "home",
            "position": "Unknown",
            "jersey_number": 0,
            "kills": 3,
            "assists": 0,
            "digs": 1,
            "blocks": 0,
            "aces": 0,
            "errors": 2,
        }
    ]


def test_parse_roster_reads_optional_columns():
    text = f"{HEADER},Position,Jersey Number\nEmma,away,0,0,0,0,0,0,Libero,12\n"
    (player,) = parse_roster(text)
    assert player["position"] == "Libero"
    assert player["jersey_number"] == 12


def test_decode_upload_strips_bom():
    text = decode_upload(("\ufeff" + HEADER + "\nAna,home,0,0,0,0,0,0\n").encode("utf-8"))
    assert parse_roster(text)[0]["name"] == "Ana"


@pytest.mark.parametrize(
    "text, msg",
    [
        ("Player Name,Team,Assists,Digs,Blocks,Aces,Errors\nAna,home,0,0,0,0,0\n", "Kills"),
        (f"{HEADER}\n", "at least one player"),
        (f"{HEADER}\nAna,bench,0,0,0,0,0,0\n", "Team"),
        (f"{HEADER}\n,home,0,0,0,0,0,0\n", "Player Name"),
        (f"{HEADER}\nAna,home,x,0,0,0,0,0\n", "Kills must be an integer"),
        (f"{HEADER}\nAna,home,-1,0,0,0,0,0\n", ">= 0"),
    ],
    ids=["missing-kills", "no-rows", "bad-team", "no-name", "non-integer", "negative"],
)
def test_parse_roster_rejects(text, msg):
    with pytest.raises(CsvFormatError) as exc:
        parse_roster(text)
    assert msg in exc.value.detail


def test_decode_upload_rejects_binary():
    with pytest.raises(CsvFormatError):
        decode_upload(b"\xff\xfe\x00bad")


def test_players_csv_lists_every_counter():
    player = SimpleNamespace(
        name="Ana",
        team_type="home",
        jersey_number=1,
        position="Setter",
        kills=3,
        assists=1,
        digs=0,
        blocks=0,
        aces=2,
        errors=1,
    )
    rows = list(csv.reader(io.StringIO(players_csv([player]))))
    assert rows[0] == HEADER.split(",")
    assert rows[1] == ["Ana", "home", "3", "1", "0", "0", "2", "1"]


def test_sets_csv_uses_team_names():
    text = sets_csv(
        [{"homeScore": 25, "awayScore": 20, "completed": True}], "Lions", "Tigers"
    )
    assert text.splitlines() == [
        '"Set Number","Lions Score","Tigers Score","Completed"',
        '"1","25","20","Yes"',
    ]
