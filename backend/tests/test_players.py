BASE = "/api/v0"


def _game_id(client) -> str:
    resp = client.post(
        f"{BASE}/games", json={"homeTeamName": "Lions", "awayTeamName": "Tigers"}
    )
    return resp.json()["id"]


def _add_player(client, game_id: str, **fields) -> dict:
    payload = {"gameId": game_id, "teamType": "home", "name": "Ana Lima"}
    payload.update(fields)
    resp = client.post(f"{BASE}/players", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_player_defaults(client):
    player = _add_player(client, _game_id(client), teamType="AWAY")
    assert player["teamType"] == "away"
    assert player["position"] == "Unknown"
    assert player["jerseyNumber"] == 0
    assert player["totalPoints"] == 0


def test_create_player_unknown_game(client):
    resp = client.post(
        f"{BASE}/players",
        json={"gameId": "missing", "teamType": "home", "name": "Ana"},
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "game_not_found"


def test_stat_updates(client):
    player = _add_player(client, _game_id(client))
    for increment in (True, True, False):
        resp = client.patch(
            f"{BASE}/players/stats",
            json={"playerId": player["id"], "statType": "kills", "increment": increment},
        )
        assert resp.status_code == 200
    assert resp.json()["kills"] == 1
    assert resp.json()["totalPoints"] == 1


def test_stat_decrement_at_zero_is_not_an_error(client):
    player = _add_player(client, _game_id(client))
    resp = client.patch(
        f"{BASE}/players/stats",
        json={"playerId": player["id"], "statType": "errors", "increment": False},
    )
    assert resp.status_code == 200
    assert resp.json()["errors"] == 0


def test_stat_update_rejects_unknown_stat(client):
    player = _add_player(client, _game_id(client))
    resp = client.patch(
        f"{BASE}/players/stats",
        json={"playerId": player["id"], "statType": "spikes", "increment": True},
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_argument"


def test_delete_player_returns_deleted_player(client):
    gid = _game_id(client)
    player = _add_player(client, gid)
    resp = client.delete(f"{BASE}/players/{player['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == player["id"]
    assert client.get(f"{BASE}/games/{gid}/players").json() == []

    resp = client.delete(f"{BASE}/players/{player['id']}")
    assert resp.status_code == 404
    assert resp.json()["code"] == "player_not_found"


def test_cannot_add_player_after_match_end(client):
    gid = _game_id(client)
    client.patch(f"{BASE}/games/{gid}/end")
    resp = client.post(
        f"{BASE}/players", json={"gameId": gid, "teamType": "home", "name": "Ana"}
    )
    assert resp.status_code == 409
