# backend/volleytracker/routers/games.py
import re

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import InvalidArgument, ProblemDetail
from ..history import UndoHistory, get_undo_history
from ..limits import limiter, scoring_rate_limit
from ..schemas import (
    GameCreate,
    GameOut,
    GameSummaryOut,
    PlayerOut,
    PointIn,
    RosterImportOut,
    ScoreUpdate,
    SetRowOut,
    SetsUpdate,
    SetsWonOut,
    TeamTotalsOut,
)
from ..services import games as game_service
from ..services import roster as roster_service
from ..services.csv_io import players_csv, sets_csv
from ..services.summary import match_result, set_rows, team_totals
from ..storage import Storage, get_storage

# Resource-only prefix; versioning is added in main.py
router = APIRouter(
    prefix="/games",
    tags=["games"],
    responses={
        404: {"model": ProblemDetail},
        409: {"model": ProblemDetail},
        422: {"model": ProblemDetail},
    },
)


async def _game_out(history: UndoHistory, game) -> GameOut:
    return game_service.serialize_game(game, await history.depth(game.id))


def _slug(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "-", name).strip("-").lower() or "team"


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# POST /api/v0/games
@router.post("", response_model=GameOut)
async def create_game(
    body: GameCreate,
    storage: Storage = Depends(get_storage),
):
    game = await game_service.create_game(storage, body)
    return game_service.serialize_game(game)


# GET /api/v0/games
@router.get("", response_model=list[GameOut])
async def list_games(
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    return [await _game_out(history, g) for g in await storage.list_games()]


# POST /api/v0/games/import
@router.post("/import", response_model=RosterImportOut)
async def import_game(
    homeTeamName: str = Form(...),
    awayTeamName: str = Form(...),
    file: UploadFile = File(...),
    storage: Storage = Depends(get_storage),
):
    try:
        body = GameCreate(homeTeamName=homeTeamName, awayTeamName=awayTeamName)
    except PydanticValidationError as exc:
        raise InvalidArgument(str(exc.errors()[0].get("msg", "invalid team name")))
    raw = await file.read()
    game, players = await roster_service.import_game(storage, body, raw)
    return RosterImportOut(
        gameId=game.id,
        count=len(players),
        game=game_service.serialize_game(game),
        players=[roster_service.serialize_player(p) for p in players],
    )


# GET /api/v0/games/{game_id}
@router.get("/{game_id}", response_model=GameOut)
async def get_game(
    game_id: str,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.require_game(storage, game_id)
    return await _game_out(history, game)


# GET /api/v0/games/{game_id}/players
@router.get("/{game_id}/players", response_model=list[PlayerOut])
async def list_game_players(game_id: str, storage: Storage = Depends(get_storage)):
    players = await roster_service.list_players(storage, game_id)
    return [roster_service.serialize_player(p) for p in players]


# POST /api/v0/games/{game_id}/players/import
@router.post("/{game_id}/players/import", response_model=RosterImportOut)
async def import_game_players(
    game_id: str,
    file: UploadFile = File(...),
    storage: Storage = Depends(get_storage),
):
    raw = await file.read()
    game, players = await roster_service.import_roster(storage, game_id, raw)
    return RosterImportOut(
        gameId=game.id,
        count=len(players),
        game=game_service.serialize_game(game),
        players=[roster_service.serialize_player(p) for p in players],
    )


# POST /api/v0/games/{game_id}/points
@router.post("/{game_id}/points", response_model=GameOut)
@limiter.limit(scoring_rate_limit)
async def score_point(
    request: Request,
    game_id: str,
    body: PointIn,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.score_point(storage, history, game_id, body.team)
    return await _game_out(history, game)


# POST /api/v0/games/{game_id}/end-set
@router.post("/{game_id}/end-set", response_model=GameOut)
@limiter.limit(scoring_rate_limit)
async def end_set(
    request: Request,
    game_id: str,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.end_set(storage, history, game_id)
    return await _game_out(history, game)


# POST /api/v0/games/{game_id}/undo
@router.post("/{game_id}/undo", response_model=GameOut)
@limiter.limit(scoring_rate_limit)
async def undo(
    request: Request,
    game_id: str,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.undo_last(storage, history, game_id)
    return await _game_out(history, game)


# PATCH /api/v0/games/{game_id}/score
@router.patch("/{game_id}/score", response_model=GameOut)
@limiter.limit(scoring_rate_limit)
async def update_score(
    request: Request,
    game_id: str,
    body: ScoreUpdate,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.correct_score(
        storage,
        history,
        game_id,
        body.homeScore,
        body.awayScore,
        body.currentSet,
    )
    return await _game_out(history, game)


# PATCH /api/v0/games/{game_id}/sets
@router.patch("/{game_id}/sets", response_model=GameOut)
@limiter.limit(scoring_rate_limit)
async def update_sets(
    request: Request,
    game_id: str,
    body: SetsUpdate,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.correct_sets(
        storage, history, game_id, [s.model_dump() for s in body.sets]
    )
    return await _game_out(history, game)


# PATCH /api/v0/games/{game_id}/end
@router.patch("/{game_id}/end", response_model=GameOut)
async def end_game(
    game_id: str,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.end_match(storage, history, game_id)
    return game_service.serialize_game(game)


# GET /api/v0/games/{game_id}/summary
@router.get("/{game_id}/summary", response_model=GameSummaryOut)
async def game_summary(
    game_id: str,
    storage: Storage = Depends(get_storage),
    history: UndoHistory = Depends(get_undo_history),
):
    game = await game_service.require_game(storage, game_id)
    players = await storage.list_players(game_id)
    result = match_result(game_service.game_state(game))
    return GameSummaryOut(
        game=await _game_out(history, game),
        setsWon=SetsWonOut(**result["setsWon"]),
        winner=result["winner"],
        teams={
            team: TeamTotalsOut(**totals)
            for team, totals in team_totals(players).items()
        },
        sets=[SetRowOut(**row) for row in set_rows(game.sets)],
        players=[roster_service.serialize_player(p) for p in players],
    )


# GET /api/v0/games/{game_id}/export/players
@router.get("/{game_id}/export/players", response_class=Response)
async def export_players(game_id: str, storage: Storage = Depends(get_storage)):
    game = await game_service.require_game(storage, game_id)
    players = await storage.list_players(game_id)
    filename = (
        f"volleyball-stats-{_slug(game.home_team_name)}"
        f"-vs-{_slug(game.away_team_name)}.csv"
    )
    return _csv_response(players_csv(players), filename)


# GET /api/v0/games/{game_id}/export/sets
@router.get("/{game_id}/export/sets", response_class=Response)
async def export_sets(game_id: str, storage: Storage = Depends(get_storage)):
    game = await game_service.require_game(storage, game_id)
    filename = (
        f"volleyball-set-scores-{_slug(game.home_team_name)}"
        f"-vs-{_slug(game.away_team_name)}.csv"
    )
    return _csv_response(
        sets_csv(game.sets or [], game.home_team_name, game.away_team_name),
        filename,
    )
