from fastapi import APIRouter, Depends, Request

from ..exceptions import ProblemDetail
from ..limits import limiter, scoring_rate_limit
from ..schemas import PlayerCreate, PlayerOut, StatUpdate
from ..services import roster as roster_service
from ..services.stats import adjust_stat
from ..storage import Storage, get_storage

router = APIRouter(
    prefix="/players",
    tags=["players"],
    responses={
        404: {"model": ProblemDetail},
        409: {"model": ProblemDetail},
        422: {"model": ProblemDetail},
    },
)


# POST /api/v0/players
@router.post("", response_model=PlayerOut)
async def create_player(body: PlayerCreate, storage: Storage = Depends(get_storage)):
    player = await roster_service.create_player(storage, body)
    return roster_service.serialize_player(player)


# PATCH /api/v0/players/stats
@router.patch("/stats", response_model=PlayerOut)
@limiter.limit(scoring_rate_limit)
async def update_stat(
    request: Request,
    body: StatUpdate,
    storage: Storage = Depends(get_storage),
):
    player = await adjust_stat(storage, body.playerId, body.statType, body.increment)
    return roster_service.serialize_player(player)


# DELETE /api/v0/players/{player_id}
@router.delete("/{player_id}", response_model=PlayerOut)
async def delete_player(player_id: str, storage: Storage = Depends(get_storage)):
    player = await roster_service.delete_player(storage, player_id)
    return roster_service.serialize_player(player)
