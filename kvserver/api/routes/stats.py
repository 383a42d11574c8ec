from fastapi import APIRouter, Depends

from kvserver.api import deps
from kvserver.schemas.data import StatsOut
from kvserver.services.store import Store

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsOut)
def get_stats(store: Store = Depends(deps.get_store)):
    return StatsOut.from_stats(store.stats())
