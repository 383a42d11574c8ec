from pydantic import BaseModel, RootModel, StrictStr

from kvserver.services.store import StoreStats


class DataPayload(RootModel[dict[str, StrictStr]]):
    pass


class StatsOut(BaseModel):
    requests: int
    database_size: int

    @classmethod
    def from_stats(cls, stats: StoreStats) -> "StatsOut":
        return cls(requests=stats.requests, database_size=stats.database_size)


class HealthOut(BaseModel):
    status: str
