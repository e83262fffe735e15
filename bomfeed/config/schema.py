"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator

from bomfeed.models.common import StateCode
from bomfeed.models.observation import Station


class StationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    station_id: str
    name: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    distance_km: float = Field(ge=0.0)
    rank: int = Field(ge=1)

    def to_station(self) -> Station:
        return Station(
            station_id=self.station_id,
            name=self.name,
            latitude=self.latitude,
            longitude=self.longitude,
            distance_km=self.distance_km,
            rank=self.rank,
        )


class AreaConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: str
    area_code: str
    state: StateCode
    stations: list[StationConfig] = []

    @field_validator("stations")
    @classmethod
    def _ranks_unique(cls, stations: list[StationConfig]) -> list[StationConfig]:
        ranks = [s.rank for s in stations]
        if len(ranks) != len(set(ranks)):
            raise ValueError("station ranks must be unique within an area")
        return stations


class FeedConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "http://reg.bom.gov.au"
    user_agent: str = "bomfeed/0.1.0"
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    chunk_size: int = Field(default=16384, ge=256)
    forecast_feeds: dict[StateCode, str] = {}
    observation_feeds: dict[StateCode, str] = {}
    search_order: list[StateCode] = []


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_limit: int = Field(default=10, ge=1, le=100)


class LoggingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    @field_validator("level")
    @classmethod
    def _known_level(cls, level: str) -> str:
        level = level.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {level}")
        return level


class BomConfig(BaseModel):
    model_config = {"extra": "forbid"}

    feeds: FeedConfig = FeedConfig()
    search: SearchConfig = SearchConfig()
    logging: LoggingConfig = LoggingConfig()
    areas: list[AreaConfig] = []
