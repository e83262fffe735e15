"""Station and observation models."""

from dataclasses import dataclass, field

from bomfeed.models.common import WmoId


@dataclass(frozen=True)
class Station:
    station_id: WmoId
    name: str
    latitude: float
    longitude: float
    distance_km: float
    rank: int  # 1 = nearest


@dataclass(frozen=True)
class ObservationReading:
    station: str | None
    observation_time: str | None
    temp_c: float | None = None
    feels_like_c: float | None = None
    humidity: float | None = None
    wind_dir: str | None = None
    wind_speed_kmh: float | None = None
    gust_speed_kmh: float | None = None
    rain_last_hour_mm: float | None = None
    rain_24hr_mm: float | None = None
    cloud: str | None = None


@dataclass(frozen=True)
class FieldSource:
    station: str
    distance_km: float

    def to_dict(self) -> dict:
        return {"station": self.station, "distance_km": self.distance_km}


@dataclass(frozen=True)
class MergedObservation:
    values: dict[str, float] = field(default_factory=dict)
    sources: dict[str, FieldSource] = field(default_factory=dict)
    primary_station: str | None = None
    observation_time: str | None = None
    wind_dir: str | None = None

    def to_dict(self) -> dict:
        data: dict = dict(self.values)
        data["sources"] = {k: v.to_dict() for k, v in self.sources.items()}
        data["primary_station"] = self.primary_station
        data["observation_time"] = self.observation_time
        data["wind_dir"] = self.wind_dir
        return data
