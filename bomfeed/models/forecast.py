"""Forecast records extracted from the bureau's XML forecast products."""

from dataclasses import dataclass, field

from bomfeed.models.common import AreaCode

NO_FORECAST_TEXT = "No forecast available"
NO_RAIN_CHANCE = "N/A"


@dataclass(frozen=True)
class ForecastPeriod:
    start_time: str | None
    end_time: str | None
    forecast: str
    icon: str
    min_temp: int | None
    max_temp: int | None
    rain_chance: str

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "forecast": self.forecast,
            "icon": self.icon,
            "min_temp": self.min_temp,
            "max_temp": self.max_temp,
            "rain_chance": self.rain_chance,
        }


@dataclass(frozen=True)
class ForecastResult:
    location: str
    area_code: AreaCode
    periods: tuple[ForecastPeriod, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "area_code": self.area_code,
            "periods": [p.to_dict() for p in self.periods],
        }


@dataclass(frozen=True)
class SearchMatch:
    location: str
    area_code: AreaCode
    forecast: str
    icon: str
    min_temp: int | None
    max_temp: int | None
    rain_chance: str

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "area_code": self.area_code,
            "forecast": self.forecast,
            "icon": self.icon,
            "min_temp": self.min_temp,
            "max_temp": self.max_temp,
            "rain_chance": self.rain_chance,
        }
