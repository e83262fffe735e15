"""Combined per-area output handed to the response layer."""

from dataclasses import dataclass

from bomfeed.config.schema import AreaConfig
from bomfeed.models.forecast import ForecastResult
from bomfeed.models.observation import MergedObservation


@dataclass(frozen=True)
class AreaReport:
    area: AreaConfig
    forecast: ForecastResult | None
    observation: MergedObservation | None
    fetched_at: str

    def to_dict(self) -> dict:
        return {
            "area": {
                "name": self.area.name,
                "area_code": self.area.area_code,
                "state": str(self.area.state),
            },
            "forecast": self.forecast.to_dict() if self.forecast else None,
            "observation": self.observation.to_dict() if self.observation else None,
            "fetched_at": self.fetched_at,
        }
