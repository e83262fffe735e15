"""Area report pipeline: forecast plus merged current conditions for one area."""

import asyncio
import logging
import time

from bomfeed.config.schema import BomConfig
from bomfeed.ingest.bom_client import BomClient
from bomfeed.ingest.forecast_fetcher import ForecastFetcher
from bomfeed.ingest.observation_fetcher import ObservationFetcher
from bomfeed.lookup import AreaLookup, ConfigAreaLookup
from bomfeed.models.common import AreaCode, utc_now_iso
from bomfeed.models.reporting import AreaReport

logger = logging.getLogger(__name__)


class AreaReportPipeline:
    def __init__(
        self,
        config: BomConfig,
        bom_client: BomClient,
        lookup: AreaLookup | None = None,
    ):
        self.config = config
        self.lookup = lookup or ConfigAreaLookup(config)
        self.forecasts = ForecastFetcher(bom_client, config.feeds)
        self.observations = ObservationFetcher(bom_client, config.feeds)

    async def run(self, area_code: AreaCode) -> AreaReport | None:
        """Build the report for one area; None if the lookup doesn't know it."""
        area = self.lookup.get_area(area_code)
        if area is None:
            logger.warning("Unknown area %s", area_code)
            return None

        start = time.monotonic()
        stations = self.lookup.stations_for(area_code)
        forecast, observation = await asyncio.gather(
            self.forecasts.fetch_by_area_code(area.area_code, area.state),
            self.observations.fetch_merged(area.state, stations),
        )
        logger.info(
            "Report for %s: forecast=%s observation=%s (%.2fs)",
            area.area_code,
            "yes" if forecast else "no",
            "yes" if observation else "no",
            time.monotonic() - start,
        )
        return AreaReport(
            area=area,
            forecast=forecast,
            observation=observation,
            fetched_at=utc_now_iso(),
        )
