"""Observation fetcher: latest reading per station from the JSON feeds."""

import asyncio
import logging
import re

import httpx

from bomfeed.config.schema import FeedConfig
from bomfeed.fusion.merge import merge_observations
from bomfeed.ingest.bom_client import BomClient
from bomfeed.models.common import StateCode
from bomfeed.models.observation import MergedObservation, ObservationReading, Station

logger = logging.getLogger(__name__)

MISSING = "-"
_COMPACT_OFFSET = re.compile(r"^([+-])(\d{2})(\d{2})$")


class ObservationFetcher:
    def __init__(self, bom_client: BomClient, feeds: FeedConfig):
        self.bom = bom_client
        self.feeds = feeds

    async def fetch(self, state: StateCode | str, wmo_id: str) -> ObservationReading | None:
        """Latest reading for one station, or None on any failure."""
        product_id = self._product_for(state)
        if product_id is None:
            logger.warning("No observation feed for state %s", state)
            return None
        try:
            doc = await self.bom.get_observations(product_id, wmo_id)
            return extract_latest(doc, wmo_id)
        except httpx.HTTPError as e:
            logger.warning("Observations for %s unavailable: %s", wmo_id, e)
            return None
        except ValueError as e:
            logger.warning("Observations for %s not valid JSON: %s", wmo_id, e)
            return None
        except Exception:
            logger.exception("Failed to read observations for station %s", wmo_id)
            return None

    async def fetch_many(
        self, state: StateCode | str, stations: list[Station]
    ) -> list[ObservationReading | None]:
        """Fetch all stations concurrently; results align with ``stations``."""
        return list(
            await asyncio.gather(*(self.fetch(state, s.station_id) for s in stations))
        )

    async def fetch_merged(
        self, state: StateCode | str, stations: list[Station]
    ) -> MergedObservation | None:
        """Fetch every station, then merge once all fetches have settled."""
        if not stations:
            return None
        readings = await self.fetch_many(state, stations)
        return merge_observations(stations, readings)

    def _product_for(self, state: StateCode | str) -> str | None:
        try:
            return self.feeds.observation_feeds.get(StateCode(str(state).upper()))
        except ValueError:
            return None


def extract_latest(doc: object, wmo_id: str = "?") -> ObservationReading | None:
    """Pull the most recent entry out of an observation document."""
    data = None
    if isinstance(doc, dict):
        observations = doc.get("observations")
        if isinstance(observations, dict):
            data = observations.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        logger.info("No observation data for station %s", wmo_id)
        return None
    return transform_observation(data[0])


def transform_observation(obs: dict) -> ObservationReading:
    """Map bureau field names onto an ObservationReading."""
    rain_24hr = obs.get("rainfall_24hr")
    if rain_24hr is None:
        rain_24hr = _parse_float(obs.get("rain_trace"))

    cloud = obs.get("cloud")
    if cloud == MISSING:
        cloud = None

    return ObservationReading(
        station=obs.get("name"),
        observation_time=format_obs_time(obs.get("aifstime_local"), obs.get("TDZ")),
        temp_c=obs.get("air_temp"),
        feels_like_c=obs.get("apparent_t"),
        humidity=obs.get("rel_hum"),
        wind_dir=obs.get("wind_dir"),
        wind_speed_kmh=obs.get("wind_spd_kmh"),
        gust_speed_kmh=obs.get("gust_kmh"),
        rain_last_hour_mm=obs.get("rain_hour"),
        rain_24hr_mm=rain_24hr,
        cloud=cloud,
    )


def format_obs_time(time_str: object, tz_offset: object) -> str | None:
    """Convert 'YYYYMMDDHHmmss' plus an offset to ISO 8601.

    Feeds occasionally send the timestamp as a bare number; that is
    accepted, anything else that is not a string gives None.

    >>> format_obs_time("20240115143000", "+11:00")
    '2024-01-15T14:30:00+11:00'
    """
    if isinstance(time_str, int) and not isinstance(time_str, bool):
        time_str = str(time_str)
    if not isinstance(time_str, str) or len(time_str) < 14:
        return None
    offset = tz_offset if isinstance(tz_offset, str) and tz_offset else "+00:00"
    m = _COMPACT_OFFSET.match(offset)
    if m:
        offset = f"{m.group(1)}{m.group(2)}:{m.group(3)}"
    t = time_str
    return f"{t[0:4]}-{t[4:6]}-{t[6:8]}T{t[8:10]}:{t[10:12]}:{t[12:14]}{offset}"


def _parse_float(value: object) -> float | None:
    if value is None or value == MISSING:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
