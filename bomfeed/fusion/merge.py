"""Observation fusion: one reading per area from several ranked stations.

For each target field the nearest station reporting a non-null value wins.
Rank order is the only tie-break. Observation time and wind direction are
context rather than per-field data and come from the nearest station that
returned anything at all.
"""

import logging

from bomfeed.models.observation import (
    FieldSource,
    MergedObservation,
    ObservationReading,
    Station,
)

logger = logging.getLogger(__name__)

TARGET_FIELDS: tuple[str, ...] = (
    "temp_c",
    "feels_like_c",
    "humidity",
    "wind_speed_kmh",
    "gust_speed_kmh",
    "rain_24hr_mm",
)


def merge_observations(
    stations: list[Station],
    readings: list[ObservationReading | None],
) -> MergedObservation | None:
    """Merge readings aligned index-for-index with ``stations`` (nearest first).

    Returns None when no station supplied any target field.
    """
    if len(stations) != len(readings):
        raise ValueError(
            f"{len(stations)} stations but {len(readings)} readings"
        )
    ranked = sorted(zip(stations, readings), key=lambda pair: pair[0].rank)
    pairs = [(s, r) for s, r in ranked if r is not None]
    if not pairs:
        return None

    values: dict[str, float] = {}
    sources: dict[str, FieldSource] = {}
    for field_name in TARGET_FIELDS:
        for station, reading in pairs:
            value = getattr(reading, field_name)
            if value is not None:
                values[field_name] = value
                sources[field_name] = FieldSource(station.name, station.distance_km)
                break

    if not values:
        logger.info("No usable fields from %d station readings", len(pairs))
        return None

    primary_station, first = pairs[0]
    return MergedObservation(
        values=values,
        sources=sources,
        primary_station=primary_station.name,
        observation_time=first.observation_time,
        wind_dir=first.wind_dir,
    )
