"""Default feed product ids and a starter set of forecast areas."""

from bomfeed.config.schema import AreaConfig, FeedConfig, StationConfig
from bomfeed.models.common import StateCode

DEFAULT_FORECAST_FEEDS: dict[StateCode, str] = {
    StateCode.VIC: "IDV10753",
    StateCode.NSW: "IDN11060",
    StateCode.ACT: "IDN11060",  # ACT is published in the NSW product
    StateCode.QLD: "IDQ11295",  # IDQ10605 only carries ME/FA codes
    StateCode.SA: "IDS10044",
    StateCode.WA: "IDW14199",
    StateCode.TAS: "IDT16000",
    StateCode.NT: "IDD10207",
}

DEFAULT_OBSERVATION_FEEDS: dict[StateCode, str] = {
    StateCode.VIC: "IDV60910",
    StateCode.NSW: "IDN60910",
    StateCode.ACT: "IDN60910",
    StateCode.QLD: "IDQ60910",
    StateCode.SA: "IDS60910",
    StateCode.WA: "IDW60910",
    StateCode.TAS: "IDT60910",
    StateCode.NT: "IDD60910",
}

DEFAULT_SEARCH_ORDER: list[StateCode] = [
    StateCode.VIC,
    StateCode.NSW,
    StateCode.QLD,
    StateCode.SA,
    StateCode.WA,
    StateCode.TAS,
    StateCode.ACT,
    StateCode.NT,
]


def default_feed_config() -> FeedConfig:
    return FeedConfig(
        forecast_feeds=dict(DEFAULT_FORECAST_FEEDS),
        observation_feeds=dict(DEFAULT_OBSERVATION_FEEDS),
        search_order=list(DEFAULT_SEARCH_ORDER),
    )


DEFAULT_AREAS: list[AreaConfig] = [
    AreaConfig(
        name="Melbourne",
        area_code="VIC_PT042",
        state=StateCode.VIC,
        stations=[
            StationConfig(
                station_id="95936",
                name="Melbourne (Olympic Park)",
                latitude=-37.8255,
                longitude=144.9816,
                distance_km=1.6,
                rank=1,
            ),
            StationConfig(
                station_id="95864",
                name="Essendon Airport",
                latitude=-37.7276,
                longitude=144.9066,
                distance_km=10.9,
                rank=2,
            ),
            StationConfig(
                station_id="94866",
                name="Melbourne Airport",
                latitude=-37.6654,
                longitude=144.8322,
                distance_km=19.5,
                rank=3,
            ),
        ],
    ),
    AreaConfig(
        name="Sydney",
        area_code="NSW_PT131",
        state=StateCode.NSW,
        stations=[
            StationConfig(
                station_id="94768",
                name="Sydney - Observatory Hill",
                latitude=-33.8607,
                longitude=151.2050,
                distance_km=0.9,
                rank=1,
            ),
            StationConfig(
                station_id="94767",
                name="Sydney Airport",
                latitude=-33.9465,
                longitude=151.1731,
                distance_km=9.8,
                rank=2,
            ),
        ],
    ),
]
