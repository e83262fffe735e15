"""Forecast fetcher: targeted and search extraction over the state XML feeds."""

import logging

import httpx

from bomfeed.config.schema import FeedConfig
from bomfeed.ingest.bom_client import BomClient
from bomfeed.ingest.forecast_machine import AreaSearchMachine, TargetedForecastMachine
from bomfeed.ingest.stream_controller import (
    ExtractionMachine,
    ExtractionOutcome,
    StreamController,
)
from bomfeed.models.common import AreaCode, StateCode, state_from_area_code
from bomfeed.models.forecast import ForecastResult, SearchMatch

logger = logging.getLogger(__name__)


class ForecastFetcher:
    def __init__(
        self,
        bom_client: BomClient,
        feeds: FeedConfig,
        controller: StreamController | None = None,
    ):
        self.bom = bom_client
        self.feeds = feeds
        self.controller = controller or StreamController()

    async def fetch_by_area_code(
        self, area_code: AreaCode, state: StateCode | str | None = None
    ) -> ForecastResult | None:
        """Extract the multi-day forecast for one area code.

        Returns None when the state has no feed, the feed cannot be fetched,
        or the area code never appears in it.
        """
        state = _resolve_state(state, area_code)
        product_id = self.feeds.forecast_feeds.get(state) if state else None
        if product_id is None:
            logger.warning("No forecast feed for area %s (state=%s)", area_code, state)
            return None

        outcome = await self._extract(product_id, TargetedForecastMachine(area_code))
        if outcome is None:
            return None
        if outcome.result is None:
            logger.info("Area %s not found in %s", area_code, product_id)
        return outcome.result

    async def search(self, query: str, limit: int) -> list[SearchMatch]:
        """Find areas whose name contains ``query`` across feeds in priority order.

        Feeds are tried one at a time and no further feed is fetched once
        ``limit`` distinct area names have been collected.
        """
        matches: list[SearchMatch] = []
        seen_names: set[str] = set()
        tried: set[str] = set()

        for state in self.feeds.search_order:
            if len(matches) >= limit:
                break
            product_id = self.feeds.forecast_feeds.get(state)
            if product_id is None or product_id in tried:
                continue
            tried.add(product_id)

            machine = AreaSearchMachine(query, limit - len(matches), exclude=seen_names)
            outcome = await self._extract(product_id, machine)
            if outcome is None:
                continue
            for match in outcome.result:
                if match.location in seen_names:
                    continue
                seen_names.add(match.location)
                matches.append(match)

        logger.info("Search %r matched %d areas over %d feeds", query, len(matches), len(tried))
        return matches[:limit]

    async def _extract(
        self, product_id: str, machine: ExtractionMachine
    ) -> ExtractionOutcome | None:
        try:
            async with self.bom.stream_forecast(product_id) as chunks:
                outcome = await self.controller.run(chunks, machine)
        except httpx.HTTPError as e:
            logger.warning("Forecast feed %s unavailable: %s", product_id, e)
            return None
        except Exception:
            logger.exception("Failed to extract from forecast feed %s", product_id)
            return None

        for err in outcome.errors:
            logger.debug("Feed %s: %s", product_id, err)
        return outcome


def _resolve_state(state: StateCode | str | None, area_code: AreaCode) -> StateCode | None:
    if state is None:
        return state_from_area_code(area_code)
    try:
        return StateCode(str(state).upper())
    except ValueError:
        return None
