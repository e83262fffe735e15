"""Forecast extraction state machines.

Both machines consume tag events one at a time through ``handle`` and keep
all of their accumulators on the instance, so they can be driven by the
stream controller or directly from a list of events in tests.

Targeted mode collects every forecast period for one exact area code and
finishes when that area closes. Search mode looks at the first period of
every eligible area, keeps the ones whose name contains the query, and
finishes once ``limit`` matches are collected.
"""

import logging
import re
from dataclasses import dataclass
from enum import StrEnum

from bomfeed.ingest.icons import icon_category
from bomfeed.ingest.tag_events import CloseTag, OpenTag, TagEvent, TextContent
from bomfeed.models.common import AreaCode
from bomfeed.models.forecast import (
    NO_FORECAST_TEXT,
    NO_RAIN_CHANCE,
    ForecastPeriod,
    ForecastResult,
    SearchMatch,
)

logger = logging.getLogger(__name__)

ELIGIBLE_AREA_TYPES = frozenset({"location", "metropolitan"})
LABELED_TAGS = frozenset({"text", "element"})
SUMMARY_LABELS = frozenset({"precis", "forecast"})

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class MachineState(StrEnum):
    IDLE = "idle"
    IN_AREA = "in_area"
    IN_PERIOD = "in_period"
    IN_LABEL = "in_label"
    DONE = "done"


@dataclass
class PeriodAccumulator:
    """Label-keyed fields of the forecast period currently being read."""

    start_time: str | None = None
    end_time: str | None = None
    forecast: str | None = None
    icon_code: int | None = None
    min_temp: int | None = None
    max_temp: int | None = None
    rain_chance: str | None = None

    def assign(self, label: str, text: str, diagnostics: list[str]) -> None:
        # precis and forecast share the summary slot; the first one seen wins
        if label in SUMMARY_LABELS:
            if self.forecast is None:
                self.forecast = text
        elif label == "forecast_icon_code":
            self.icon_code = _parse_int(label, text, diagnostics)
        elif label == "air_temperature_minimum":
            self.min_temp = _parse_int(label, text, diagnostics)
        elif label == "air_temperature_maximum":
            self.max_temp = _parse_int(label, text, diagnostics)
        elif label == "probability_of_precipitation":
            self.rain_chance = text

    def finalize(self) -> ForecastPeriod:
        return ForecastPeriod(
            start_time=self.start_time,
            end_time=self.end_time,
            forecast=self.forecast or NO_FORECAST_TEXT,
            icon=icon_category(self.icon_code),
            min_temp=self.min_temp,
            max_temp=self.max_temp,
            rain_chance=self.rain_chance or NO_RAIN_CHANCE,
        )


class ForecastMachine:
    """Shared area/period/label transitions; subclasses decide what to keep."""

    def __init__(self) -> None:
        self.state = MachineState.IDLE
        self.diagnostics: list[str] = []
        self.area_code: AreaCode | None = None
        self.area_name: str | None = None
        self._period: PeriodAccumulator | None = None
        self._label: str | None = None

    @property
    def done(self) -> bool:
        return self.state is MachineState.DONE

    def handle(self, event: TagEvent) -> MachineState:
        """Apply one event and return the resulting state."""
        if self.done:
            return self.state
        if isinstance(event, OpenTag):
            self._on_open(event)
        elif isinstance(event, TextContent):
            self._on_text(event.content)
        elif isinstance(event, CloseTag):
            self._on_close(event.name)
        return self.state

    def _on_open(self, event: OpenTag) -> None:
        attrs = event.attributes
        if event.name == "area":
            if self.state is MachineState.IDLE and attrs.get("type") in ELIGIBLE_AREA_TYPES:
                if self._accept_area(attrs):
                    self.area_code = attrs.get("aac")
                    self.area_name = attrs.get("description")
                    self.state = MachineState.IN_AREA
        elif event.name == "forecast-period":
            if self.state is MachineState.IN_AREA and self._accept_period():
                self._period = PeriodAccumulator(
                    start_time=attrs.get("start-time-local"),
                    end_time=attrs.get("end-time-local"),
                )
                self.state = MachineState.IN_PERIOD
        elif event.name in LABELED_TAGS:
            if self.state is MachineState.IN_PERIOD:
                self._label = attrs.get("type")
                self.state = MachineState.IN_LABEL

    def _on_text(self, content: str) -> None:
        if self.state is not MachineState.IN_LABEL or self._label is None:
            return
        text = content.strip()
        if text and self._period is not None:
            self._period.assign(self._label, text, self.diagnostics)

    def _on_close(self, name: str) -> None:
        if name in LABELED_TAGS:
            if self.state is MachineState.IN_LABEL:
                self._label = None
                self.state = MachineState.IN_PERIOD
        elif name == "forecast-period":
            if self.state is MachineState.IN_PERIOD and self._period is not None:
                self._on_period_closed(self._period.finalize())
                self._period = None
                self.state = MachineState.IN_AREA
        elif name == "area":
            if self.state is MachineState.IN_AREA:
                self.state = MachineState.IDLE
                self._on_area_closed()

    def _accept_area(self, attrs: dict[str, str]) -> bool:
        raise NotImplementedError

    def _accept_period(self) -> bool:
        return True

    def _on_period_closed(self, period: ForecastPeriod) -> None:
        raise NotImplementedError

    def _on_area_closed(self) -> None:
        raise NotImplementedError


class TargetedForecastMachine(ForecastMachine):
    """Collects all periods for one area code, then reports done."""

    def __init__(self, area_code: AreaCode) -> None:
        super().__init__()
        self.target = area_code
        self._periods: list[ForecastPeriod] = []
        self._result: ForecastResult | None = None

    def result(self) -> ForecastResult | None:
        return self._result

    def _accept_area(self, attrs: dict[str, str]) -> bool:
        return attrs.get("aac") == self.target

    def _on_period_closed(self, period: ForecastPeriod) -> None:
        self._periods.append(period)

    def _on_area_closed(self) -> None:
        self._result = ForecastResult(
            location=self.area_name or self.target,
            area_code=self.target,
            periods=tuple(self._periods),
        )
        self.state = MachineState.DONE
        logger.debug(
            "Extracted %d periods for %s", len(self._periods), self.target
        )


class AreaSearchMachine(ForecastMachine):
    """Collects first-period summaries for areas whose name contains a query."""

    def __init__(
        self, query: str, limit: int, exclude: set[str] | frozenset[str] = frozenset()
    ) -> None:
        super().__init__()
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.query = query.strip().casefold()
        self.limit = limit
        # names already matched elsewhere (earlier feeds); they don't count
        self.exclude = set(exclude)
        self._matches: list[SearchMatch] = []
        self._first_period: ForecastPeriod | None = None
        self._seen_period = False

    def result(self) -> list[SearchMatch]:
        return list(self._matches)

    def _accept_area(self, attrs: dict[str, str]) -> bool:
        self._first_period = None
        self._seen_period = False
        return True

    def _accept_period(self) -> bool:
        if self._seen_period:
            return False
        self._seen_period = True
        return True

    def _on_period_closed(self, period: ForecastPeriod) -> None:
        self._first_period = period

    def _on_area_closed(self) -> None:
        name = self.area_name
        if not name or self.query not in name.casefold() or name in self.exclude:
            return
        self.exclude.add(name)
        period = self._first_period
        self._matches.append(
            SearchMatch(
                location=name,
                area_code=self.area_code or "",
                forecast=period.forecast if period else NO_FORECAST_TEXT,
                icon=period.icon if period else icon_category(None),
                min_temp=period.min_temp if period else None,
                max_temp=period.max_temp if period else None,
                rain_chance=period.rain_chance if period else NO_RAIN_CHANCE,
            )
        )
        if len(self._matches) >= self.limit:
            self.state = MachineState.DONE


def _parse_int(label: str, text: str, diagnostics: list[str]) -> int | None:
    """Parse a leading integer, recording a diagnostic when there is none."""
    m = _LEADING_INT.match(text)
    if m is None:
        diagnostics.append(f"non-numeric {label}: {text!r}")
        return None
    return int(m.group(1))
