"""Tests for the forecast extraction state machines."""

import pytest

from bomfeed.ingest.forecast_machine import (
    AreaSearchMachine,
    MachineState,
    TargetedForecastMachine,
)
from bomfeed.ingest.tag_events import CloseTag, OpenTag, TagEventSource, TextContent
from bomfeed.models.forecast import NO_FORECAST_TEXT, NO_RAIN_CHANCE


def _events(xml: bytes) -> list:
    source = TagEventSource()
    events = list(source.feed(xml))
    events.extend(source.finish())
    return events


def _run(machine, events):
    for event in events:
        machine.handle(event)
    return machine


def _labeled(label: str, text: str) -> list:
    return [OpenTag("text", {"type": label}), TextContent(text), CloseTag("text")]


class TestTargetedForecastMachine:
    def test_seven_periods_in_document_order(self, vic_feed: bytes):
        machine = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed))
        result = machine.result()

        assert machine.done
        assert result is not None
        assert result.location == "Melbourne"
        assert result.area_code == "VIC_PT042"
        assert len(result.periods) == 7
        assert [p.start_time[:10] for p in result.periods] == [
            "2024-01-15", "2024-01-16", "2024-01-17", "2024-01-18",
            "2024-01-19", "2024-01-20", "2024-01-21",
        ]

    def test_period_fields(self, vic_feed: bytes):
        result = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed)).result()
        first, second = result.periods[0], result.periods[1]

        assert first.forecast == "Partly cloudy."
        assert first.icon == "partly-cloudy"
        assert first.min_temp is None
        assert first.max_temp == 28
        assert first.rain_chance == "10%"
        assert first.end_time == "2024-01-16T00:00:00+11:00"

        assert second.icon == "showers"
        assert second.min_temp == 16
        assert second.max_temp == 24
        assert second.rain_chance == "80%"

    def test_forecast_label_before_precis_wins(self, vic_feed: bytes):
        result = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed)).result()
        assert result.periods[1].forecast.startswith("Cloudy. High chance of showers")

    def test_missing_fields_get_placeholders(self, vic_feed: bytes):
        result = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed)).result()
        last = result.periods[6]
        assert last.forecast == NO_FORECAST_TEXT
        assert last.rain_chance == NO_RAIN_CHANCE
        assert last.icon == "unknown"

    def test_unknown_area_code_is_absent(self, vic_feed: bytes):
        machine = _run(TargetedForecastMachine("VIC_PT999"), _events(vic_feed))
        assert machine.result() is None
        assert not machine.done
        assert machine.state is MachineState.IDLE

    def test_district_areas_are_not_eligible(self, vic_feed: bytes):
        machine = _run(TargetedForecastMachine("VIC_ME001"), _events(vic_feed))
        assert machine.result() is None

    def test_events_after_done_are_ignored(self, vic_feed: bytes):
        machine = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed))
        before = machine.result()
        state = machine.handle(OpenTag("area", {"aac": "VIC_PT042", "type": "location"}))
        assert state is MachineState.DONE
        assert machine.result() is before

    def test_replay_is_structurally_identical(self, vic_feed: bytes):
        a = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed)).result()
        b = _run(TargetedForecastMachine("VIC_PT042"), _events(vic_feed)).result()
        assert a == b
        assert a.to_dict() == b.to_dict()

    def test_state_transitions(self):
        machine = TargetedForecastMachine("X_PT001")
        assert machine.handle(OpenTag("area", {"aac": "X_PT001", "type": "location", "description": "X"})) is MachineState.IN_AREA
        assert machine.handle(OpenTag("forecast-period", {"start-time-local": "s"})) is MachineState.IN_PERIOD
        assert machine.handle(OpenTag("element", {"type": "air_temperature_minimum"})) is MachineState.IN_LABEL
        assert machine.handle(TextContent(" 7 ")) is MachineState.IN_LABEL
        assert machine.handle(CloseTag("element")) is MachineState.IN_PERIOD
        assert machine.handle(CloseTag("forecast-period")) is MachineState.IN_AREA
        assert machine.handle(CloseTag("area")) is MachineState.DONE
        assert machine.result().periods[0].min_temp == 7

    def test_repeated_summary_label_first_write_wins(self):
        events = [
            OpenTag("area", {"aac": "A", "type": "location", "description": "A"}),
            OpenTag("forecast-period", {}),
            *_labeled("precis", "   "),
            *_labeled("precis", "First."),
            *_labeled("precis", "Second."),
            *_labeled("probability_of_precipitation", "10%"),
            *_labeled("probability_of_precipitation", "20%"),
            CloseTag("forecast-period"),
            CloseTag("area"),
        ]
        period = _run(TargetedForecastMachine("A"), events).result().periods[0]
        assert period.forecast == "First."
        assert period.rain_chance == "20%"

    def test_non_numeric_temperature_recorded(self):
        events = [
            OpenTag("area", {"aac": "A", "type": "location", "description": "A"}),
            OpenTag("forecast-period", {}),
            OpenTag("element", {"type": "air_temperature_maximum"}),
            TextContent("hot"),
            CloseTag("element"),
            OpenTag("element", {"type": "forecast_icon_code"}),
            TextContent("x"),
            CloseTag("element"),
            CloseTag("forecast-period"),
            CloseTag("area"),
        ]
        machine = _run(TargetedForecastMachine("A"), events)
        period = machine.result().periods[0]
        assert period.max_temp is None
        assert period.icon == "unknown"
        assert len(machine.diagnostics) == 2

    def test_text_outside_label_ignored(self):
        events = [
            OpenTag("area", {"aac": "A", "type": "location", "description": "A"}),
            OpenTag("forecast-period", {}),
            TextContent("stray"),
            CloseTag("forecast-period"),
            CloseTag("area"),
        ]
        period = _run(TargetedForecastMachine("A"), events).result().periods[0]
        assert period.forecast == NO_FORECAST_TEXT

    def test_area_without_periods(self):
        events = [
            OpenTag("area", {"aac": "A", "type": "metropolitan", "description": "A"}),
            CloseTag("area"),
        ]
        result = _run(TargetedForecastMachine("A"), events).result()
        assert result is not None
        assert result.periods == ()


class TestAreaSearchMachine:
    def test_matches_case_insensitive_substring(self, vic_feed: bytes):
        machine = _run(AreaSearchMachine("MELB", 10), _events(vic_feed))
        names = [m.location for m in machine.result()]
        assert names == ["Melbourne", "Melbourne Airport"]
        assert not machine.done

    def test_only_first_period_is_summarised(self, vic_feed: bytes):
        matches = _run(AreaSearchMachine("castle", 10), _events(vic_feed)).result()
        assert len(matches) == 1
        m = matches[0]
        assert m.area_code == "VIC_PT043"
        assert m.forecast == "Clear."
        assert m.icon == "clear"
        assert m.min_temp is None
        assert m.max_temp == 30
        assert m.rain_chance == "0%"

    def test_cap_marks_done(self, vic_feed: bytes):
        machine = _run(AreaSearchMachine("mel", 1), _events(vic_feed))
        assert machine.done
        assert [m.location for m in machine.result()] == ["Melbourne"]

    def test_region_and_district_never_match(self, vic_feed: bytes):
        assert _run(AreaSearchMachine("victoria", 5), _events(vic_feed)).result() == []
        assert _run(AreaSearchMachine("mallee", 5), _events(vic_feed)).result() == []

    def test_no_match_is_empty(self, vic_feed: bytes):
        assert _run(AreaSearchMachine("zzz", 5), _events(vic_feed)).result() == []

    def test_excluded_names_do_not_count(self, vic_feed: bytes):
        machine = _run(AreaSearchMachine("mel", 1, exclude={"Melbourne"}), _events(vic_feed))
        assert [m.location for m in machine.result()] == ["Melbourne Airport"]

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            AreaSearchMachine("mel", 0)
