"""CLI entry point for the bureau feed engine."""

import argparse
import asyncio
import logging

from pydantic import ValidationError

from bomfeed.config.loader import default_config, get_config_value, load_config
from bomfeed.config.schema import BomConfig
from bomfeed.ingest.bom_client import BomClient
from bomfeed.ingest.forecast_fetcher import ForecastFetcher
from bomfeed.ingest.observation_fetcher import ObservationFetcher
from bomfeed.lookup import ConfigAreaLookup
from bomfeed.pipeline.area_report import AreaReportPipeline
from bomfeed.reporting.formatters import (
    format_forecast_text,
    format_json,
    format_observation_text,
    format_report_text,
    format_search_text,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bomfeed",
        description="Bureau of Meteorology forecast and observation feeds",
    )
    parser.add_argument("--config", default=None, help="Config YAML path")

    sub = parser.add_subparsers(dest="command")

    forecast_p = sub.add_parser("forecast", help="Multi-day forecast for an area code")
    forecast_p.add_argument("area_code", help="e.g. VIC_PT042")
    forecast_p.add_argument("--state", help="State feed to read (default: from area code)")
    forecast_p.add_argument("--json", action="store_true", help="Emit JSON")

    search_p = sub.add_parser("search", help="Search forecast areas by name")
    search_p.add_argument("query")
    search_p.add_argument("--limit", type=int, default=None, help="Maximum matches")
    search_p.add_argument("--json", action="store_true", help="Emit JSON")

    observe_p = sub.add_parser("observe", help="Merged current conditions for an area")
    observe_p.add_argument("area_code")
    observe_p.add_argument("--json", action="store_true", help="Emit JSON")

    report_p = sub.add_parser("report", help="Forecast and current conditions")
    report_p.add_argument("area_code")
    report_p.add_argument("--json", action="store_true", help="Emit JSON")

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key, e.g. feeds.chunk_size")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config) if args.config else default_config()
    except (OSError, ValidationError) as e:
        print(f"Error: invalid config: {e}")
        return 1

    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    if args.command == "config":
        return _cmd_config(config, args)
    return asyncio.run(_dispatch(config, args))


async def _dispatch(config: BomConfig, args) -> int:
    feeds = config.feeds
    async with BomClient(
        base_url=feeds.base_url,
        user_agent=feeds.user_agent,
        timeout=feeds.timeout_seconds,
        chunk_size=feeds.chunk_size,
    ) as bom:
        if args.command == "forecast":
            return await _cmd_forecast(config, bom, args)
        elif args.command == "search":
            return await _cmd_search(config, bom, args)
        elif args.command == "observe":
            return await _cmd_observe(config, bom, args)
        elif args.command == "report":
            return await _cmd_report(config, bom, args)
    return 1


async def _cmd_forecast(config: BomConfig, bom: BomClient, args) -> int:
    state = args.state
    if state is None:
        area = ConfigAreaLookup(config).get_area(args.area_code)
        state = area.state if area else None
    result = await ForecastFetcher(bom, config.feeds).fetch_by_area_code(
        args.area_code, state
    )
    if result is None:
        print(f"No forecast found for {args.area_code}")
        return 1
    print(format_json(result) if args.json else format_forecast_text(result))
    return 0


async def _cmd_search(config: BomConfig, bom: BomClient, args) -> int:
    limit = args.limit or config.search.default_limit
    if limit < 1:
        print("Error: --limit must be at least 1")
        return 1
    matches = await ForecastFetcher(bom, config.feeds).search(args.query, limit)
    print(format_json(matches) if args.json else format_search_text(matches))
    return 0 if matches else 1


async def _cmd_observe(config: BomConfig, bom: BomClient, args) -> int:
    lookup = ConfigAreaLookup(config)
    area = lookup.get_area(args.area_code)
    if area is None:
        print(f"Unknown area {args.area_code}")
        return 1
    merged = await ObservationFetcher(bom, config.feeds).fetch_merged(
        area.state, lookup.stations_for(area.area_code)
    )
    if merged is None:
        print(f"No observations available for {area.name}")
        return 1
    print(format_json(merged) if args.json else format_observation_text(merged))
    return 0


async def _cmd_report(config: BomConfig, bom: BomClient, args) -> int:
    report = await AreaReportPipeline(config, bom).run(args.area_code)
    if report is None:
        print(f"Unknown area {args.area_code}")
        return 1
    print(format_json(report) if args.json else format_report_text(report))
    return 0


def _cmd_config(config: BomConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        print(value.model_dump_json(indent=2) if hasattr(value, "model_dump_json") else value)
        return 0
    else:
        print("Use: config show | config get key")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
