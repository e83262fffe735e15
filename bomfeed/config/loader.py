"""YAML config loader with default injection and dotted-key access."""

from pathlib import Path
from typing import Any

import yaml

from bomfeed.config.defaults import DEFAULT_AREAS, default_feed_config
from bomfeed.config.schema import BomConfig


def load_config(path: str | Path) -> BomConfig:
    """Load and validate config from a YAML file.

    Feed maps and search order missing from the YAML are filled from the
    built-in defaults; if no areas are specified, injects DEFAULT_AREAS.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    defaults = default_feed_config().model_dump(mode="json")
    feeds = raw.setdefault("feeds", {}) or {}
    raw["feeds"] = feeds
    for key in ("forecast_feeds", "observation_feeds", "search_order"):
        if not feeds.get(key):
            feeds[key] = defaults[key]

    if "areas" not in raw or not raw["areas"]:
        raw["areas"] = [a.model_dump(mode="json") for a in DEFAULT_AREAS]

    return BomConfig(**raw)


def default_config() -> BomConfig:
    """The configuration used when no YAML file is given."""
    return BomConfig(feeds=default_feed_config(), areas=DEFAULT_AREAS)


def get_config_value(config: BomConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'feeds.chunk_size'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif isinstance(obj, dict):
            matches = [v for k, v in obj.items() if str(k) == part]
            if not matches:
                raise KeyError(f"Config key not found: {dotted_key}")
            obj = matches[0]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
