"""Output formatters for forecasts, searches and observations."""

import json

from bomfeed.models.forecast import ForecastResult, SearchMatch
from bomfeed.models.observation import MergedObservation
from bomfeed.models.reporting import AreaReport

FIELD_LABELS = {
    "temp_c": ("Temperature", "°C"),
    "feels_like_c": ("Feels like", "°C"),
    "humidity": ("Humidity", "%"),
    "wind_speed_kmh": ("Wind", " km/h"),
    "gust_speed_kmh": ("Gusts", " km/h"),
    "rain_24hr_mm": ("Rain (24h)", " mm"),
}


def _temp_range(min_temp: int | None, max_temp: int | None) -> str:
    lo = f"{min_temp}" if min_temp is not None else "-"
    hi = f"{max_temp}" if max_temp is not None else "-"
    return f"{lo}..{hi}°C"


def format_forecast_text(f: ForecastResult) -> str:
    lines = [f"=== {f.location} ({f.area_code}) ==="]
    for p in f.periods:
        day = (p.start_time or "")[:10]
        lines.append(
            f"{day}  {p.icon:<14} {_temp_range(p.min_temp, p.max_temp):<12} "
            f"rain {p.rain_chance:<5} {p.forecast}"
        )
    return "\n".join(lines)


def format_search_text(matches: list[SearchMatch]) -> str:
    if not matches:
        return "No matching areas"
    return "\n".join(
        f"{m.location} ({m.area_code}): {m.forecast} "
        f"{_temp_range(m.min_temp, m.max_temp)}, rain {m.rain_chance}"
        for m in matches
    )


def format_observation_text(o: MergedObservation) -> str:
    lines = [f"=== Observed {o.observation_time or 'unknown time'} ==="]
    for field_name, value in o.values.items():
        label, unit = FIELD_LABELS.get(field_name, (field_name, ""))
        src = o.sources.get(field_name)
        where = f" [{src.station}, {src.distance_km:.1f} km]" if src else ""
        if field_name == "wind_speed_kmh" and o.wind_dir:
            lines.append(f"{label}: {o.wind_dir} {value}{unit}{where}")
        else:
            lines.append(f"{label}: {value}{unit}{where}")
    return "\n".join(lines)


def format_report_text(r: AreaReport) -> str:
    parts = [f"##### {r.area.name}, {r.area.state} #####"]
    parts.append(format_forecast_text(r.forecast) if r.forecast else "Forecast unavailable")
    parts.append(
        format_observation_text(r.observation) if r.observation else "Observations unavailable"
    )
    return "\n\n".join(parts)


def format_json(obj) -> str:
    """JSON for anything with ``to_dict`` (or a list of such)."""
    if isinstance(obj, list):
        data = [item.to_dict() for item in obj]
    else:
        data = obj.to_dict()
    return json.dumps(data, indent=2, ensure_ascii=False)
