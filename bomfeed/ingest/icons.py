"""Bureau forecast icon codes.

Source: https://reg.bom.gov.au/info/forecast_icons.shtml
"""

UNKNOWN_ICON = "unknown"

ICON_CATEGORIES: dict[int, str] = {
    1: "sunny",
    2: "clear",
    3: "partly-cloudy",
    4: "cloudy",
    6: "hazy",
    8: "light-rain",
    9: "windy",
    10: "fog",
    11: "showers",
    12: "rain",
    13: "dusty",
    14: "frost",
    15: "snow",
    16: "storm",
    17: "light-showers",
    18: "heavy-showers",
    19: "cyclone",
}


def icon_category(code: int | None) -> str:
    """Map a numeric icon code to its category name, 'unknown' if unmapped."""
    if code is None:
        return UNKNOWN_ICON
    return ICON_CATEGORIES.get(code, UNKNOWN_ICON)
