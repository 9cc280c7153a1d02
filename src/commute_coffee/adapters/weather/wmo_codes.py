"""WMO weather interpretation codes as reported by Open-Meteo."""

# code -> (label, icon key)
WMO_CONDITIONS: dict[int, tuple[str, str]] = {
    0: ("Clear", "clear"),
    1: ("Mostly Clear", "partly-cloudy"),
    2: ("Partly Cloudy", "partly-cloudy"),
    3: ("Overcast", "cloudy"),
    45: ("Fog", "fog"),
    48: ("Fog", "fog"),
    51: ("Light Drizzle", "drizzle"),
    53: ("Drizzle", "drizzle"),
    55: ("Heavy Drizzle", "drizzle"),
    56: ("Freezing Drizzle", "drizzle"),
    57: ("Freezing Drizzle", "drizzle"),
    61: ("Light Rain", "rain"),
    63: ("Rain", "rain"),
    65: ("Heavy Rain", "rain"),
    66: ("Freezing Rain", "rain"),
    67: ("Freezing Rain", "rain"),
    71: ("Light Snow", "snow"),
    73: ("Snow", "snow"),
    75: ("Heavy Snow", "snow"),
    77: ("Snow Grains", "snow"),
    80: ("Light Showers", "showers"),
    81: ("Showers", "showers"),
    82: ("Heavy Showers", "showers"),
    85: ("Snow Showers", "snow"),
    86: ("Snow Showers", "snow"),
    95: ("Thunderstorm", "storm"),
    96: ("Thunderstorm", "storm"),
    99: ("Thunderstorm", "storm"),
}

UNKNOWN_CONDITION = ("Unknown", "unknown")


def describe_weather_code(code: int | None) -> tuple[str, str]:
    """Map a WMO code to a display label and icon key."""
    if code is None:
        return UNKNOWN_CONDITION
    return WMO_CONDITIONS.get(int(code), UNKNOWN_CONDITION)
