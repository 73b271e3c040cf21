"""Unit conversions and number formatting shared by providers and synthesis."""

import math


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def celsius_to_fahrenheit(celsius: float) -> float:
    return round1(celsius * 9 / 5 + 32)


def kmh_to_mph(kmh: float) -> float:
    return round1(kmh * 0.621371)


def meters_to_feet(meters: float) -> float:
    return round1(meters * 3.28084)


def format_number(value: float | int) -> str:
    """Render a number without a trailing ".0" (78.8 -> "78.8", 80.0 -> "80")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def compass_16(degrees: float) -> str:
    """Nearest of the 16 compass points (22.5 degree sectors)."""
    points = [
        "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
        "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
    ]  # fmt: skip
    return points[math.floor(degrees / 22.5 + 0.5) % 16]


def compass_8(degrees: float) -> str:
    """Nearest of the 8 compass points (45 degree sectors)."""
    points = ["N", "NE", "E", "SE", "S", "SW", "W", "NW"]
    return points[math.floor(degrees / 45 + 0.5) % 8]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)
