"""
get_weather - example tool returning canned weather data.

Useful for demos and end-to-end tests of the tool loop without network
access. Values are random; pass ``rng`` or ``seed`` for reproducible output.
"""

import random
from typing import Any, Optional

from clever_agent.models.domain import ToolResult
from clever_agent.tools.base import Tool

TEMPERATURE_RANGES = {
    "celsius": (15, 30),
    "fahrenheit": (59, 86),
}
CONDITIONS = ("sunny", "cloudy", "rainy", "partly cloudy")


class GetWeatherTool(Tool):
    """Return mock current weather for a location."""

    name = "get_weather"
    description = "Get the current weather for a specific location"

    def __init__(
        self, rng: Optional[random.Random] = None, seed: Optional[int] = None
    ) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "The city and state, e.g. San Francisco, CA",
                },
                "unit": {
                    "type": "string",
                    "enum": list(TEMPERATURE_RANGES),
                    "description": "The unit of temperature",
                },
            },
            "required": ["location"],
        }

    def execute(self, arguments: dict[str, Any]) -> ToolResult:
        location = arguments.get("location", "Unknown")
        unit = arguments.get("unit", "celsius")
        if unit not in TEMPERATURE_RANGES:
            return ToolResult.failure(f"Unsupported unit: {unit}")

        low, high = TEMPERATURE_RANGES[unit]
        return ToolResult.ok(
            {
                "location": location,
                "temperature": self._rng.randint(low, high),
                "unit": unit,
                "condition": self._rng.choice(CONDITIONS),
                "humidity": f"{self._rng.randint(30, 80)}%",
                "wind_speed": f"{self._rng.randint(5, 25)} km/h",
            }
        )
