"""Weather module backed by the Open-Meteo API.

The node helper polls current conditions (or a daily forecast) and the
module renders the latest payload.

Config example (in mirror.yaml):
    - module: "weather"
      position: "top_right"
      config:
        type: "current"       # or "forecast"
        latitude: 34.4275
        longitude: -119.859
        update_interval: 600
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib import request, error

from markupsafe import escape

from core.module import Module
from core.node_helper import NodeHelper
from core.registry import register_module

logger = logging.getLogger(__name__)

API_URL = "https://api.open-meteo.com/v1/forecast"


class WeatherHelper(NodeHelper):
    """Fetches current weather or a daily forecast from Open-Meteo."""

    notification = "WEATHER_DATA"

    def __init__(self, module, bus, config: Dict):
        super().__init__(module, bus, config)
        self.latitude = config.get("latitude")
        self.longitude = config.get("longitude")
        self._timeout = config.get("timeout", 15)

    def build_url(self) -> str:
        url = f"{API_URL}?latitude={self.latitude}&longitude={self.longitude}&timezone=auto"
        if self.config.get("type") == "forecast":
            days = self.config.get("max_number_of_days", 5)
            return (
                f"{url}&daily=weather_code,temperature_2m_max,temperature_2m_min,"
                f"precipitation_sum&forecast_days={days}"
            )
        return (
            f"{url}&current=temperature_2m,relative_humidity_2m,apparent_temperature,"
            f"weather_code,wind_speed_10m,wind_direction_10m,is_day"
        )

    def fetch(self) -> Optional[Dict[str, Any]]:
        if self.latitude is None or self.longitude is None:
            logger.warning("Weather %s: no latitude/longitude configured", self.helper_id)
            return None

        try:
            req = request.Request(self.build_url(), method="GET")
            with request.urlopen(req, timeout=self._timeout) as resp:
                raw = json.loads(resp.read())
        except error.URLError as exc:
            logger.warning("Weather %s: %s", self.helper_id, exc)
            return None
        except ValueError as exc:
            logger.warning("Weather %s: bad response: %s", self.helper_id, exc)
            return None

        return parse_weather(raw, self.config.get("type", "current"))


def parse_weather(raw: Dict[str, Any], kind: str) -> Optional[Dict[str, Any]]:
    if kind == "forecast":
        daily = raw.get("daily", {})
        days = []
        for i, day in enumerate(daily.get("time", [])):
            days.append({
                "date": day,
                "weather_code": _nth(daily.get("weather_code"), i),
                "max_temp": _nth(daily.get("temperature_2m_max"), i),
                "min_temp": _nth(daily.get("temperature_2m_min"), i),
                "precipitation": _nth(daily.get("precipitation_sum"), i),
            })
        return {"type": "forecast", "days": days}

    current = raw.get("current")
    if not current:
        return None
    return {
        "type": "current",
        "temperature": current.get("temperature_2m"),
        "feels_like": current.get("apparent_temperature"),
        "humidity": current.get("relative_humidity_2m"),
        "weather_code": current.get("weather_code"),
        "wind_speed": current.get("wind_speed_10m"),
        "wind_direction": current.get("wind_direction_10m"),
        "is_day": current.get("is_day", 1),
    }


def _nth(values, i):
    return values[i] if values and i < len(values) else None


@register_module("weather")
class Weather(Module):
    defaults = {
        "type": "current",
        "latitude": None,
        "longitude": None,
        "units": {"temperature": "celsius", "wind": "kmh"},
        "update_interval": 600,  # seconds
        "max_number_of_days": 5,
        "show_humidity": True,
        "show_feels_like": True,
    }
    helper_class = WeatherHelper

    def __init__(self):
        super().__init__()
        self.weather = None

    def get_styles(self):
        return ["weather.css"]

    def get_translations(self):
        return {"en": "translations/en.json", "de": "translations/de.json"}

    def socket_notification_received(self, notification, payload):
        if notification == WeatherHelper.notification:
            self.weather = payload
            self.send_notification("WEATHER_UPDATED", payload)

    def get_dom(self):
        if not self.weather:
            return f'<div class="dimmed">{escape(self.translate("LOADING"))}</div>'
        if self.weather["type"] == "forecast":
            rows = "".join(
                f'<tr><td>{escape(d["date"])}</td>'
                f'<td>{escape(d["max_temp"])}&deg;</td>'
                f'<td>{escape(d["min_temp"])}&deg;</td></tr>'
                for d in self.weather["days"]
            )
            return f'<table class="forecast">{rows}</table>'

        html = f'<div class="temperature">{escape(self.weather["temperature"])}&deg;</div>'
        if self.config.get("show_feels_like"):
            label = self.translate("FEELS", {"DEGREE": self.weather["feels_like"]})
            html += f'<div class="feels-like">{escape(label)}</div>'
        if self.config.get("show_humidity"):
            html += f'<div class="humidity">{escape(self.weather["humidity"])}%</div>'
        return html
