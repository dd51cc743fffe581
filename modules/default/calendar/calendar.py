"""Calendar module. Lists the configured calendars; feed parsing is left to
user modules."""

from markupsafe import escape

from core.module import Module
from core.registry import register_module


@register_module("calendar")
class Calendar(Module):
    defaults = {
        "maximum_entries": 10,
        "maximum_number_of_days": 365,
        "fetch_interval": 300,  # seconds
        "calendars": [],
    }

    def get_styles(self):
        return ["calendar.css"]

    def get_translations(self):
        return {"en": "translations/en.json", "de": "translations/de.json"}

    def get_dom(self):
        calendars = self.config.get("calendars") or []
        if not calendars:
            return f'<div class="dimmed">{escape(self.translate("EMPTY"))}</div>'
        rows = "".join(
            f'<li>{escape(c if isinstance(c, str) else c.get("name") or c.get("url", ""))}</li>'
            for c in calendars
        )
        return f'<ul class="calendars">{rows}</ul>'
