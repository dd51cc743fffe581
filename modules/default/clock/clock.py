"""Clock module. Rendered server-side on each page load."""

from datetime import datetime

from markupsafe import escape

from core.module import Module
from core.registry import register_module


@register_module("clock")
class Clock(Module):
    defaults = {
        "time_format": 24,
        "show_period": True,
        "show_date": True,
        "show_week": False,
        "date_format": "%A, %B %d %Y",
    }

    def get_styles(self):
        return ["clock_styles.css"]

    def get_dom(self, now=None):
        now = now or datetime.now()
        if self.config.get("time_format") == 12:
            fmt = "%I:%M %p" if self.config.get("show_period") else "%I:%M"
        else:
            fmt = "%H:%M"

        html = f'<div class="time">{escape(now.strftime(fmt))}</div>'
        if self.config.get("show_date"):
            date = now.strftime(self.config.get("date_format", "%A, %B %d %Y"))
            html += f'<div class="date">{escape(date)}</div>'
        if self.config.get("show_week"):
            week = self.translate("WEEK", {"weekNumber": now.isocalendar()[1]})
            html += f'<div class="week">{escape(week)}</div>'
        return html
