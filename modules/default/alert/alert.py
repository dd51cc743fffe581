"""Shows alerts sent by other modules via SHOW_ALERT / HIDE_ALERT."""

import logging

from markupsafe import escape

from core.module import Module
from core.registry import register_module

logger = logging.getLogger(__name__)


@register_module("alert")
class Alert(Module):
    defaults = {
        "display_time": 3500,  # ms
        "position": "center",
    }

    def __init__(self):
        super().__init__()
        self.current = None

    def get_styles(self):
        return ["alert.css"]

    def get_translations(self):
        return {"en": "translations/en.json", "de": "translations/de.json"}

    def notification_received(self, notification, payload, sender):
        if notification == "SHOW_ALERT":
            payload = payload if isinstance(payload, dict) else {"message": str(payload)}
            self.current = {
                "title": payload.get("title", self.translate("ALERT")),
                "message": payload.get("message", ""),
                "sender": sender,
            }
            logger.info("Alert from %s: %s", sender, self.current["title"])
        elif notification == "HIDE_ALERT":
            self.current = None

    def get_dom(self):
        if not self.current:
            return ""
        return (
            f'<div class="alert-title">{escape(self.current["title"])}</div>'
            f'<div class="alert-message">{escape(self.current["message"])}</div>'
        )
