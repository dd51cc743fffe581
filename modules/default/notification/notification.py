"""Headless module that keeps a log of recent notifications."""

from collections import deque

from core.module import Module
from core.registry import register_module


@register_module("notification")
class Notification(Module):
    defaults = {
        "history_len": 50,
    }

    def __init__(self):
        super().__init__()
        self.history = deque(maxlen=self.defaults["history_len"])

    async def start(self):
        self.history = deque(self.history, maxlen=self.config.get("history_len", 50))
        await super().start()

    def notification_received(self, notification, payload, sender):
        self.history.append((notification, sender))
