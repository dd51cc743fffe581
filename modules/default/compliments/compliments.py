"""Shows a random compliment for the current part of the day."""

import random
from datetime import datetime

from markupsafe import escape

from core.module import Module
from core.registry import register_module


@register_module("compliments")
class Compliments(Module):
    defaults = {
        "compliments": {
            "anytime": ["Hey there sexy!"],
            "morning": ["Good morning, handsome!", "Enjoy your day!", "How was your sleep?"],
            "afternoon": ["Hello, beauty!", "You look sexy!", "Looking good today!"],
            "evening": ["Wow, you look hot!", "You look nice!", "Hi, sexy!"],
        },
        "morning_start_time": 3,
        "morning_end_time": 12,
        "afternoon_start_time": 12,
        "afternoon_end_time": 17,
    }

    def part_of_day(self, hour):
        cfg = self.config
        if cfg["morning_start_time"] <= hour < cfg["morning_end_time"]:
            return "morning"
        if cfg["afternoon_start_time"] <= hour < cfg["afternoon_end_time"]:
            return "afternoon"
        return "evening"

    def compliment_pool(self, now=None):
        now = now or datetime.now()
        compliments = self.config.get("compliments", {})
        pool = list(compliments.get(self.part_of_day(now.hour), []))
        pool.extend(compliments.get("anytime", []))
        return pool

    def get_dom(self):
        pool = self.compliment_pool()
        if not pool:
            return ""
        return f'<div class="compliment">{escape(random.choice(pool))}</div>'
