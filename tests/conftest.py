"""Pytest configuration ensuring project root is importable.

Also snapshots the module registry so classes registered by one test
never leak into another.
"""
import asyncio
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.host import HostShell  # noqa: E402
from core.module import Module  # noqa: E402
from core.notification_bus import NotificationBus  # noqa: E402
from core.registry import MODULE_REGISTRY  # noqa: E402

POSITIONS = ["top_left", "top_right"]


@pytest.fixture(autouse=True)
def _isolate_registry():
    saved = dict(MODULE_REGISTRY)
    try:
        yield
    finally:
        MODULE_REGISTRY.clear()
        MODULE_REGISTRY.update(saved)


class FakeShell(HostShell):
    """Host shell with explicit factories and call recording."""

    def __init__(
        self,
        factories: Dict[str, Callable[[], Module]],
        env_vars: Optional[Dict] = None,
        positions: Optional[List[str]] = None,
        events: Optional[List] = None,
    ):
        self.factories = factories
        self.env_vars = env_vars if env_vars is not None else {"modules_dir": "modules"}
        self.positions = positions if positions is not None else list(POSITIONS)
        self.events = events if events is not None else []
        self.started_calls: List[List[Module]] = []

    async def fetch_environment_variables(self):
        return dict(self.env_vars)

    def get_available_positions(self):
        return list(self.positions)

    def create_module_instance(self, name):
        factory = self.factories.get(name)
        return factory() if factory else None

    def notify_modules_started(self, modules):
        self.events.append(("notify", len(modules)))
        self.started_calls.append(list(modules))


def recording_module(events: List, base=Module, **attrs):
    """Build a Module subclass that records its lifecycle into events."""
    module_defaults = attrs.pop("defaults", {"greeting": "hello", "nested": {"a": 1, "b": 2}})

    class Recorder(base):
        defaults = module_defaults

        async def load_scripts(self):
            events.append(("scripts", self.identifier))
            await asyncio.sleep(0)

        async def load_styles(self):
            events.append(("styles", self.identifier))
            await super().load_styles()

        async def load_translations(self):
            events.append(("translations", self.identifier))
            await asyncio.sleep(0)
            await super().load_translations()

        async def start(self):
            await asyncio.sleep(0)
            events.append(("start", self.identifier))

        def hide(self):
            events.append(("hide", self.identifier))
            super().hide()

    for key, value in attrs.items():
        setattr(Recorder, key, value)
    return Recorder


@pytest.fixture
def bus():
    return NotificationBus()
