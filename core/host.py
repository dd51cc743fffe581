"""Host shell the orchestrator talks to.

The shell owns the things the loader only consumes: environment
variables, the set of screen regions, module construction and the
"all modules started" signal.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from core.notification_bus import NotificationBus
from core.registry import create_module_instance

logger = logging.getLogger(__name__)


class HostShell(ABC):
    """Interface between the orchestrator and the hosting application."""

    @abstractmethod
    async def fetch_environment_variables(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def get_available_positions(self) -> Sequence[str]:
        ...

    @abstractmethod
    def create_module_instance(self, name: str):
        ...

    @abstractmethod
    def notify_modules_started(self, modules: List) -> None:
        ...


class MirrorShell(HostShell):
    """Shell backed by the app config, the module registry and the bus."""

    def __init__(self, config: Dict[str, Any], bus: NotificationBus, positions: Sequence[str]):
        self.config = config
        self.bus = bus
        self.positions = list(positions)
        self.modules: List = []
        self.started = False

    async def fetch_environment_variables(self) -> Dict[str, Any]:
        return get_env_vars(self.config)

    def get_available_positions(self) -> Sequence[str]:
        return list(self.positions)

    def create_module_instance(self, name: str):
        return create_module_instance(name)

    def notify_modules_started(self, modules: List) -> None:
        self.modules = list(modules)
        if not self.started:
            self.bus.subscribe("*", self._dispatch)
        self.started = True
        logger.info("All modules started: %d", len(self.modules))
        self.bus.publish("ALL_MODULES_STARTED", [m.identifier for m in self.modules])

    def get_module(self, identifier: str) -> Optional[Any]:
        for module in self.modules:
            if module.identifier == identifier:
                return module
        return None

    def _dispatch(self, notification: str, payload: Any, sender: Optional[str]):
        """Deliver bus notifications to every module except the sender."""
        for module in self.modules:
            if module.identifier == sender:
                continue
            try:
                module.notification_received(notification, payload, sender)
            except Exception as exc:
                logger.error("Module %s notification error [%s]: %s",
                             module.name, notification, exc)


def get_env_vars(config: Dict[str, Any]) -> Dict[str, Any]:
    """Environment variables exposed to the loader and to /env."""
    return {
        "modules_dir": config.get("modules_dir", "modules"),
        "custom_css": config.get("custom_css", "css/custom.css"),
        "shadow_default_modules": config.get("shadow_default_modules", False),
    }
