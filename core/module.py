"""Base class for mirror modules.

A Module is one pluggable unit of the dashboard (clock, weather, ...).
The bootstrapper hands it its descriptor and config, then awaits its
script, style and translation loading. The orchestrator starts it once
every module is bootstrapped.

Modules are cheap to start (spawn a backend thread) and expensive to
bootstrap (load resources). Subclasses usually only override defaults,
get_styles(), get_translations() and the notification handlers.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.file_loader import FileLoader
from core.merge import merge_config
from core.models import MergeStrategy, ModuleDescriptor, ModuleState
from core.notification_bus import NotificationBus
from core.translator import Translator

logger = logging.getLogger(__name__)


@dataclass
class ModuleContext:
    """Services a module needs from the run that bootstraps it."""

    loader: FileLoader
    translator: Translator
    bus: NotificationBus


class Module:
    """A dashboard module. Subclasses register with @register_module."""

    name = ""  # set by register_module
    defaults: Dict[str, Any] = {}
    helper_class = None  # NodeHelper subclass started by start()

    def __init__(self):
        self.data: Optional[ModuleDescriptor] = None
        self.config: Dict[str, Any] = {}
        self.state = ModuleState.INSTANTIATED
        self.hidden = False
        self.suspended = False
        self.helper = None
        self.context: Optional[ModuleContext] = None
        self._shown_state: Optional[ModuleState] = None

    @property
    def identifier(self) -> str:
        return self.data.identifier if self.data else self.name

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def set_context(self, context: ModuleContext):
        self.context = context

    def set_descriptor(self, descriptor: ModuleDescriptor):
        self.data = descriptor
        self.hidden = False

    def set_config(self, config: Optional[Dict[str, Any]], strategy: Optional[MergeStrategy] = None):
        """Merge instance config over the class defaults."""
        if strategy is None:
            strategy = self.data.config_merge if self.data else MergeStrategy.SHALLOW
        self.config = merge_config(self.defaults, config, strategy)
        self.state = ModuleState.CONFIG_MERGED

    def get_scripts(self) -> List[str]:
        """Front-end scripts this module needs."""
        return []

    def get_styles(self) -> List[str]:
        """Stylesheets this module needs."""
        return []

    def get_translations(self) -> Dict[str, str]:
        """Map of language -> translation file. First entry is the fallback."""
        return {}

    def file(self, file_name: str) -> str:
        """Path of a file inside the module's directory."""
        path = self.data.path if self.data else ""
        return f"{path}{file_name}"

    async def load_scripts(self):
        await self._load_dependencies(self.get_scripts())

    async def load_styles(self):
        await self._load_dependencies(self.get_styles())

    async def load_translations(self):
        translations = self.get_translations() or {}
        if translations and self.context:
            translator = self.context.translator
            language = translator.language
            fallback_language = next(iter(translations))

            if language in translations:
                await translator.load(self.name, self._local(translations[language]))
            if fallback_language != language:
                await translator.load(
                    self.name, self._local(translations[fallback_language]), is_fallback=True
                )
        self.state = ModuleState.RESOURCES_LOADED

    async def _load_dependencies(self, files: List[str]):
        if not self.context:
            return
        for file_name in files:
            await self.context.loader.load_file_for_module(file_name, self)

    def _local(self, file_name: str) -> str:
        return self.context.loader.document.local_path(self.file(file_name))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self):
        """Start the module's backend. Override to do more."""
        logger.info("Starting module: %s", self.name)
        if self.helper_class is not None and self.context:
            self.helper = self.helper_class(self, self.context.bus, self.config)
            self.helper.start()

    def stop(self):
        if self.helper is not None:
            self.helper.close()
            self.helper = None

    def hide(self):
        if self.state is not ModuleState.HIDDEN:
            self._shown_state = self.state
        self.hidden = True
        self.state = ModuleState.HIDDEN
        if not self.suspended:
            self.suspend()
        self._visibility_changed()

    def show(self):
        self.hidden = False
        if self.state is ModuleState.HIDDEN:
            self.state = self._shown_state or ModuleState.STARTED
        if self.suspended:
            self.resume()
        self._visibility_changed()

    def suspend(self):
        self.suspended = True
        logger.debug("%s is suspended.", self.name)

    def resume(self):
        self.suspended = False
        logger.debug("%s is resumed.", self.name)

    def _visibility_changed(self):
        self.send_notification(
            "MODULE_VISIBILITY", {"identifier": self.identifier, "hidden": self.hidden}
        )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def send_notification(self, notification: str, payload: Any = None):
        """Broadcast a notification to every listener on the bus."""
        if self.context:
            self.context.bus.publish(notification, payload, sender=self.identifier)

    def notification_received(self, notification: str, payload: Any, sender: Optional[str]):
        """Called for bus notifications. Override to react."""

    def send_socket_notification(self, notification: str, payload: Any = None):
        """Send a notification to this module's backend."""
        if self.helper is not None:
            self.helper.socket_notification_received(notification, payload)

    def socket_notification_received(self, notification: str, payload: Any):
        """Called from the backend thread. Override to react."""

    def translate(self, key: str, variables: Optional[Dict[str, Any]] = None) -> str:
        if not self.context:
            return key
        return self.context.translator.translate(self.name, key, variables)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def get_header(self) -> str:
        return (self.data.header or "") if self.data else ""

    def get_dom(self) -> str:
        """Inner HTML for the module's region. Must be escaped by the module."""
        return ""

    def info(self) -> Dict[str, Any]:
        info = self.data.to_dict() if self.data else {"name": self.name}
        info.update({
            "state": self.state.value,
            "hidden": self.hidden,
            "suspended": self.suspended,
        })
        return info
