"""Startup coordinator for the mirror host.

Single entry point for a bootstrap run:

    resolve -> bootstrap (sequential) -> custom.css -> start (concurrent)
    -> notify host -> hide modules flagged hidden_on_startup

Every per-module failure is logged and absorbed here. Nothing raised by
a module escapes run(); a broken module shows up as an empty region.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from core.bootstrapper import ModuleBootstrapper
from core.document import Document
from core.errors import LoadCancelledError, UnsupportedResourceError
from core.file_loader import DEFAULT_TIMEOUT, CancelToken, FileLoader, LoadedFileRegistry
from core.models import ModuleState
from core.module import Module, ModuleContext
from core.notification_bus import NotificationBus
from core.resolver import resolve_modules
from core.translator import Translator

logger = logging.getLogger(__name__)


class Orchestrator:
    """Owns the state of one bootstrap run and drives it."""

    def __init__(
        self,
        host,
        bus: NotificationBus,
        document: Optional[Document] = None,
        system_modules: Optional[Iterable[Dict]] = None,
        default_module_names: Sequence[str] = (),
        vendor: Optional[Dict[str, str]] = None,
        language: str = "en",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.host = host
        self.bus = bus
        self.document = document or Document()
        self.system_modules = list(system_modules or [])
        self.default_module_names = list(default_module_names)

        self.token = CancelToken()
        self.registry = LoadedFileRegistry()
        self.translator = Translator(language, timeout)
        self.loader = FileLoader(self.document, self.registry, vendor, timeout, self.token)
        self.modules: List[Module] = []

    def cancel(self):
        """Stop the run at the next load boundary."""
        self.token.cancel()

    async def run(self, configured_modules: Optional[Iterable[Dict]]) -> List[Module]:
        """Bootstrap and start every configured module."""
        try:
            env_vars = await self.host.fetch_environment_variables()
            positions = self.host.get_available_positions()

            descriptors = resolve_modules(
                configured_modules, self.system_modules, env_vars,
                positions, self.default_module_names,
            )
            logger.info("Resolved %d modules", len(descriptors))

            bootstrapper = ModuleBootstrapper(
                self.host, self.loader, self.registry,
                ModuleContext(self.loader, self.translator, self.bus), self.token,
            )
            try:
                await bootstrapper.load_modules(descriptors)
            finally:
                self.modules = bootstrapper.modules

            # After every module stylesheet so user overrides win.
            custom_css = env_vars.get("custom_css")
            if custom_css:
                await self._load_override(custom_css)

            await self.start_modules()
        except LoadCancelledError:
            logger.warning("Bootstrap cancelled after %d modules", len(self.modules))
        except Exception as exc:
            logger.error("Bootstrap run failed: %s", exc, exc_info=True)
        return self.modules

    async def _load_override(self, path: str):
        try:
            await self.loader.load_file(path)
        except UnsupportedResourceError as exc:
            logger.error("Custom stylesheet not loaded: %s", exc)

    async def start_modules(self):
        """Start all modules concurrently, then notify and apply hiding."""
        self.token.raise_if_cancelled()
        results = await asyncio.gather(
            *(self._start(module) for module in self.modules),
            return_exceptions=True,
        )

        for module, result in zip(self.modules, results):
            if isinstance(result, BaseException):
                logger.error("Error when starting module %s: %s", module.name, result)
            else:
                module.state = ModuleState.STARTED

        try:
            self.host.notify_modules_started(self.modules)
        except Exception as exc:
            logger.error("Host failed to handle started modules: %s", exc, exc_info=True)

        for module in self.modules:
            if module.data and module.data.hidden_on_startup:
                logger.info("Initially hiding %s", module.name)
                try:
                    module.hide()
                except Exception as exc:
                    logger.error("Error hiding module %s: %s", module.name, exc)

    async def _start(self, module: Module):
        # start() may raise before returning an awaitable
        await module.start()

    def shutdown(self):
        """Stop every module's backend."""
        for module in self.modules:
            try:
                module.stop()
            except Exception as exc:
                logger.error("Error stopping module %s: %s", module.name, exc)
