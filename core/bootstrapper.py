"""Sequential module bootstrapper.

Loads each module strictly one after another: code, then the
instance's scripts, styles and translations. Module N+1 never begins
before module N is fully bootstrapped, so later modules can rely on
shared scripts loaded by earlier ones and the page layout is stable.
"""

import logging
from typing import Dict, List

from core.file_loader import CancelToken, FileLoader, LoadedFileRegistry
from core.models import ModuleDescriptor, ModuleState
from core.module import Module, ModuleContext

logger = logging.getLogger(__name__)


class ModuleBootstrapper:
    """Turns resolved descriptors into bootstrapped module instances."""

    def __init__(
        self,
        host,
        loader: FileLoader,
        registry: LoadedFileRegistry,
        context: ModuleContext,
        token: CancelToken,
    ):
        self.host = host
        self.loader = loader
        self.registry = registry
        self.context = context
        self.token = token
        self.modules: List[Module] = []
        self.code_results: Dict[str, bool] = {}

    async def load_modules(self, descriptors: List[ModuleDescriptor]) -> List[Module]:
        """Bootstrap every descriptor in order. Returns the live modules."""
        for descriptor in descriptors:
            self.token.raise_if_cancelled()
            await self.load_module(descriptor)
        return self.modules

    async def load_module(self, descriptor: ModuleDescriptor):
        url = descriptor.url
        if url in self.registry:
            logger.debug("Module code already loaded: %s", url)
        else:
            self.code_results[url.lower()] = await self.loader.load_file(url)
            self.registry.add(url)
        if self.code_results.get(url.lower()):
            descriptor.state = ModuleState.CODE_LOADED

        module = self.host.create_module_instance(descriptor.name)
        if module is None:
            logger.debug("No module registered as %s, skipping %s",
                         descriptor.name, descriptor.identifier)
            return
        await self.bootstrap_module(descriptor, module)

    async def bootstrap_module(self, descriptor: ModuleDescriptor, module: Module):
        logger.info("Bootstrapping module: %s", descriptor.name)
        module.set_context(self.context)
        module.set_descriptor(descriptor)
        module.set_config(descriptor.config, descriptor.config_merge)

        await module.load_scripts()
        logger.debug("Scripts loaded for: %s", descriptor.name)

        await module.load_styles()
        logger.debug("Styles loaded for: %s", descriptor.name)

        await module.load_translations()
        logger.debug("Translations loaded for: %s", descriptor.name)

        self.modules.append(module)
