"""Module registry for the mirror host.

Module code registers its class by name when it is imported. The
bootstrapper then asks the host for an instance by that name.

Usage:
    @register_module("clock")
    class Clock(Module):
        ...
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

MODULE_REGISTRY = {}


def register_module(name):
    """Decorator to register a module class by name."""
    def decorator(cls):
        if name in MODULE_REGISTRY and MODULE_REGISTRY[name] is not cls:
            logger.debug("Replacing module type: %s", name)
        cls.name = name
        MODULE_REGISTRY[name] = cls
        logger.debug("Registered module type: %s -> %s", name, cls.__name__)
        return cls
    return decorator


def create_module_instance(name: str) -> Optional["Module"]:  # noqa: F821
    """Instantiate a registered module, or return None if unknown."""
    cls = MODULE_REGISTRY.get(name)
    if cls is None:
        logger.debug("Unknown module type: %s", name)
        return None
    return cls()
