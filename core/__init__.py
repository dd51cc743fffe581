"""Core framework for the mirror host.

Loads pluggable modules into fixed screen regions and starts them.

Architecture:
    Resolver      -- expands configured modules into validated descriptors
    FileLoader    -- loads module code, scripts and stylesheets exactly once
    Bootstrapper  -- instantiates and prepares modules strictly in order
    Orchestrator  -- runs the whole sequence and starts modules concurrently
    Registry      -- maps module names to their registered classes
    NodeHelper    -- background fetcher behind a module, publishes to the bus
"""

from core.notification_bus import NotificationBus
from core.document import Document
from core.module import Module
from core.node_helper import NodeHelper
from core.orchestrator import Orchestrator
from core.host import HostShell, MirrorShell
from core.registry import MODULE_REGISTRY, register_module

__all__ = [
    "NotificationBus",
    "Document",
    "Module",
    "NodeHelper",
    "Orchestrator",
    "HostShell",
    "MirrorShell",
    "MODULE_REGISTRY",
    "register_module",
]
