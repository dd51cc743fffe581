"""Expands configured modules into resolved descriptors.

The notification module, the host's system modules and the user's
modules are concatenated in that order. The position in that list is
the module's index and its paint priority. Disabled modules and
modules with an invalid position are dropped with a warning; one bad
entry never blocks the rest.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.models import MergeStrategy, ModuleDescriptor

logger = logging.getLogger(__name__)

NOTIFICATION_MODULE = {"module": "notification", "config": {}}
DEFAULT_MODULES_DIR = "modules/default"


def get_all_modules(
    configured_modules: Optional[Iterable[Dict]],
    system_modules: Optional[Iterable[Dict]] = None,
) -> List[Dict]:
    all_modules = [dict(NOTIFICATION_MODULE)]
    all_modules.extend(system_modules or [])
    all_modules.extend(configured_modules or [])
    return all_modules


def resolve_modules(
    configured_modules: Optional[Iterable[Dict]],
    system_modules: Optional[Iterable[Dict]],
    env_vars: Dict[str, Any],
    available_positions: Sequence[str],
    default_module_names: Sequence[str] = (),
) -> List[ModuleDescriptor]:
    """Return descriptors for every usable module, in configured order."""
    modules_dir = str(env_vars.get("modules_dir", "modules")).rstrip("/")
    # Test trees can shadow default modules with local copies.
    shadow_defaults = env_vars.get("shadow_default_modules") is True and modules_dir != "modules"
    descriptors = []

    for index, entry in enumerate(get_all_modules(configured_modules, system_modules)):
        if not isinstance(entry, dict):
            logger.warning("Module entry %d is not a mapping: %r", index, entry)
            continue
        if entry.get("disabled") is True:
            continue

        module_class = entry.get("module")
        if not isinstance(module_class, str) or not module_class:
            logger.warning("Module entry %d has no module name", index)
            continue

        position = entry.get("position")
        if isinstance(position, str):
            if position not in available_positions:
                logger.warning("Module %s has invalid position: %s", module_class, position)
                continue
        elif position is not None:
            logger.warning("Module %s has an invalid position type: %s",
                           module_class, type(position).__name__)
            continue

        name = module_class.split("/")[-1]
        if name in default_module_names and not shadow_defaults:
            folder = f"{DEFAULT_MODULES_DIR}/{module_class}"
        else:
            folder = f"{modules_dir}/{module_class}"

        config = entry.get("config") or {}
        if not isinstance(config, dict):
            logger.warning("Module %s config is not a mapping, using defaults", module_class)
            config = {}

        classes = entry.get("classes")
        descriptors.append(ModuleDescriptor(
            index=index,
            module_class=module_class,
            identifier=f"module_{index}_{module_class}",
            name=name,
            path=f"{folder}/",
            file=f"{name}.py",
            position=position,
            animate_in=entry.get("animate_in"),
            animate_out=entry.get("animate_out"),
            hidden_on_startup=entry.get("hidden_on_startup") is True,
            header=entry.get("header"),
            config_merge=(
                MergeStrategy.DEEP if entry.get("config_deep_merge") is True
                else MergeStrategy.SHALLOW
            ),
            config=config,
            classes=f"{classes} {module_class}" if classes is not None else module_class,
        ))

    return descriptors
