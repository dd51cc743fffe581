"""Config merging for module instances."""

import copy
from typing import Any, Dict, Optional

from core.models import MergeStrategy


def merge_config(
    defaults: Dict[str, Any],
    overrides: Optional[Dict[str, Any]],
    strategy: MergeStrategy = MergeStrategy.SHALLOW,
) -> Dict[str, Any]:
    """Return a new dict with overrides laid over defaults.

    SHALLOW replaces top-level keys. DEEP recurses into nested dicts;
    lists and scalars are always replaced. Neither input is mutated.
    """
    result = copy.deepcopy(defaults)
    if not overrides:
        return result
    if strategy is MergeStrategy.DEEP:
        _deep_update(result, overrides)
    else:
        for key, value in overrides.items():
            result[key] = copy.deepcopy(value)
    return result


def _deep_update(target: Dict[str, Any], source: Dict[str, Any]):
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
