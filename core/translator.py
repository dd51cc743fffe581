"""Per-module translations.

Each module declares a map of language -> JSON file. The configured
language is loaded when present; the first declared language is kept
as a fallback. Lookups fall back module -> module fallback -> core ->
core fallback -> the key itself.
"""

import asyncio
import json
import logging
import os
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_VARIABLE = re.compile(r"\{([^{}]+)\}")


def read_translation_file(path: str) -> Dict[str, str]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error("Translation file not found: %s", path)
        return {}
    except (OSError, ValueError) as exc:
        logger.error("Could not read translation file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.error("Translation file %s is not a JSON object", path)
        return {}
    return data


class Translator:
    """Holds loaded translations for all modules of one run."""

    def __init__(self, language: str = "en", timeout: float = 30.0):
        self.language = language
        self.timeout = timeout
        self.translations: Dict[str, Dict[str, str]] = {}
        self.fallbacks: Dict[str, Dict[str, str]] = {}
        self.core: Dict[str, str] = {}
        self.core_fallback: Dict[str, str] = {}

    async def load(self, module_name: str, path: str, is_fallback: bool = False):
        """Load one translation file for a module."""
        try:
            data = await asyncio.wait_for(
                asyncio.to_thread(read_translation_file, path), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.error("Timed out after %.1fs loading translations for %s: %s",
                         self.timeout, module_name, path)
            data = {}
        target = self.fallbacks if is_fallback else self.translations
        target[module_name] = data
        logger.debug("Loaded %s translations for %s from %s",
                     "fallback" if is_fallback else self.language, module_name, path)

    def load_core(self, directory: str, fallback_language: str = "en"):
        """Load the host's own translations from directory/<lang>.json."""
        path = os.path.join(directory, f"{self.language}.json")
        if os.path.isfile(path):
            self.core = read_translation_file(path)
        fallback = os.path.join(directory, f"{fallback_language}.json")
        if os.path.isfile(fallback):
            self.core_fallback = read_translation_file(fallback)

    def translate(self, module_name: str, key: str, variables: Optional[Dict[str, Any]] = None) -> str:
        variables = variables or {}
        for table in (
            self.translations.get(module_name, {}),
            self.fallbacks.get(module_name, {}),
            self.core,
            self.core_fallback,
        ):
            if key in table:
                return _substitute(table[key], variables)
        return variables.get("fallback", key)


def _substitute(template: str, variables: Dict[str, Any]) -> str:
    def replace(match):
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)
    return _VARIABLE.sub(replace, template)
