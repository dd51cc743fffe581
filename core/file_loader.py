"""Loads module code, scripts and stylesheets into the running host.

Each resource is loaded at most once per run. A failed load is logged
and reported as False so one broken file never halts the bootstrap.
Every wait is bounded by a timeout, and a run can be cancelled between
loads.
"""

import asyncio
import importlib.util
import logging
import os
import re
import sys
from typing import Dict, Iterator, Optional, Set

import requests

from core.document import Document, is_remote
from core.errors import LoadCancelledError, UnsupportedResourceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0  # seconds


class CancelToken:
    """Cooperative cancellation flag for one bootstrap run."""

    def __init__(self):
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self):
        if self._cancelled:
            raise LoadCancelledError("Bootstrap run cancelled")


class LoadedFileRegistry:
    """Append-only set of resource identifiers already injected.

    Keys are compared case-insensitively, for module code URLs and
    module-requested files alike.
    """

    def __init__(self):
        self._entries: Set[str] = set()

    def add(self, key: str):
        self._entries.add(key.lower())

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))


class FileLoader:
    """Dispatches resource loads by file extension."""

    def __init__(
        self,
        document: Document,
        registry: LoadedFileRegistry,
        vendor: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        token: Optional[CancelToken] = None,
    ):
        self.document = document
        self.registry = registry
        self.vendor = vendor or {}
        self.timeout = timeout
        self.token = token or CancelToken()

    async def load_file(self, path: str) -> bool:
        """Load one resource. Returns True on success, False on failure.

        Raises UnsupportedResourceError for unknown extensions and
        LoadCancelledError if the run was cancelled.
        """
        self.token.raise_if_cancelled()
        extension = os.path.splitext(path.split("?", 1)[0])[1].lower()

        if extension == ".py":
            return await self._load_code(path)
        if extension == ".js":
            return await self._inject(path, self.document.append_script, "script")
        if extension == ".css":
            return await self._inject(path, self.document.append_stylesheet, "stylesheet")
        raise UnsupportedResourceError(path)

    async def load_file_for_module(self, file_name: str, module) -> bool:
        """Load a file a module asked for, resolving vendor aliases.

        Absolute URLs and paths containing "/" load as given, vendor
        aliases load from vendor/, anything else loads from the module's
        own directory.
        """
        if file_name in self.registry:
            logger.debug("File already loaded: %s", file_name)
            return True
        self.registry.add(file_name)

        if is_remote(file_name) or "/" in file_name:
            path = file_name
        elif file_name in self.vendor:
            path = f"vendor/{self.vendor[file_name]}"
        else:
            path = module.file(file_name)

        try:
            return await self.load_file(path)
        except UnsupportedResourceError as exc:
            logger.error("Module %s: %s", module.name, exc)
            return False

    async def _load_code(self, path: str) -> bool:
        """Import a module's Python code, which registers its class."""
        logger.debug("Load module code: %s", path)
        file_path = self.document.local_path(path)
        if not os.path.isfile(file_path):
            logger.error("Error on loading module code: %s (not found)", path)
            return False

        mod_name = "mirror_module_" + re.sub(r"\W", "_", path)
        spec = importlib.util.spec_from_file_location(mod_name, file_path)
        if spec is None or spec.loader is None:
            logger.error("Error on loading module code: %s (not importable)", path)
            return False

        code = importlib.util.module_from_spec(spec)
        sys.modules[mod_name] = code
        try:
            await asyncio.wait_for(
                asyncio.to_thread(spec.loader.exec_module, code), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            sys.modules.pop(mod_name, None)
            logger.error("Timed out after %.1fs loading module code: %s", self.timeout, path)
            return False
        except Exception as exc:
            sys.modules.pop(mod_name, None)
            logger.error("Error on loading module code: %s: %s", path, exc)
            return False
        return True

    async def _inject(self, path: str, append, kind: str) -> bool:
        logger.debug("Load %s: %s", kind, path)
        append(path)
        try:
            ok = await asyncio.wait_for(self._probe(path), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("Timed out after %.1fs loading %s: %s", self.timeout, kind, path)
            ok = False

        if not ok:
            logger.error("Error on loading %s: %s", kind, path)
            self.document.remove(path)
        return ok

    async def _probe(self, path: str) -> bool:
        """Check the resource is reachable."""
        if is_remote(path):
            return await asyncio.to_thread(self._head, path)
        return await asyncio.to_thread(os.path.isfile, self.document.local_path(path))

    def _head(self, url: str) -> bool:
        try:
            resp = requests.head(url, timeout=self.timeout, allow_redirects=True)
            return resp.ok
        except requests.RequestException as exc:
            logger.warning("Resource unreachable %s: %s", url, exc)
            return False
