"""In-memory page document the file loader injects resources into.

Stands in for the browser DOM: stylesheets go in the head, scripts go
at the end of the body. The web host renders both into the page.
"""

import logging
import os
from typing import List

from markupsafe import escape

logger = logging.getLogger(__name__)


def is_remote(path: str) -> bool:
    return path.startswith("http://") or path.startswith("https://")


class Document:
    """Ordered script and stylesheet references for one page."""

    def __init__(self, root: str = "."):
        self.root = os.path.abspath(root)
        self.stylesheets: List[str] = []
        self.scripts: List[str] = []

    def append_stylesheet(self, href: str):
        self.stylesheets.append(href)

    def append_script(self, src: str):
        self.scripts.append(src)

    def remove(self, ref: str):
        """Remove the most recently added reference matching ref."""
        for tags in (self.scripts, self.stylesheets):
            for i in range(len(tags) - 1, -1, -1):
                if tags[i] == ref:
                    del tags[i]
                    return

    def local_path(self, ref: str) -> str:
        """Filesystem location of a document-relative reference."""
        if os.path.isabs(ref):
            return ref
        return os.path.join(self.root, ref.lstrip("/"))

    def head_html(self) -> str:
        return "\n".join(
            f'<link rel="stylesheet" type="text/css" href="{escape(self._href(h))}">'
            for h in self.stylesheets
        )

    def scripts_html(self) -> str:
        return "\n".join(
            f'<script type="text/javascript" src="{escape(self._href(s))}"></script>'
            for s in self.scripts
        )

    def _href(self, ref: str) -> str:
        if is_remote(ref):
            return ref
        if os.path.isabs(ref):
            try:
                return "/" + os.path.relpath(ref, self.root).replace(os.sep, "/")
            except ValueError:
                return ref
        return "/" + ref.lstrip("/")
