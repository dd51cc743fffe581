"""Data model shared by the resolver, bootstrapper and orchestrator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class MergeStrategy(Enum):
    """How instance config is laid over a module's defaults."""

    SHALLOW = "shallow"
    DEEP = "deep"


class ModuleState(Enum):
    """Lifecycle of one module instance. There is no failure state."""

    RESOLVED = "resolved"
    CODE_LOADED = "code_loaded"
    INSTANTIATED = "instantiated"
    CONFIG_MERGED = "config_merged"
    RESOURCES_LOADED = "resources_loaded"
    STARTED = "started"
    HIDDEN = "hidden"


@dataclass
class ModuleDescriptor:
    """Resolved, validated configuration for one module instance."""

    index: int
    module_class: str
    identifier: str
    name: str
    path: str
    file: str
    position: Optional[str] = None
    animate_in: Optional[Any] = None
    animate_out: Optional[Any] = None
    hidden_on_startup: bool = False
    header: Optional[str] = None
    config_merge: MergeStrategy = MergeStrategy.SHALLOW
    config: Dict[str, Any] = field(default_factory=dict)
    classes: str = ""
    # Pre-instance stages; the instance tracks its own state from INSTANTIATED on.
    state: ModuleState = ModuleState.RESOLVED

    @property
    def url(self) -> str:
        """Location of the module's main code resource."""
        return self.path + self.file

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "module": self.module_class,
            "identifier": self.identifier,
            "name": self.name,
            "path": self.path,
            "position": self.position,
            "header": self.header,
            "hidden_on_startup": self.hidden_on_startup,
            "config_merge": self.config_merge.value,
            "classes": self.classes,
        }
