"""In-memory tool registry built once at startup."""

from pathlib import Path

from .config import load_tool_registry
from .schemas import ToolDescriptor


class ToolRegistry:
    """Immutable, ordered catalog of tool descriptors.

    The order of ``list()`` is the order of the config file and never changes
    for the lifetime of the registry.
    """

    def __init__(self, tools: list[ToolDescriptor]):
        self._tools: tuple[ToolDescriptor, ...] = tuple(tools)
        self._by_name: dict[str, ToolDescriptor] = {tool.name: tool for tool in self._tools}
        if len(self._by_name) != len(self._tools):
            raise ValueError("tool names must be unique")

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> "ToolRegistry":
        """Build a registry from the YAML tool catalog."""
        return cls(load_tool_registry(config_path).tools)

    def get(self, name: str) -> ToolDescriptor | None:
        """Look up a descriptor by tool name."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [tool.name for tool in self._tools]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._tools)

    # Defined last: the method name shadows the builtin inside the class body.
    def list(self) -> list[ToolDescriptor]:
        """Return every descriptor in catalog order."""
        return list(self._tools)
