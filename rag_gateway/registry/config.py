"""Static tool registry config loader."""

from pathlib import Path

import yaml

from .schemas import ToolRegistryConfig


DEFAULT_CONFIG_PATH = Path(__file__).parent / "tools.yaml"


def load_tool_registry(config_path: str | Path | None = None) -> ToolRegistryConfig:
    """Load tool registry config from YAML.

    Args:
        config_path: Optional custom path for the tool registry config.

    Returns:
        Parsed ToolRegistryConfig.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If two tools share a name.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    registry_config = ToolRegistryConfig(**data)

    seen_names: set[str] = set()
    for tool in registry_config.tools:
        if tool.name in seen_names:
            raise ValueError(f"duplicate tool name in config: {tool.name}")
        seen_names.add(tool.name)

    return registry_config
