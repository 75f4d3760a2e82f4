"""
Tool Registry Builder - builds a ToolRegistry from configuration.

Tool specs come from ``Settings.tools`` or ``Settings.tool_presets[name]``.
Each spec is either an import path string or a one-entry mapping from an
import path to constructor keyword arguments::

    CLEVER_AGENT_TOOLS='["clever_agent.tools.builtin:GetWeatherTool"]'
    CLEVER_AGENT_TOOL_PRESETS='{"weather": [{"clever_agent.tools.builtin:GetWeatherTool": {"seed": 1}}]}'

Both ``package.module:ClassName`` and ``package.module.ClassName`` are
accepted.
"""

import importlib
import logging
from typing import Any, Iterable, Mapping, Optional

from clever_agent.core.config import Settings, get_settings
from clever_agent.core.exceptions import ConfigurationError
from clever_agent.tools.base import Tool
from clever_agent.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def import_object(path: str) -> Any:
    """
    Import an object from a dotted path.

    Args:
        path: ``package.module:attr`` or ``package.module.attr``.

    Raises:
        ConfigurationError: If the module or attribute cannot be found.
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigurationError(f"Invalid tool path: {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import tool module {module_name!r}: {e}") from e

    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigurationError(f"Module {module_name!r} has no attribute {attr!r}") from e


class ToolRegistryBuilder:
    """
    Builder for creating a ToolRegistry from settings.

    Args:
        settings: Settings to read ``tools`` and ``tool_presets`` from.
            Defaults to the cached application settings.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings if settings is not None else get_settings()

    def build(self, preset: Optional[str] = None) -> ToolRegistry:
        """
        Build a registry from the default tool list or a named preset.

        An unknown preset yields an empty registry.

        Args:
            preset: Name of an entry in ``tool_presets``, or None for ``tools``.

        Returns:
            A new ToolRegistry.

        Raises:
            ConfigurationError: If a spec cannot be imported or does not
                produce a Tool.
        """
        if preset is not None:
            specs = self.settings.tool_presets.get(preset, [])
            if preset not in self.settings.tool_presets:
                logger.warning("Unknown tool preset: %s", preset)
        else:
            specs = self.settings.tools
        return self.build_from_specs(specs)

    def build_from_specs(self, specs: Iterable[Any]) -> ToolRegistry:
        """Build a registry from an explicit list of tool specs."""
        registry = ToolRegistry()
        for spec in specs:
            for tool in self._create_tools(spec):
                registry.register(tool)
        logger.debug("Built tool registry with %d tool(s)", len(registry))
        return registry

    def _create_tools(self, spec: Any) -> list[Tool]:
        if isinstance(spec, Tool):
            return [spec]
        if isinstance(spec, str):
            return [self._instantiate(spec, {})]
        if isinstance(spec, Mapping):
            tools = []
            for path, params in spec.items():
                if params is not None and not isinstance(params, Mapping):
                    raise ConfigurationError(
                        f"Parameters for tool {path!r} must be a mapping"
                    )
                tools.append(self._instantiate(path, dict(params or {})))
            return tools
        raise ConfigurationError(f"Invalid tool spec: {spec!r}")

    def _instantiate(self, path: str, params: dict[str, Any]) -> Tool:
        target = import_object(path)
        try:
            tool = target(**params) if callable(target) else target
        except TypeError as e:
            raise ConfigurationError(f"Cannot construct tool {path!r}: {e}") from e
        if not isinstance(tool, Tool):
            raise ConfigurationError(f"{path!r} does not produce a Tool instance")
        return tool
