"""
Plugin Manager for specimen

Lets external packages teach the synthesizer new types. Plugins are
discovered via entry points in the 'specimen.plugins' group: each entry point
is a callable taking the PluginManager as its single argument.

    # pyproject.toml of the plugin
    [project.entry-points."specimen.plugins"]
    money = "money_plugin:register"

    # money_plugin.py
    def register(manager):
        manager.add_value_rule(Money, lambda synthesizer: Money(synthesizer.state.next_count(), "EUR"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.metadata import entry_points
from logging import WARNING
from typing import Any, Callable

from ptrace.error import writeError

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "specimen.plugins"


@dataclass
class PluginMetadata:
    """Metadata about a loaded plugin."""

    name: str
    entry_point: Any


class PluginManager:
    """Manages specimen plugins: discovery, loading, and registration API."""

    def __init__(self):
        self.plugins: dict[str, PluginMetadata] = {}
        self.value_rules: dict[Any, Callable[[Any], Any]] = {}

    def discover_and_load_plugins(self) -> None:
        """Discover plugins via entry points and call their register functions."""
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            plugin_name = ep.name
            logger.info("Loading plugin: %s", plugin_name)
            try:
                register_func = ep.load()
                register_func(self)
            except Exception as err:
                writeError(logger, err, "Error loading plugin %s" % plugin_name, log_level=WARNING)
                continue
            self.plugins[plugin_name] = PluginMetadata(name=plugin_name, entry_point=ep)

    def add_value_rule(self, tp: Any, rule: Callable[[Any], Any]) -> None:
        """
        Register a rule producing a value for tp.

        Args:
            tp: Type handled by the rule
            rule: Function(synthesizer) -> value
        """
        if tp in self.value_rules:
            logger.warning("Value rule for %r replaced", tp)
        self.value_rules[tp] = rule

    def get_value_rules(self) -> dict[Any, Callable[[Any], Any]]:
        return dict(self.value_rules)


_plugin_manager: PluginManager | None = None


def get_plugin_manager() -> PluginManager:
    """Get the global PluginManager instance, loading plugins on first use."""
    global _plugin_manager
    if _plugin_manager is None:
        _plugin_manager = PluginManager()
        _plugin_manager.discover_and_load_plugins()
    return _plugin_manager


def reset_plugin_manager() -> None:
    """Reset the global PluginManager (mainly for testing)."""
    global _plugin_manager
    _plugin_manager = None
