"""
Filter Configuration Loader for specimen

Loads property and operation filters from a TOML file:

    [options]
    case_sensitive = true

    [blacklist]
    property = ["password", "*_hash"]
    operation = [{pattern = "^delete_.*", type = "regex"}]

    [whitelist]
    operation = ["get_*"]
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from specimen.filter_manager import FilterManager, detect_pattern_type

logger = logging.getLogger(__name__)


class FilterConfigLoader:
    """Loads filter configuration from a TOML file."""

    def __init__(self, config_path: Path | str):
        self.config_path = Path(config_path)

    def load(self, filter_manager: FilterManager):
        """
        Load config file and populate filter_manager.

        Raises:
            tomllib.TOMLDecodeError: If the file is not valid TOML
            ValueError: If a pattern is invalid
        """
        if not self.config_path.exists():
            # Config file is optional
            return

        logger.info("Loading filters from %s", self.config_path)
        with open(self.config_path, 'rb') as f:
            config = tomllib.load(f)

        options = config.get('options', {})
        default_case_sensitive = options.get('case_sensitive', True)

        for list_type in ('blacklist', 'whitelist'):
            if list_type in config:
                self._load_filter_list(
                    filter_manager, config[list_type], list_type, default_case_sensitive
                )

    def _load_filter_list(self, filter_manager: FilterManager,
                          config_section: dict, list_type: str,
                          default_case_sensitive: bool):
        for item_type in filter_manager.ITEM_TYPES:
            entries = config_section.get(item_type, [])
            if not isinstance(entries, list):
                logger.warning("Ignore %s.%s: expected a list", list_type, item_type)
                continue
            for entry in entries:
                if isinstance(entry, str):
                    self._add_entry_from_string(
                        filter_manager, list_type, item_type, entry, default_case_sensitive
                    )
                elif isinstance(entry, dict):
                    self._add_entry_from_dict(
                        filter_manager, list_type, item_type, entry, default_case_sensitive
                    )
                else:
                    logger.warning(
                        "Invalid entry type in %s.%s: %s", list_type, item_type, type(entry)
                    )

    def _add(self, filter_manager, list_type, item_type, pattern, pattern_type, case_sensitive):
        if list_type == 'blacklist':
            add_entry = filter_manager.add_blacklist_entry
        else:
            add_entry = filter_manager.add_whitelist_entry
        add_entry(item_type, pattern, pattern_type, case_sensitive, source='config')

    def _add_entry_from_string(self, filter_manager, list_type, item_type,
                               entry: str, default_case_sensitive: bool):
        entry = entry.strip()
        if not entry:
            return
        self._add(filter_manager, list_type, item_type, entry,
                  detect_pattern_type(entry), default_case_sensitive)

    def _add_entry_from_dict(self, filter_manager, list_type, item_type,
                             entry_dict: dict, default_case_sensitive: bool):
        """
        Parse an entry table with options:

            {pattern = "_private*", type = "glob", case_sensitive = false}
        """
        if 'pattern' not in entry_dict:
            logger.warning("Entry missing 'pattern' field in %s.%s", list_type, item_type)
            return

        pattern = entry_dict['pattern']
        pattern_type = entry_dict.get('type')
        case_sensitive = entry_dict.get('case_sensitive', default_case_sensitive)

        if pattern_type not in (None, 'exact', 'glob', 'regex'):
            logger.warning(
                "Invalid pattern type '%s' for pattern '%s', using auto-detection",
                pattern_type, pattern,
            )
            pattern_type = None
        if pattern_type is None:
            pattern_type = detect_pattern_type(pattern)

        self._add(filter_manager, list_type, item_type, pattern, pattern_type, case_sensitive)


def load_filter_config(config_path: Path | str, filter_manager: FilterManager):
    """Convenience function to load config."""
    FilterConfigLoader(config_path).load(filter_manager)


def create_filter_manager(config) -> FilterManager | None:
    """
    Create the FilterManager described by a SpecimenConfig, or None when no
    filter file is configured.
    """
    if not config.filters_config:
        return None
    filter_manager = FilterManager(mode=config.filters_mode, verbose=config.filters_verbose)
    load_filter_config(config.filters_config, filter_manager)
    return filter_manager
