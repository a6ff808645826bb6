"""
Filter Manager for specimen

Provides blacklist/whitelist filtering of properties (skipped during
population) and operations (skipped during enumeration) by name.
Supports exact matches, glob patterns, and regex patterns.

Names are checked both bare ("password") and qualified by their class
("Account.password").
"""

from __future__ import annotations

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


def detect_pattern_type(pattern: str) -> str:
    """
    Auto-detect pattern type.

    Literal names are 'exact', names with only * or ? wildcards are 'glob',
    anything else compiling as a regular expression is 'regex'.

    >>> detect_pattern_type("password")
    'exact'
    >>> detect_pattern_type("get_*")
    'glob'
    >>> detect_pattern_type(r"^_.*_$")
    'regex'
    """
    has_glob_chars = '*' in pattern or '?' in pattern
    has_regex_chars = bool(re.search(r'[.^$+{}\[\]|()\\]', pattern))

    if not has_glob_chars and not has_regex_chars:
        return 'exact'

    if has_glob_chars and not has_regex_chars:
        return 'glob'

    try:
        re.compile(pattern)
        return 'regex'
    except re.error:
        # raise if it's not a glob either
        re.compile(fnmatch.translate(pattern))
    return 'glob'


@dataclass
class FilterPattern:
    """Represents a single filter pattern."""

    pattern: str
    pattern_type: str  # 'exact', 'glob', 'regex'
    case_sensitive: bool = True
    source: str = 'default'  # 'default', 'config', 'user'
    _compiled: Any = field(init=False, repr=False, default=None)

    def __post_init__(self):
        flags = 0 if self.case_sensitive else re.IGNORECASE
        if self.pattern_type == 'glob':
            try:
                self._compiled = re.compile(fnmatch.translate(self.pattern), flags)
            except re.error as e:
                raise ValueError(f"Invalid glob pattern '{self.pattern}': {e}")
        elif self.pattern_type == 'regex':
            try:
                self._compiled = re.compile(self.pattern, flags)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern '{self.pattern}': {e}")

    def matches(self, text: str) -> bool:
        if self.pattern_type == 'exact':
            if self.case_sensitive:
                return text == self.pattern
            return text.lower() == self.pattern.lower()
        return bool(self._compiled.fullmatch(text))


class FilterList:
    """Manages filters for a specific item type."""

    def __init__(self, item_type: str):
        self.item_type = item_type
        self.exact: set[str] = set()
        self.exact_insensitive: set[str] = set()
        self.patterns: list[FilterPattern] = []

    def add_exact(self, name: str, source: str = 'default', case_sensitive: bool = True):
        if case_sensitive:
            self.exact.add(name)
        else:
            self.exact_insensitive.add(name.lower())
        # keep the pattern for source tracking
        self.patterns.append(
            FilterPattern(pattern=name, pattern_type='exact',
                          case_sensitive=case_sensitive, source=source)
        )

    def add_pattern(self, pattern: str, pattern_type: str,
                    case_sensitive: bool = True, source: str = 'default'):
        if pattern_type not in ('glob', 'regex'):
            raise ValueError(
                f"Invalid pattern_type: {pattern_type}. Must be 'glob' or 'regex'"
            )
        self.patterns.append(
            FilterPattern(pattern=pattern, pattern_type=pattern_type,
                          case_sensitive=case_sensitive, source=source)
        )

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def matches(self, name: str) -> tuple[bool, FilterPattern | None]:
        """
        Check if name matches any filter.

        Returns:
            (matched, pattern_obj) - pattern_obj is None if no match
        """
        if name in self.exact or name.lower() in self.exact_insensitive:
            for pattern in self.patterns:
                if pattern.pattern_type == 'exact' and pattern.matches(name):
                    return True, pattern
            return True, None

        for pattern in self.patterns:
            if pattern.pattern_type == 'exact':
                continue
            if pattern.matches(name):
                return True, pattern

        return False, None


class FilterManager:
    """
    Blacklist/whitelist filtering of property and operation names.

    Modes:
    - 'blacklist': Allow everything except blacklisted items
    - 'whitelist': Deny everything except whitelisted items
    - 'both': Whitelist overrides blacklist, then apply blacklist rules

    In 'whitelist' mode an item type without any whitelist entry is not
    filtered at all, so a whitelist of operations doesn't drop every property.
    """

    ITEM_TYPES = ['property', 'operation']
    VALID_MODES = ['blacklist', 'whitelist', 'both']

    def __init__(self, mode: str = 'blacklist', verbose: bool = False):
        if mode not in self.VALID_MODES:
            raise ValueError(
                f"Invalid mode: {mode}. Must be one of {self.VALID_MODES}"
            )
        self.mode = mode
        self.verbose = verbose
        self.blacklist: dict[str, FilterList] = {
            item_type: FilterList(item_type) for item_type in self.ITEM_TYPES
        }
        self.whitelist: dict[str, FilterList] = {
            item_type: FilterList(item_type) for item_type in self.ITEM_TYPES
        }

    def add_blacklist_entry(self, item_type: str, name: str,
                            pattern_type: str | None = None,
                            case_sensitive: bool = True,
                            source: str = 'user'):
        self._add_entry(self.blacklist, item_type, name, pattern_type, case_sensitive, source)

    def add_whitelist_entry(self, item_type: str, name: str,
                            pattern_type: str | None = None,
                            case_sensitive: bool = True,
                            source: str = 'user'):
        self._add_entry(self.whitelist, item_type, name, pattern_type, case_sensitive, source)

    def _add_entry(self, lists, item_type, name, pattern_type, case_sensitive, source):
        self._validate_item_type(item_type)
        if pattern_type is None:
            pattern_type = detect_pattern_type(name)
        if pattern_type == 'exact':
            lists[item_type].add_exact(name, source, case_sensitive)
        else:
            lists[item_type].add_pattern(name, pattern_type, case_sensitive, source)

    def is_allowed(self, item_type: str, *item_names: str) -> bool:
        """
        Is this item allowed to be synthesized (property) or enumerated
        (operation)?

        An item has several names (bare and qualified): it is whitelisted if
        any of them is whitelisted, blacklisted if any of them is blacklisted.
        """
        self._validate_item_type(item_type)

        for item_name in item_names:
            wl_matched, wl_pattern = self.whitelist[item_type].matches(item_name)
            if wl_matched:
                self._log_match('whitelist', item_type, item_name, wl_pattern)
                return True

        if self.mode == 'whitelist' and self.whitelist[item_type]:
            if self.verbose:
                logger.info("Whitelist: denied %s %s (no match)", item_type, item_names)
            return False

        for item_name in item_names:
            bl_matched, bl_pattern = self.blacklist[item_type].matches(item_name)
            if bl_matched:
                self._log_match('blacklist', item_type, item_name, bl_pattern)
                return False
        return True

    def get_statistics(self) -> dict:
        """Get statistics about loaded filters."""
        stats = {'mode': self.mode, 'blacklist': {}, 'whitelist': {}}
        for list_type, lists in (('blacklist', self.blacklist), ('whitelist', self.whitelist)):
            for item_type, filters in lists.items():
                exact = len(filters.exact) + len(filters.exact_insensitive)
                patterns = sum(1 for p in filters.patterns if p.pattern_type != 'exact')
                stats[list_type][item_type] = {
                    'exact': exact,
                    'patterns': patterns,
                    'total': exact + patterns,
                }
        return stats

    def _validate_item_type(self, item_type: str):
        if item_type not in self.ITEM_TYPES:
            raise ValueError(
                f"Invalid item_type: {item_type}. "
                f"Must be one of: {self.ITEM_TYPES}"
            )

    def _log_match(self, list_type: str, item_type: str,
                   item_name: str, pattern: FilterPattern | None):
        if not self.verbose:
            return
        if pattern is None:
            pattern_info = "unknown pattern"
        else:
            pattern_info = f"{pattern.pattern_type}: '{pattern.pattern}', source: {pattern.source}"
        action = "allowed" if list_type == 'whitelist' else "filtered"
        logger.info(
            "%s: %s %s '%s' (matched %s)",
            list_type.capitalize(), action, item_type, item_name, pattern_info,
        )
