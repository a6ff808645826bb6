"""
Counters shared by every synthesizer using the same state.

The scalar counter makes generated values unique: if objectA and objectB
both have a "name" property, the first gets "sampleValue1" and the second
"sampleValue2". Call reset_counter() before each test so expectations do not
depend on test order.

Each enumerated type has its own cycle index so consecutive values walk
through the constants. reset() keeps the indexes.
"""

from __future__ import annotations

from typing import Hashable

COUNTER_START = 1


class SynthesisState:
    def __init__(self, counter_start: int = COUNTER_START):
        self.counter_start = counter_start
        self.counter = counter_start
        self.enum_indexes: dict[Hashable, int] = {}

    def reset(self) -> None:
        self.counter = self.counter_start

    def next_count(self) -> int:
        value = self.counter
        self.counter += 1
        return value

    def wrap_counter(self, max_value: int) -> None:
        """Restart the counter at 1 once it exceeds max_value."""
        if self.counter > max_value:
            self.counter = 1

    def next_enum_index(self, key: Hashable, size: int) -> int:
        """Return the index to use for key, then advance it (wraps to 0)."""
        index = self.enum_indexes.get(key, 0)
        if size <= index:
            index = 0
        self.enum_indexes[key] = index + 1 if index + 1 < size else 0
        return index

    def __repr__(self):
        return "<SynthesisState counter=%s enums=%s>" % (self.counter, len(self.enum_indexes))


DEFAULT_STATE = SynthesisState()

# one process-wide state per configured start value
_SHARED_STATES: dict[int, SynthesisState] = {COUNTER_START: DEFAULT_STATE}


def shared_state(counter_start: int = COUNTER_START) -> SynthesisState:
    """Get the process-wide state starting at counter_start, created on first use."""
    state = _SHARED_STATES.get(counter_start)
    if state is None:
        state = SynthesisState(counter_start)
        _SHARED_STATES[counter_start] = state
    return state


def reset_counter(state: SynthesisState | None = None) -> None:
    """Reset the scalar counter of state (default: every process-wide state)."""
    if state is not None:
        state.reset()
        return
    for shared in _SHARED_STATES.values():
        shared.reset()
