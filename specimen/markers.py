"""
Markers attached to properties, constructor parameters and operations.

Properties are marked through typing.Annotated metadata:

    class Account:
        owner_id: Annotated[UUID, Transient]

Operations are marked with the mark() decorator:

    class SkipInvocation(Marker):
        pass

    class Operations:
        @mark(SkipInvocation)
        def list_entities(self, client: RestClient) -> list: ...

Specimen only checks whether a marker is present, it never interprets it.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable

MARKERS_ATTRIBUTE = "__specimen_markers__"
CONSTRUCTOR_ATTRIBUTE = "__specimen_constructor__"


class Marker:
    """Base class for caller-defined tags. Use the class or an instance."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Transient(Marker):
    """The property is never populated by synthesis, only by explicit overrides."""


class SampleValue:
    """Literal value used verbatim for a constructor parameter."""

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"SampleValue({self.value!r})"


def mark(*markers: type[Marker] | Marker) -> Callable:
    """Decorator attaching markers to an operation."""

    def decorator(func):
        target = getattr(func, "__func__", func)
        existing = getattr(target, MARKERS_ATTRIBUTE, ())
        setattr(target, MARKERS_ATTRIBUTE, tuple(existing) + markers)
        return func

    return decorator


def constructor(func: Callable) -> Callable:
    """Declare a classmethod as an alternative constructor."""
    setattr(getattr(func, "__func__", func), CONSTRUCTOR_ATTRIBUTE, True)
    return func


def is_constructor(func: Any) -> bool:
    return getattr(getattr(func, "__func__", func), CONSTRUCTOR_ATTRIBUTE, False)


def markers_of(func: Any) -> tuple:
    return getattr(getattr(func, "__func__", func), MARKERS_ATTRIBUTE, ())


def _matches(item: Any, wanted: type | Any) -> bool:
    if isinstance(wanted, type):
        if item is wanted:
            return True
        if isinstance(item, type):
            return issubclass(item, wanted)
        return isinstance(item, wanted)
    if isinstance(item, type):
        return isinstance(wanted, item)
    return item is wanted or item == wanted


def has_marker(metadata: Iterable[Any], wanted: Iterable[type | Any]) -> bool:
    """
    Check if any item of metadata is one of the wanted markers.

    >>> has_marker((Transient,), (Transient,))
    True
    >>> has_marker((Transient(),), (Transient,))
    True
    >>> has_marker(("doc",), (Transient,))
    False
    """
    wanted = tuple(wanted)
    return any(_matches(item, marker) for item in metadata for marker in wanted)


def sample_value_of(metadata: Iterable[Any]) -> SampleValue | None:
    for item in metadata:
        if isinstance(item, SampleValue):
            return item
    return None
