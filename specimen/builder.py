"""
Builds a valid instance of any class at run time using introspection.

Intended as a complement to hand-written test builders: it is a quick way to
get a fully populated entity, with a unique value for each property.

    account = generated(Account).with_("owner", "alice").in_(a_bank).build()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from logging import DEBUG
from typing import Any, Generic, TypeVar

from ptrace.error import writeError

from specimen.errors import (
    AmbiguousPropertyError,
    InstantiationError,
    NoMatchingPropertyError,
    NoSuchPropertyError,
    SpecimenError,
)
from specimen.introspection import PropertyHandle
from specimen.markers import has_marker, sample_value_of
from specimen.synthesizer import NOTHING, ValueSynthesizer

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Match:
    property: PropertyHandle


@dataclass(frozen=True)
class AmbiguousMatch:
    candidates: tuple[PropertyHandle, ...]


@dataclass(frozen=True)
class NoMatch:
    value_type: type


def instantiate(cls: type, synthesizer: ValueSynthesizer) -> Any:
    """
    Create an instance of cls using the constructor with the fewest
    parameters (first declared wins on ties).
    """
    constructors = synthesizer.introspector.constructors(cls)
    selected = None
    for candidate in constructors:
        if selected is None or len(candidate.parameters) < len(selected.parameters):
            selected = candidate
    logger.debug("Instantiate %s using %s", cls.__qualname__, selected.name)

    arguments = []
    for parameter in selected.parameters:
        sample = sample_value_of(parameter.metadata)
        if sample is not None:
            arguments.append(sample.value)
            continue
        value = synthesizer.synthesize(parameter.type) if parameter.annotated else NOTHING
        arguments.append(None if value is NOTHING else value)

    try:
        return selected.invoke(arguments)
    except SpecimenError:
        raise
    except Exception as err:
        writeError(logger, err, "Error instantiating %s" % cls.__qualname__, log_level=DEBUG)
        raise InstantiationError(cls, err) from err


def _declared_properties(instance_type: type, synthesizer: ValueSynthesizer) -> list[PropertyHandle]:
    """Properties of the type then its ancestors, a redeclared name counts once."""
    seen = set()
    handles = []
    for klass in synthesizer.introspector.ancestors(instance_type):
        for handle in synthesizer.introspector.properties(klass):
            if handle.name in seen:
                continue
            seen.add(handle.name)
            handles.append(handle)
    return handles


def _is_excluded(handle: PropertyHandle, synthesizer: ValueSynthesizer) -> bool:
    if has_marker(handle.metadata, synthesizer.exclusion_markers):
        return True
    filters = synthesizer.filter_manager
    if filters is None:
        return False
    return not filters.is_allowed("property", handle.qualname, handle.name)


def populate(instance: T, synthesizer: ValueSynthesizer) -> T:
    """
    Set all properties of instance, starting with its own class and then
    each ancestor.
    """
    for handle in _declared_properties(type(instance), synthesizer):
        if handle.is_static or handle.is_constant:
            continue
        if _is_excluded(handle, synthesizer):
            logger.debug("Skip excluded property %s", handle.qualname)
            continue

        value = synthesizer.synthesize(handle.type)
        if value is NOTHING:
            # leave as the class initialized it
            continue
        # only set a collection if the existing one is missing
        if synthesizer.isListLike(synthesizer.resolve(handle.type)) and handle.get(instance) is not None:
            continue
        handle.set(instance, value)
    return instance


def _built(value: Any) -> Any:
    if isinstance(value, EntityBuilder):
        return value.build()
    return value


class EntityBuilder(Generic[T]):
    """
    Builder owning a synthesized entity until build() releases it.

    Builders are created with for_type() or generated().
    """

    def __init__(self, entity: T, synthesizer: ValueSynthesizer):
        self.entity = entity
        self.synthesizer = synthesizer

    @classmethod
    def for_type(cls, entity_class: type[T], synthesizer: ValueSynthesizer | None = None) -> EntityBuilder[T]:
        """Create a builder holding a fully valid entity of entity_class."""
        if synthesizer is None:
            synthesizer = ValueSynthesizer()
        return cls(synthesizer.synthesize(entity_class), synthesizer)

    def build(self) -> T:
        return self.entity

    def _properties(self) -> list[PropertyHandle]:
        return _declared_properties(type(self.entity), self.synthesizer)

    def set_by_name(self, name: str, value: Any) -> EntityBuilder[T]:
        """
        Set a property by name, ignoring exclusion markers.

        The name is only checked at runtime, so this is brittle. If the value
        matches only one property, prefer set_by_type().
        """
        for handle in self._properties():
            if handle.name == name:
                handle.set(self.entity, _built(value))
                return self
        raise NoSuchPropertyError(type(self.entity), name)

    def find_property_for(self, value: Any) -> Match | AmbiguousMatch | NoMatch:
        """
        Find the non-excluded property whose declared type accepts value.

        Properties declared with a type isinstance() can't check (plain
        Protocols, Any, Literal) never match.
        """
        value_type = type(value)
        candidates = []
        for handle in self._properties():
            declared = self.synthesizer.runtimeClass(handle.type)
            if declared is None:
                continue
            if declared is not value_type and not isinstance(value, declared):
                continue
            if _is_excluded(handle, self.synthesizer):
                continue
            candidates.append(handle)
        if not candidates:
            return NoMatch(value_type)
        if len(candidates) > 1:
            return AmbiguousMatch(tuple(candidates))
        return Match(candidates[0])

    def set_by_type(self, value: Any) -> EntityBuilder[T]:
        """
        Set the only property whose type accepts value.

        Raise AmbiguousPropertyError if two or more properties, anywhere in
        the class hierarchy, match.
        """
        value = _built(value)
        result = self.find_property_for(value)
        if isinstance(result, NoMatch):
            raise NoMatchingPropertyError(type(self.entity), result.value_type)
        if isinstance(result, AmbiguousMatch):
            raise AmbiguousPropertyError(type(self.entity), type(value), result.candidates)
        result.property.set(self.entity, value)
        return self

    def with_(self, *args: Any) -> EntityBuilder[T]:
        """with_(value) is set_by_type(), with_(name, value) is set_by_name()."""
        if len(args) == 1:
            return self.set_by_type(args[0])
        if len(args) == 2:
            return self.set_by_name(*args)
        raise TypeError("with_() takes a value or a name and a value, got %s arguments" % len(args))

    def in_(self, value: Any) -> EntityBuilder[T]:
        return self.set_by_type(value)

    def belonging_to(self, value: Any) -> EntityBuilder[T]:
        return self.set_by_type(value)

    def of_type(self, value: Any) -> EntityBuilder[T]:
        return self.set_by_type(value)


def generated(entity_class: type[T], synthesizer: ValueSynthesizer | None = None) -> EntityBuilder[T]:
    """Shortcut for EntityBuilder.for_type()."""
    return EntityBuilder.for_type(entity_class, synthesizer)
