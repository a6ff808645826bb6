"""
Value Synthesizer

This module provides the ValueSynthesizer class which maps a type to a
concrete, deterministic value. It is the leaf of the engine: entities, nested
objects and operation arguments are all built from values it produces.

Resolution order, first match wins:

 1. scalar kinds (text, UUID, instants, booleans, bytes, integers, floats)
 2. file-like placeholder (a temporary file deleted at exit)
 3. enumerated constants (Enum and Literal), cycled per type
 4. list-like collections, always a fresh empty list
 5. ignorable types (mappings, other collections, abstract types): NOTHING
 6. composite classes, instantiated and populated by specimen.builder

Scalar values are unique within a counter epoch: every scalar synthesis
except booleans consumes one tick of the shared counter.
"""

from __future__ import annotations

import atexit
import collections.abc
import datetime
import enum
import logging
import os
import pathlib
import tempfile
import types
import uuid
from decimal import Decimal
from logging import DEBUG
from typing import Annotated, Any, Callable, Literal, NewType, TypeVar, Union, get_args, get_origin

import numpy
from ptrace.error import writeError

from specimen.config import SpecimenConfig
from specimen.errors import ResourceCreationError, UnsupportedTypeError
from specimen.filter_config import create_filter_manager
from specimen.introspection import ClassIntrospector, TypeIntrospector
from specimen.markers import Transient
from specimen.plugin_manager import get_plugin_manager
from specimen.state import SynthesisState, shared_state

logger = logging.getLogger(__name__)


class _Nothing:
    """Result for types that are left as the class initialized them."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOTHING"


NOTHING = _Nothing()

# 8-bit kinds restart the counter at 1 instead of overflowing
WRAPPING_INTEGER_KINDS = {
    numpy.int8: int(numpy.iinfo(numpy.int8).max),
    numpy.uint8: int(numpy.iinfo(numpy.uint8).max),
}
INTEGER_KINDS = (
    int,
    numpy.int16,
    numpy.int32,
    numpy.int64,
    numpy.uint16,
    numpy.uint32,
    numpy.uint64,
)
FLOAT_KINDS = (float, numpy.float16, numpy.float32, numpy.float64)
PATH_KINDS = (pathlib.Path, pathlib.PurePath, os.PathLike)
LIST_ORIGINS = (list, collections.abc.Sequence, collections.abc.MutableSequence)
UNION_ORIGINS = (Union, types.UnionType)
# Subclasses of these are built from the base value: Name(str) -> Name("sampleValue1")
SCALAR_BASES = (str, bytes, bytearray, int, float, Decimal)
# Only explicit bases count: a class with __iter__ and __len__ is still composite
IGNORED_BASES = (
    dict,
    set,
    frozenset,
    tuple,
    collections.deque,
    collections.abc.Mapping,
    collections.abc.Collection,
    collections.abc.Iterable,
)

Rule = Callable[["ValueSynthesizer"], Any]


def _remove_file(filename: str) -> None:
    try:
        os.unlink(filename)
    except OSError:
        pass


class ValueSynthesizer:
    """Produces a value for any supported type."""

    def __init__(
        self,
        state: SynthesisState | None = None,
        config: SpecimenConfig | None = None,
        introspector: TypeIntrospector | None = None,
        exclusion_markers: tuple = (Transient,),
        filter_manager=None,
        plugin_manager=None,
    ):
        """
        Initialize the ValueSynthesizer.

        Args:
            state: Counter state, by default the process-wide state shared by
                every synthesizer with the same counter_start.
            config: Prefixes and temporary file names.
            introspector: Type introspection provider.
            exclusion_markers: Property markers skipped during population.
            filter_manager: FilterManager for property names, by default the
                one described by config (if any).
            plugin_manager: PluginManager contributing value rules, by default
                the global one.
        """
        self.config = config if config is not None else SpecimenConfig()
        if state is None:
            state = shared_state(self.config.synthesis_counter_start)
        self.state = state
        self.introspector = introspector if introspector is not None else ClassIntrospector()
        self.exclusion_markers = tuple(exclusion_markers)
        if filter_manager is None:
            filter_manager = create_filter_manager(self.config)
        self.filter_manager = filter_manager
        if plugin_manager is None:
            plugin_manager = get_plugin_manager()
        self.rules: dict[Any, Rule] = plugin_manager.get_value_rules()

        self.scalar_generators: dict[Any, Callable[[Any], Any]] = {
            str: self.genText,
            uuid.UUID: self.genUUID,
            datetime.datetime: self.genInstant,
            datetime.date: self.genInstant,
            datetime.time: self.genInstant,
            bool: self.genBool,
            numpy.bool_: self.genBool,
            bytes: self.genBytes,
            bytearray: self.genBytes,
            Decimal: self.genDecimal,
        }
        for kind in WRAPPING_INTEGER_KINDS:
            self.scalar_generators[kind] = self.genWrappingInteger
        for kind in INTEGER_KINDS:
            self.scalar_generators[kind] = self.genInteger
        for kind in FLOAT_KINDS:
            self.scalar_generators[kind] = self.genFloat

    def register_rule(self, tp: Any, rule: Rule) -> None:
        """Use rule(synthesizer) for tp before any built-in rule."""
        self.rules[tp] = rule

    def resolve(self, tp: Any) -> Any:
        """
        Strip wrappers which don't change the value to synthesize.

        >>> synthesizer = ValueSynthesizer()
        >>> synthesizer.resolve(Annotated[int, "doc"])
        <class 'int'>
        >>> synthesizer.resolve(str | None)
        <class 'str'>
        """
        while True:
            origin = get_origin(tp)
            if origin is Annotated:
                tp = tp.__origin__
            elif origin in UNION_ORIGINS:
                members = [arg for arg in get_args(tp) if arg is not type(None)]
                if not members:
                    return type(None)
                tp = members[0]
            elif isinstance(tp, NewType):
                tp = tp.__supertype__
            else:
                return tp

    def _lookup(self, table: dict, tp: Any) -> Any:
        try:
            return table.get(tp)
        except TypeError:
            # unhashable typing construct
            return None

    def synthesize(self, tp: Any) -> Any:
        """Return a value for tp, or NOTHING if tp should be left untouched."""
        tp = self.resolve(tp)

        rule = self._lookup(self.rules, tp)
        if rule is not None:
            return rule(self)

        generator = self._lookup(self.scalar_generators, tp)
        if generator is not None:
            return generator(tp)

        if tp in PATH_KINDS:
            return self.genTemporaryFile()

        if self.isEnumerated(tp):
            return self.genEnumerated(tp)

        base = self.scalarBase(tp)
        if base is not None:
            return tp(self.scalar_generators[base](base))

        if self.isListLike(tp):
            return self.genList(tp)

        if self.isIgnorable(tp):
            return NOTHING

        if self.isComposite(tp):
            # generic aliases are built as their raw class
            return self.genEntity(get_origin(tp) or tp)

        raise UnsupportedTypeError(tp)

    # --- Scalar kinds ---

    def genText(self, tp: Any) -> str:
        # Keep it short, some database columns restrict string size
        return "%s%s" % (self.config.synthesis_text_prefix, self.state.next_count())

    def genUUID(self, tp: Any) -> uuid.UUID:
        return uuid.uuid4()

    def genInstant(self, tp: Any) -> Any:
        now = datetime.datetime.now()
        if tp is datetime.date:
            return now.date()
        if tp is datetime.time:
            return now.time()
        return now

    def genBool(self, tp: Any) -> bool:
        return True

    def genBytes(self, tp: Any) -> bytes | bytearray:
        text = "%s %s" % (self.config.synthesis_bytes_prefix, self.state.next_count())
        return tp(text.encode("utf-8"))

    def genWrappingInteger(self, tp: Any) -> Any:
        self.state.wrap_counter(WRAPPING_INTEGER_KINDS[tp])
        return tp(self.state.next_count())

    def genInteger(self, tp: Any) -> Any:
        count = self.state.next_count()
        if tp is int:
            return count
        # C cast: truncated to the kind's width, never an OverflowError
        return numpy.int64(count).astype(tp)

    def genFloat(self, tp: Any) -> Any:
        return tp(self.state.next_count())

    def genDecimal(self, tp: Any) -> Decimal:
        return Decimal(self.state.next_count())

    # --- Placeholders, constants and containers ---

    def genTemporaryFile(self) -> pathlib.Path:
        prefix = self.config.tempfile_prefix
        try:
            fd, filename = tempfile.mkstemp(prefix=prefix, suffix=self.config.tempfile_suffix)
        except OSError as err:
            writeError(logger, err, "Failed to create temp file %s" % prefix, log_level=DEBUG)
            raise ResourceCreationError("Failed to create temp file %s" % prefix) from err
        os.close(fd)
        atexit.register(_remove_file, filename)
        logger.debug("Created temporary file %s", filename)
        return pathlib.Path(filename)

    def scalarBase(self, tp: Any) -> Any:
        if not isinstance(tp, type) or issubclass(tp, numpy.generic):
            return None
        for base in tp.__mro__[1:]:
            if base in SCALAR_BASES:
                return base
        return None

    def runtimeClass(self, tp: Any) -> type | None:
        """
        Get the class that instances of tp are checked against, or None when
        isinstance() can't be used with tp.

        >>> synthesizer = ValueSynthesizer()
        >>> synthesizer.runtimeClass(list[str] | None)
        <class 'list'>
        >>> synthesizer.runtimeClass(Any) is None
        True
        """
        tp = self.resolve(tp)
        tp = get_origin(tp) or tp
        if not isinstance(tp, type) or tp is Any:
            return None
        if getattr(tp, "_is_protocol", False) and not getattr(tp, "_is_runtime_protocol", False):
            return None
        return tp

    def isEnumerated(self, tp: Any) -> bool:
        if get_origin(tp) is Literal:
            return True
        return isinstance(tp, type) and issubclass(tp, enum.Enum)

    def genEnumerated(self, tp: Any) -> Any:
        if get_origin(tp) is Literal:
            constants = get_args(tp)
        else:
            constants = list(tp)
        if not constants:
            raise UnsupportedTypeError(tp)
        index = self.state.next_enum_index(tp, len(constants))
        return constants[index]

    def isListLike(self, tp: Any) -> bool:
        origin = get_origin(tp) or tp
        if origin in LIST_ORIGINS:
            return True
        return isinstance(origin, type) and issubclass(origin, list)

    def genList(self, tp: Any) -> list:
        origin = get_origin(tp) or tp
        if isinstance(origin, type) and issubclass(origin, list):
            return origin()
        return []

    def isIgnorable(self, tp: Any) -> bool:
        if tp is Any or isinstance(tp, TypeVar):
            return True
        origin = get_origin(tp) or tp
        if origin is collections.abc.Callable:
            return True
        if not isinstance(origin, type):
            return False
        if any(base in IGNORED_BASES for base in origin.__mro__):
            return True
        return self.introspector.is_abstract(origin)

    def isComposite(self, tp: Any) -> bool:
        tp = get_origin(tp) or tp
        if not isinstance(tp, type):
            return False
        if tp.__module__ == "builtins":
            return False
        return not issubclass(tp, numpy.generic)

    def genEntity(self, cls: type) -> Any:
        from specimen.builder import instantiate, populate

        return populate(instantiate(cls, self), self)
