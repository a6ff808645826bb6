"""
Type introspection used by the synthesis engine.

The engine never calls typing or inspect directly: it asks a TypeIntrospector
for properties, constructors and operations. ClassIntrospector implements it
for plain classes, dataclasses and slotted classes using class annotations.

PropertyHandle.set() is the only place where normal attribute assignment is
bypassed (frozen dataclasses, __setattr__ overrides).
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, ClassVar, Final, get_args, get_origin, get_type_hints

from specimen.markers import is_constructor, markers_of


def unwrap_annotation(annotation: Any) -> tuple[Any, tuple, bool, bool]:
    """
    Strip Annotated, ClassVar and Final wrappers.

    Return (type, metadata, is_static, is_constant).

    >>> unwrap_annotation(Annotated[int, "meta"])
    (<class 'int'>, ('meta',), False, False)
    >>> unwrap_annotation(ClassVar[int])
    (<class 'int'>, (), True, False)
    >>> unwrap_annotation(Final[str])
    (<class 'str'>, (), False, True)
    """
    metadata: list[Any] = []
    is_static = is_constant = False
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            metadata.extend(annotation.__metadata__)
            annotation = annotation.__origin__
        elif origin is ClassVar or annotation is ClassVar:
            is_static = True
            args = get_args(annotation)
            annotation = args[0] if args else Any
        elif origin is Final or annotation is Final:
            is_constant = True
            args = get_args(annotation)
            annotation = args[0] if args else Any
        else:
            break
    return annotation, tuple(metadata), is_static, is_constant


@dataclass(frozen=True)
class PropertyHandle:
    name: str
    owner: type
    type: Any
    metadata: tuple = ()
    is_static: bool = False
    is_constant: bool = False

    @property
    def qualname(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"

    def get(self, instance: Any) -> Any:
        return getattr(instance, self.name, None)

    def set(self, instance: Any, value: Any) -> None:
        object.__setattr__(instance, self.name, value)


@dataclass(frozen=True)
class Parameter:
    name: str
    type: Any
    metadata: tuple = ()
    keyword_only: bool = False
    annotated: bool = True


@dataclass(frozen=True)
class ConstructorInfo:
    name: str
    factory: Callable[..., Any]
    parameters: tuple[Parameter, ...] = ()

    def invoke(self, arguments: list[Any]) -> Any:
        args = []
        kwargs = {}
        for parameter, value in zip(self.parameters, arguments):
            if parameter.keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)
        return self.factory(*args, **kwargs)


@dataclass(frozen=True)
class OperationInfo:
    name: str
    function: Callable[..., Any]
    parameters: tuple[Parameter, ...] = ()
    markers: tuple = field(default=())

    @property
    def is_private(self) -> bool:
        return self.name.startswith("_")


class TypeIntrospector:
    """
    Capability consumed by the synthesizer, the builder and the operation
    enumerator. Subclass it to support another object model.
    """

    def ancestors(self, cls: type) -> list[type]:
        """(Abstract method) The class followed by its base classes."""
        raise NotImplementedError()

    def properties(self, cls: type) -> list[PropertyHandle]:
        """(Abstract method) Properties declared by cls itself (not inherited)."""
        raise NotImplementedError()

    def constructors(self, cls: type) -> list[ConstructorInfo]:
        """(Abstract method) Constructors of cls in declaration order."""
        raise NotImplementedError()

    def operations(self, cls: type) -> list[OperationInfo]:
        """(Abstract method) Operations declared by cls in declaration order."""
        raise NotImplementedError()

    def is_abstract(self, cls: type) -> bool:
        return False


class ClassIntrospector(TypeIntrospector):
    def ancestors(self, cls: type) -> list[type]:
        return [klass for klass in cls.__mro__ if klass is not object]

    def _class_hints(self, cls: type) -> dict[str, Any]:
        return get_type_hints(cls, include_extras=True)

    def _function_hints(self, func: Callable, owner: type) -> dict[str, Any]:
        try:
            return get_type_hints(func, include_extras=True)
        except (NameError, TypeError):
            # Generated __init__ (dataclasses) with postponed annotations
            return self._class_hints(owner)

    def properties(self, cls: type) -> list[PropertyHandle]:
        own = inspect.get_annotations(cls)
        if not own:
            return []
        hints = self._class_hints(cls)
        handles = []
        for name in own:
            annotation, metadata, is_static, is_constant = unwrap_annotation(hints[name])
            handles.append(
                PropertyHandle(name, cls, annotation, metadata, is_static, is_constant)
            )
        return handles

    def _parameters(
        self, signature: inspect.Signature, hints: dict[str, Any], skip_first: bool
    ) -> tuple[Parameter, ...]:
        parameters = []
        items = list(signature.parameters.values())
        if skip_first:
            items = items[1:]
        for param in items:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.default is not param.empty:
                continue
            annotated = param.name in hints
            annotation, metadata, _, _ = unwrap_annotation(hints.get(param.name, Any))
            parameters.append(
                Parameter(
                    param.name,
                    annotation,
                    metadata,
                    keyword_only=param.kind == param.KEYWORD_ONLY,
                    annotated=annotated,
                )
            )
        return tuple(parameters)

    def constructors(self, cls: type) -> list[ConstructorInfo]:
        if cls.__init__ is object.__init__:
            parameters: tuple[Parameter, ...] = ()
        else:
            init = cls.__init__
            parameters = self._parameters(
                inspect.signature(init), self._function_hints(init, cls), skip_first=True
            )
        constructors = [ConstructorInfo("__init__", cls, parameters)]

        for name, value in vars(cls).items():
            if not (isinstance(value, classmethod) and is_constructor(value)):
                continue
            bound = getattr(cls, name)
            parameters = self._parameters(
                inspect.signature(bound),
                self._function_hints(value.__func__, cls),
                skip_first=False,
            )
            constructors.append(ConstructorInfo(name, bound, parameters))
        return constructors

    def operations(self, cls: type) -> list[OperationInfo]:
        operations = []
        for name, value in vars(cls).items():
            if isinstance(value, staticmethod):
                function = value.__func__
                skip_first = False
            elif isinstance(value, classmethod):
                function = value.__func__
                skip_first = True
            elif inspect.isfunction(value):
                function = value
                skip_first = True
            else:
                continue
            parameters = self._parameters(
                inspect.signature(function), self._function_hints(function, cls), skip_first
            )
            operations.append(
                OperationInfo(name, getattr(cls, name), parameters, markers_of(value))
            )
        return operations

    def is_abstract(self, cls: type) -> bool:
        return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))
