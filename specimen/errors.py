"""
Errors raised while synthesizing values, building entities and resolving
property overrides.

Every error surfaces synchronously to the caller. Nothing is retried.
"""

from ptrace.error import formatError


class SpecimenError(Exception):
    """Base class of all specimen errors."""


class UnsupportedTypeError(SpecimenError):
    """No synthesis rule matches a primitive/scalar kind."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__("Could not synthesize a value for type %s" % typeName(kind))


class ResourceCreationError(SpecimenError):
    """A temporary placeholder artifact could not be created."""


class InstantiationError(SpecimenError):
    """Invoking the selected constructor failed."""

    def __init__(self, cls, cause):
        self.cls = cls
        self.cause = cause
        super().__init__("Error instantiating %s: %s" % (typeName(cls), formatError(cause)))


class PropertyResolutionError(SpecimenError):
    """An override could not be mapped to exactly one property."""


class NoSuchPropertyError(PropertyResolutionError):
    def __init__(self, cls, name):
        self.cls = cls
        self.name = name
        super().__init__("No property %s in class %s" % (name, typeName(cls)))


class NoMatchingPropertyError(PropertyResolutionError):
    def __init__(self, cls, value_type):
        self.cls = cls
        self.value_type = value_type
        super().__init__(
            "No property matching type %s in class %s"
            % (typeName(value_type), typeName(cls))
        )


class AmbiguousPropertyError(PropertyResolutionError):
    def __init__(self, cls, value_type, candidates):
        self.cls = cls
        self.value_type = value_type
        self.candidates = tuple(candidates)
        first, second = self.candidates[:2]
        super().__init__(
            "Both %s and %s are of type %s, set_by_type() should only be used "
            "to set properties that have a unique type in class %s"
            % (first.qualname, second.qualname, typeName(value_type), typeName(cls))
        )


def typeName(tp):
    """
    >>> typeName(int)
    'int'
    >>> typeName("Forward")
    "'Forward'"
    """
    name = getattr(tp, "__qualname__", None)
    if isinstance(name, str):
        return name
    return repr(tp)
