"""
Operation Enumerator

Lists the public operations of a class with a ready-to-use argument list,
in a shape suitable for data-driven tests:

    @pytest.mark.parametrize(
        "signature, operation, arguments",
        enumerate_operations(AdminOperations, (SkipInvocation,), rest_client),
    )
    def test_permission_denied(signature, operation, arguments):
        with pytest.raises(PermissionError):
            operation(admin_operations, *arguments)

Arguments are taken from the "real" values supplied by the caller when one
fits the parameter type, otherwise they are synthesized.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

from specimen.builder import EntityBuilder
from specimen.introspection import OperationInfo, Parameter
from specimen.markers import has_marker
from specimen.synthesizer import NOTHING, ValueSynthesizer

logger = logging.getLogger(__name__)


class OperationDescriptor(NamedTuple):
    signature: str
    operation: Callable[..., Any]
    arguments: tuple


class OperationEnumerator:
    def __init__(self, synthesizer: ValueSynthesizer | None = None, filter_manager=None):
        self.synthesizer = synthesizer if synthesizer is not None else ValueSynthesizer()
        if filter_manager is None:
            filter_manager = self.synthesizer.filter_manager
        self.filter_manager = filter_manager

    def _is_skipped(self, cls: type, operation: OperationInfo, exclusion_markers: tuple) -> bool:
        if exclusion_markers and has_marker(operation.markers, exclusion_markers):
            logger.debug("Skip marked operation %s.%s", cls.__qualname__, operation.name)
            return True
        if operation.is_private:
            return True
        if self.filter_manager is not None:
            qualname = f"{cls.__qualname__}.{operation.name}"
            if not self.filter_manager.is_allowed("operation", qualname, operation.name):
                logger.debug("Skip filtered operation %s", qualname)
                return True
        return False

    def argument_for(self, parameter: Parameter, real_values: tuple) -> Any:
        """Return the first real value fitting the parameter, else a synthesized one."""
        if not parameter.annotated:
            return None
        declared = self.synthesizer.runtimeClass(parameter.type)
        if declared is not None:
            for real_value in real_values:
                if isinstance(real_value, declared):
                    return real_value
        value = EntityBuilder.for_type(parameter.type, self.synthesizer).build()
        return None if value is NOTHING else value

    def enumerate(self, cls: type, exclusion_markers=(), *real_values: Any) -> list[OperationDescriptor]:
        exclusion_markers = tuple(exclusion_markers)
        descriptors = []
        for operation in self.synthesizer.introspector.operations(cls):
            if self._is_skipped(cls, operation, exclusion_markers):
                continue
            arguments = tuple(
                self.argument_for(parameter, real_values) for parameter in operation.parameters
            )
            signature = "%s(%s)" % (operation.name, ", ".join(str(argument) for argument in arguments))
            descriptors.append(OperationDescriptor(signature, operation.function, arguments))
        return descriptors


def enumerate_operations(
    cls: type,
    exclusion_markers=(),
    *real_values: Any,
    synthesizer: ValueSynthesizer | None = None,
    filter_manager=None,
) -> list[OperationDescriptor]:
    """
    Return one OperationDescriptor per public, non-excluded operation of cls,
    in declaration order.
    """
    enumerator = OperationEnumerator(synthesizer, filter_manager)
    return enumerator.enumerate(cls, exclusion_markers, *real_values)
