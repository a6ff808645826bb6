from specimen.builder import AmbiguousMatch, EntityBuilder, Match, NoMatch, generated
from specimen.config import ConfigError, SpecimenConfig
from specimen.errors import (
    AmbiguousPropertyError,
    InstantiationError,
    NoMatchingPropertyError,
    NoSuchPropertyError,
    PropertyResolutionError,
    ResourceCreationError,
    SpecimenError,
    UnsupportedTypeError,
)
from specimen.markers import Marker, SampleValue, Transient, constructor, mark
from specimen.operations import OperationDescriptor, OperationEnumerator, enumerate_operations
from specimen.state import DEFAULT_STATE, SynthesisState, reset_counter, shared_state
from specimen.synthesizer import NOTHING, ValueSynthesizer
from specimen.version import VERSION
