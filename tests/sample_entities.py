"""
Sample classes used by the tests.

Annotations are evaluated eagerly here, like in most user code.
"""

import abc
import datetime
import enum
import pathlib
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, ClassVar, Final, Generic, Literal, Optional, Protocol, TypeVar, runtime_checkable

import numpy

from specimen import Marker, SampleValue, Transient, constructor, mark


class Status(enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class Empty(enum.Enum):
    pass


class RuntimeEntity:
    """Contains every kind the synthesizer can produce."""

    bool_value: bool
    byte_value: numpy.int8
    short_value: numpy.int16
    int_value: int
    long_value: numpy.int64
    double_value: float
    float_value: numpy.float32
    decimal_value: Decimal
    string1_value: str
    string2_value: str
    uuid_value: uuid.UUID
    dummy_uuid: Annotated[uuid.UUID, Transient]
    file_value: pathlib.Path
    byte_array_value: bytes
    date_value: datetime.date
    timestamp_value: datetime.datetime
    status: Status

    def unset_properties(self):
        return [
            name for name in RuntimeEntity.__annotations__
            if name != "dummy_uuid" and getattr(self, name, None) is None
        ]


class Record:
    name: str
    id: uuid.UUID
    status: Status


class BaseEntity:
    base_string_value: str
    created: datetime.datetime


class DerivedEntity(BaseEntity):
    name: str
    tags: list[str]


class Owner:
    name: str


class Pet:
    nickname: str
    owner: Owner


class AdoptedPet(Pet):
    previous_owner: Owner


class RenamedPet(Pet):
    # redeclared, still a single property
    owner: Owner


class Audited:
    id: uuid.UUID
    correlation_id: Annotated[uuid.UUID, Transient]
    label: Optional[str]


class WithCollections:
    items: list[str]
    missing: list[str]
    lookup: dict[str, int]
    unique: set[str]
    optional_tags: Optional[list[str]]

    def __init__(self):
        self.items = ["preset"]


class WithClassAttributes:
    registry: ClassVar[str] = "shared"
    KIND: Final[str] = "fixed"
    name: str


class Shape(abc.ABC):
    @abc.abstractmethod
    def area(self):
        pass


class Drawing:
    title: str
    shape: Shape


class Money:
    def __init__(self, amount: int, currency: Annotated[str, SampleValue("EUR")]):
        self.amount = amount
        self.currency = currency


class Endpoint:
    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port

    @classmethod
    @constructor
    def local(cls, port: int):
        return cls("localhost", port)


class Token:
    def __init__(self, value: str):
        self.value = value
        self.origin = "init"

    @constructor
    @classmethod
    def from_code(cls, code: int):
        token = cls(str(code))
        token.origin = "code"
        return token


class Exploding:
    def __init__(self):
        raise ValueError("boom")


class Untyped:
    def __init__(self, anything):
        self.anything = anything


@dataclass(frozen=True)
class FrozenPoint:
    x: int = 0
    y: int = 0
    label: str = ""


@dataclass
class Order:
    reference: str = ""
    quantity: int = 0
    status: Literal["new", "paid"] = "new"


class SkipInvocation(Marker):
    pass


class RestClient:
    def __init__(self, user="admin"):
        self.user = user

    def __repr__(self):
        return "RestClient(%s)" % self.user


class DummyOperations:
    @mark(SkipInvocation)
    def list_entities(self, client: RestClient) -> list:
        raise PermissionError("list_entities")

    def create_entity(self, client: RestClient, entity: Record):
        raise PermissionError("create_entity")

    def get_entity(self, client: RestClient):
        raise PermissionError("get_entity")

    def delete_entity(self, client: RestClient):
        raise PermissionError("delete_entity")

    def _helper(self, client: RestClient):
        pass


class Simple:
    def create(self, x: RestClient):
        return x

    def get(self):
        return "get"


class MixedOperations:
    label = "not an operation"

    def rename(self, name: str, count: int):
        pass

    def untyped(self, value, *args, option=None, **kwargs):
        pass

    @staticmethod
    def parse(text: str):
        return text

    @classmethod
    def default(cls, flag: bool):
        return cls()

    @mark(SkipInvocation)
    @staticmethod
    def skipped_static(text: str):
        pass


T = TypeVar("T")


class Page(Generic[T]):
    number: int


class Catalog:
    title: str
    page: Page[int]


class Project:
    """A domain object which happens to have a build() method."""

    name: str

    def build(self):
        return "built %s" % self.name


class Release:
    project: Project
    tag: str


class Name(str):
    pass


class Person:
    name: Name


class Printable(Protocol):
    def render(self) -> str:
        ...


@runtime_checkable
class Drawable(Protocol):
    def draw(self) -> str:
        ...


class Square:
    def render(self):
        return "square"

    def draw(self):
        return "square"


class Poster:
    layout: Printable
    caption: str


class Canvas:
    def show(self, layout: Printable):
        pass

    def paint(self, shape: Drawable):
        pass
