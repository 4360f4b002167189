"""
This module defines the protocols shared by every attribute set revision.

Callers that need to stay revision-agnostic program against these protocols,
never against `AttributesV03` or `AttributesV10` directly. The concrete sets
satisfy them structurally; adding a revision means adding a class that does
the same, without touching existing call sites.

The serialization protocols decouple the sets from any wire format: an
encoder implements `BinarySerializer` and lets the set drive it, a decoder
pushes attributes into a fresh set through `AttributesSerializer`.
"""
from datetime import datetime
from typing import Any, Iterator, Optional, Protocol, Tuple, TypeVar

from .values import AttributeValue, MessageAttributeValue, SpecVersion

V = TypeVar("V", bound="BinarySerializer")


class AttributesReader(Protocol):
    def get_id(self) -> str:
        ...

    def get_type(self) -> str:
        ...

    def get_source(self) -> Any:
        """The event source; an `AnyUrl` in 0.3, a plain string in 1.0."""
        ...

    def get_specversion(self) -> SpecVersion:
        ...

    def get_datacontenttype(self) -> Optional[str]:
        ...

    def get_dataschema(self) -> Optional[Any]:
        """`schemaurl` in 0.3, `dataschema` in 1.0."""
        ...

    def get_subject(self) -> Optional[str]:
        ...

    def get_time(self) -> Optional[datetime]:
        ...

    def __iter__(self) -> Iterator[Tuple[str, AttributeValue]]:
        ...


class AttributesWriter(Protocol):
    def set_id(self, id: Any) -> None:
        ...

    def set_source(self, source: Any) -> None:
        ...

    def set_type(self, type: Any) -> None:
        ...

    def set_subject(self, subject: Optional[Any]) -> None:
        ...

    def set_time(self, time: Optional[Any]) -> None:
        ...


class DataAttributesWriter(Protocol):
    """
    Writers for the attributes describing the event payload. Kept apart from
    `AttributesWriter` because not every producer needs to touch them.
    """

    def set_datacontenttype(self, datacontenttype: Optional[Any]) -> None:
        ...

    def set_dataschema(self, dataschema: Optional[Any]) -> None:
        ...


class AttributesConverter(Protocol):
    def get_specversion(self) -> SpecVersion:
        ...

    def into_v03(self) -> "AttributesReader":
        ...

    def into_v10(self) -> "AttributesReader":
        ...


class BinarySerializer(Protocol):
    """
    The visitor an encoder supplies. `set_attribute` returns the visitor to
    use for the next attribute, which may be `self` or a new object.
    """

    def set_attribute(self: V, name: str, value: MessageAttributeValue) -> V:
        ...


class AttributesDeserializer(Protocol):
    def deserialize_attributes(self, visitor: V) -> V:
        ...


class AttributesSerializer(Protocol):
    def serialize_attribute(self, name: str, value: MessageAttributeValue) -> None:
        ...
