"""
This module defines the two attribute set revisions using Pydantic.

`AttributesV03` and `AttributesV10` are independent models that both satisfy
the reader, writer, converter and serialization protocols in `protocols.py`.
They differ only in the `schemaurl`/`dataschema` rename and in how `source`
and the schema reference are stored: parsed URIs in 0.3, opaque strings in
1.0.

Sets are mutated through their writer methods. While an iterator over a set
is live, any mutation raises `AttributesBorrowedError`.
"""
import logging
import socket
import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Iterator, Optional, Tuple

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator

from .errors import AttributeValueConversionError, AttributesBorrowedError
from .message import apply_attribute, as_str, drive_visitor, to_time, to_uri
from .protocols import V
from .values import (
    MESSAGE_VALUE_TYPES,
    AttributeValue,
    MessageAttributeValue,
    MessageString,
    MessageTime,
    MessageURI,
    MessageURIRef,
    SpecVersion,
    SpecVersionValue,
    StringValue,
    TimeValue,
    URIRefValue,
    ensure_utc,
    parse_uri,
)

NonEmptyStr = Annotated[str, Field(min_length=1)]

V03_DEFAULT_TYPE = "type"
V10_DEFAULT_TYPE = "python.generated"
LOCALHOST = "http://localhost/"


def default_hostname() -> AnyUrl:
    """`http://<hostname>` for this machine, or `http://localhost/`."""
    try:
        return parse_uri(f"http://{socket.gethostname()}")
    except (OSError, AttributeValueConversionError) as e:
        logging.debug(f"Falling back to {LOCALHOST} as default source: {e}")
        return parse_uri(LOCALHOST)


def default_hostname_str() -> str:
    # Kept URI-shaped so that a default 1.0 set converts to 0.3.
    return str(default_hostname())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _text(value: Any) -> Any:
    if isinstance(value, MESSAGE_VALUE_TYPES):
        return value.as_str()
    if isinstance(value, AnyUrl):
        return str(value)
    return value


def _uri(value: Any) -> Any:
    if isinstance(value, MESSAGE_VALUE_TYPES):
        return value.to_uri()
    if isinstance(value, str):
        return parse_uri(value)
    return value


def _time(value: Any) -> Any:
    if isinstance(value, MESSAGE_VALUE_TYPES):
        return value.to_time()
    return value


def _optional(convert, value):
    return None if value is None else convert(value)


def _check_not_borrowed(attributes: BaseModel, name: str) -> None:
    if not name.startswith("_") and getattr(attributes, "_borrows", 0):
        raise AttributesBorrowedError(
            f"Cannot set {name!r} while the attributes are being iterated"
        )


def _assign(attributes: BaseModel, field: str, value: Any) -> None:
    try:
        setattr(attributes, field, value)
    except ValidationError as e:
        raise AttributeValueConversionError(field, value, e.errors()[0]["msg"]) from e


def _same_fields(attributes: BaseModel, other: Any) -> bool:
    # The borrow count is not part of a set's value.
    if type(attributes) is not type(other):
        return NotImplemented
    return attributes.__dict__ == other.__dict__


def _released(copied: BaseModel) -> BaseModel:
    copied._borrows = 0
    return copied


class AttributesIterator:
    """
    Yields `(name, AttributeValue)` pairs of a set in the revision's fixed
    order, skipping absent optional attributes. The set is borrowed from
    creation until the iterator is exhausted or closed.
    """

    def __init__(self, attributes: "AttributesV03 | AttributesV10"):
        self._closed = True
        self._attributes = attributes
        self._names = attributes.get_specversion().attribute_names
        self._index = 0
        attributes._borrows += 1
        self._closed = False

    def __iter__(self) -> "AttributesIterator":
        return self

    def __next__(self) -> Tuple[str, AttributeValue]:
        while not self._closed and self._index < len(self._names):
            name = self._names[self._index]
            self._index += 1
            value = self._attributes._attribute_value(name)
            if value is not None:
                return name, value
        self.close()
        raise StopIteration

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._attributes._borrows -= 1

    def __enter__(self) -> "AttributesIterator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self):
        self.close()


class AttributesV03(BaseModel):
    """Context attributes of specversion 0.3."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: NonEmptyStr = Field(default_factory=_new_id)
    type: NonEmptyStr = V03_DEFAULT_TYPE
    source: AnyUrl = Field(default_factory=default_hostname)
    datacontenttype: Optional[str] = None
    schemaurl: Optional[AnyUrl] = None
    subject: Optional[str] = None
    time: Optional[datetime] = Field(default_factory=_now)

    _borrows: int = PrivateAttr(default=0)

    @field_validator("time")
    @classmethod
    def _time_to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else ensure_utc(v)

    def __setattr__(self, name: str, value: Any) -> None:
        _check_not_borrowed(self, name)
        super().__setattr__(name, value)

    def _assign(self, field: str, value: Any) -> None:
        _assign(self, field, value)

    def __eq__(self, other: Any) -> bool:
        return _same_fields(self, other)

    def __copy__(self):
        return _released(super().__copy__())

    def __deepcopy__(self, memo=None):
        return _released(super().__deepcopy__(memo))

    # Reader

    def get_id(self) -> str:
        return self.id

    def get_type(self) -> str:
        return self.type

    def get_source(self) -> AnyUrl:
        return self.source

    def get_specversion(self) -> SpecVersion:
        return SpecVersion.V03

    def get_datacontenttype(self) -> Optional[str]:
        return self.datacontenttype

    def get_dataschema(self) -> Optional[AnyUrl]:
        return self.schemaurl

    def get_subject(self) -> Optional[str]:
        return self.subject

    def get_time(self) -> Optional[datetime]:
        return self.time

    # Writer

    def set_id(self, id: Any) -> None:
        self._assign("id", _text(id))

    def set_source(self, source: Any) -> None:
        self._assign("source", _uri(source))

    def set_type(self, type: Any) -> None:
        self._assign("type", _text(type))

    def set_subject(self, subject: Optional[Any]) -> None:
        self._assign("subject", _optional(_text, subject))

    def set_time(self, time: Optional[Any]) -> None:
        self._assign("time", _optional(_time, time))

    def set_datacontenttype(self, datacontenttype: Optional[Any]) -> None:
        self._assign("datacontenttype", _optional(_text, datacontenttype))

    def set_dataschema(self, dataschema: Optional[Any]) -> None:
        self._assign("schemaurl", _optional(_uri, dataschema))

    # Iteration

    def __iter__(self) -> Iterator[Tuple[str, AttributeValue]]:
        return AttributesIterator(self)

    def names(self) -> Iterator[str]:
        """Names of the attributes present, in iteration order."""
        with AttributesIterator(self) as it:
            for name, _ in it:
                yield name

    def _attribute_value(self, name: str) -> Optional[AttributeValue]:
        if name == "specversion":
            return SpecVersionValue(value=SpecVersion.V03)
        if name in ("id", "type", "datacontenttype", "subject"):
            value = getattr(self, name)
            return None if value is None else StringValue(value=value)
        if name == "source":
            return URIRefValue(value=self.source)
        if name == "schemaurl":
            return None if self.schemaurl is None else URIRefValue(value=self.schemaurl)
        if name == "time":
            return None if self.time is None else TimeValue(value=self.time)
        return None

    # Conversion

    def into_v03(self) -> "AttributesV03":
        return self

    def into_v10(self) -> "AttributesV10":
        return AttributesV10(
            id=self.id,
            type=self.type,
            source=str(self.source),
            datacontenttype=self.datacontenttype,
            dataschema=_optional(str, self.schemaurl),
            subject=self.subject,
            time=self.time,
        )

    # Serialization

    def _message_pairs(self) -> Iterator[Tuple[str, MessageAttributeValue]]:
        yield "id", MessageString(value=self.id)
        yield "type", MessageString(value=self.type)
        yield "source", MessageURIRef(value=self.source)
        if self.datacontenttype is not None:
            yield "datacontenttype", MessageString(value=self.datacontenttype)
        if self.schemaurl is not None:
            yield "schemaurl", MessageURI(value=self.schemaurl)
        if self.subject is not None:
            yield "subject", MessageString(value=self.subject)
        if self.time is not None:
            yield "time", MessageTime(value=self.time)

    def deserialize_attributes(self, visitor: V) -> V:
        return drive_visitor(self._message_pairs(), visitor)

    def serialize_attribute(self, name: str, value: MessageAttributeValue) -> None:
        apply_attribute(self, V03_FIELDS, name, value)


class AttributesV10(BaseModel):
    """
    Context attributes of specversion 1.0.

    `source` and `dataschema` are kept as the strings they were given; they
    are only parsed as URIs when converting to 0.3.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: NonEmptyStr = Field(default_factory=_new_id)
    type: NonEmptyStr = V10_DEFAULT_TYPE
    source: NonEmptyStr = Field(default_factory=default_hostname_str)
    datacontenttype: Optional[str] = None
    dataschema: Optional[str] = None
    subject: Optional[str] = None
    time: Optional[datetime] = Field(default_factory=_now)

    _borrows: int = PrivateAttr(default=0)

    @field_validator("time")
    @classmethod
    def _time_to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return None if v is None else ensure_utc(v)

    def __setattr__(self, name: str, value: Any) -> None:
        _check_not_borrowed(self, name)
        super().__setattr__(name, value)

    def _assign(self, field: str, value: Any) -> None:
        _assign(self, field, value)

    def __eq__(self, other: Any) -> bool:
        return _same_fields(self, other)

    def __copy__(self):
        return _released(super().__copy__())

    def __deepcopy__(self, memo=None):
        return _released(super().__deepcopy__(memo))

    # Reader

    def get_id(self) -> str:
        return self.id

    def get_type(self) -> str:
        return self.type

    def get_source(self) -> str:
        return self.source

    def get_specversion(self) -> SpecVersion:
        return SpecVersion.V10

    def get_datacontenttype(self) -> Optional[str]:
        return self.datacontenttype

    def get_dataschema(self) -> Optional[str]:
        return self.dataschema

    def get_subject(self) -> Optional[str]:
        return self.subject

    def get_time(self) -> Optional[datetime]:
        return self.time

    # Writer

    def set_id(self, id: Any) -> None:
        self._assign("id", _text(id))

    def set_source(self, source: Any) -> None:
        self._assign("source", _text(source))

    def set_type(self, type: Any) -> None:
        self._assign("type", _text(type))

    def set_subject(self, subject: Optional[Any]) -> None:
        self._assign("subject", _optional(_text, subject))

    def set_time(self, time: Optional[Any]) -> None:
        self._assign("time", _optional(_time, time))

    def set_datacontenttype(self, datacontenttype: Optional[Any]) -> None:
        self._assign("datacontenttype", _optional(_text, datacontenttype))

    def set_dataschema(self, dataschema: Optional[Any]) -> None:
        self._assign("dataschema", _optional(_text, dataschema))

    # Iteration

    def __iter__(self) -> Iterator[Tuple[str, AttributeValue]]:
        return AttributesIterator(self)

    def names(self) -> Iterator[str]:
        """Names of the attributes present, in iteration order."""
        with AttributesIterator(self) as it:
            for name, _ in it:
                yield name

    def _attribute_value(self, name: str) -> Optional[AttributeValue]:
        if name == "specversion":
            return SpecVersionValue(value=SpecVersion.V10)
        if name == "time":
            return None if self.time is None else TimeValue(value=self.time)
        value = getattr(self, name, None)
        return None if value is None else StringValue(value=value)

    # Conversion

    def into_v03(self) -> AttributesV03:
        return AttributesV03(
            id=self.id,
            type=self.type,
            source=parse_uri(self.source),
            datacontenttype=self.datacontenttype,
            schemaurl=_optional(parse_uri, self.dataschema),
            subject=self.subject,
            time=self.time,
        )

    def into_v10(self) -> "AttributesV10":
        return self

    # Serialization

    def _message_pairs(self) -> Iterator[Tuple[str, MessageAttributeValue]]:
        yield "id", MessageString(value=self.id)
        yield "type", MessageString(value=self.type)
        yield "source", MessageString(value=self.source)
        if self.datacontenttype is not None:
            yield "datacontenttype", MessageString(value=self.datacontenttype)
        if self.dataschema is not None:
            yield "dataschema", MessageString(value=self.dataschema)
        if self.subject is not None:
            yield "subject", MessageString(value=self.subject)
        if self.time is not None:
            yield "time", MessageTime(value=self.time)

    def deserialize_attributes(self, visitor: V) -> V:
        return drive_visitor(self._message_pairs(), visitor)

    def serialize_attribute(self, name: str, value: MessageAttributeValue) -> None:
        apply_attribute(self, V10_FIELDS, name, value)


V03_FIELDS = {
    "id": ("id", as_str),
    "type": ("type", as_str),
    "source": ("source", to_uri),
    "datacontenttype": ("datacontenttype", as_str),
    "schemaurl": ("schemaurl", to_uri),
    "subject": ("subject", as_str),
    "time": ("time", to_time),
}

V10_FIELDS = {
    "id": ("id", as_str),
    "type": ("type", as_str),
    "source": ("source", as_str),
    "datacontenttype": ("datacontenttype", as_str),
    "dataschema": ("dataschema", as_str),
    "subject": ("subject", as_str),
    "time": ("time", to_time),
}
