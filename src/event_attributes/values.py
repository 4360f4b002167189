"""
This module defines the value types exchanged with the attribute sets.

`AttributeValue` variants are read-only views produced while iterating an
attribute set. `MessageAttributeValue` variants are what an external encoder
hands to, or receives from, the serialization visitor protocol; converting
them to a concrete field type is fallible and raises
`AttributeValueConversionError`.
"""
import base64
import binascii
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Tuple, Union

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictBytes,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from .errors import AttributeValueConversionError, InvalidSpecVersion

_URL_ADAPTER = TypeAdapter(AnyUrl)
_DECIMAL = re.compile(r"-?[0-9]+")

V03_ATTRIBUTE_NAMES: Tuple[str, ...] = (
    "specversion",
    "id",
    "type",
    "source",
    "datacontenttype",
    "schemaurl",
    "subject",
    "time",
)

V10_ATTRIBUTE_NAMES: Tuple[str, ...] = (
    "specversion",
    "id",
    "type",
    "source",
    "datacontenttype",
    "dataschema",
    "subject",
    "time",
)


class SpecVersion(str, Enum):
    V03 = "0.3"
    V10 = "1.0"

    def __str__(self) -> str:
        return self.value

    @property
    def attribute_names(self) -> Tuple[str, ...]:
        """The wire names of this revision's attributes, in iteration order."""
        if self is SpecVersion.V03:
            return V03_ATTRIBUTE_NAMES
        return V10_ATTRIBUTE_NAMES

    @classmethod
    def parse(cls, value: str) -> "SpecVersion":
        try:
            return cls(value)
        except ValueError:
            raise InvalidSpecVersion(value) from None


def parse_uri(value: Any) -> AnyUrl:
    """Parses `value` as an absolute URI, normalizing it (`https://a.b` -> `https://a.b/`)."""
    if isinstance(value, AnyUrl):
        return value
    try:
        return _URL_ADAPTER.validate_python(str(value))
    except ValidationError as e:
        raise AttributeValueConversionError("URI", value, e.errors()[0]["msg"]) from e


def ensure_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_time(value: datetime) -> str:
    """RFC 3339 rendering, with `Z` for UTC."""
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def parse_time(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise AttributeValueConversionError("timestamp", value, str(e)) from e
    if parsed.tzinfo is None:
        raise AttributeValueConversionError("timestamp", value, "missing UTC offset")
    return ensure_utc(parsed)


# --- Read-oriented values ---------------------------------------------------


class _AttributeValueBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class StringValue(_AttributeValueBase):
    kind: Literal["string"] = "string"
    value: str

    def to_message(self) -> "MessageAttributeValue":
        return MessageString(value=self.value)


class URIRefValue(_AttributeValueBase):
    kind: Literal["uriref"] = "uriref"
    value: AnyUrl

    def to_message(self) -> "MessageAttributeValue":
        return MessageURIRef(value=self.value)


class TimeValue(_AttributeValueBase):
    kind: Literal["time"] = "time"
    value: datetime

    def __str__(self) -> str:
        return format_time(self.value)

    def to_message(self) -> "MessageAttributeValue":
        return MessageTime(value=self.value)


class SpecVersionValue(_AttributeValueBase):
    kind: Literal["specversion"] = "specversion"
    value: SpecVersion

    def to_message(self) -> "MessageAttributeValue":
        return MessageString(value=self.value.value)


AttributeValue = Annotated[
    Union[StringValue, URIRefValue, TimeValue, SpecVersionValue],
    Field(discriminator="kind"),
]


# --- Write-oriented values --------------------------------------------------


class _MessageValueBase(BaseModel):
    """
    Shared conversions. Every variant can be rendered as text; the other
    targets fall back to parsing that text, so a string carrying a valid URI,
    timestamp, boolean or integer converts like the typed variant would.
    """

    model_config = ConfigDict(frozen=True)

    def as_str(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        return self.as_str()

    def to_uri(self) -> AnyUrl:
        return parse_uri(self.as_str())

    def to_time(self) -> datetime:
        return parse_time(self.as_str())

    def to_bool(self) -> bool:
        text = self.as_str()
        if text == "true":
            return True
        if text == "false":
            return False
        raise AttributeValueConversionError("boolean", self.value)

    def to_int(self) -> int:
        text = self.as_str()
        if not _DECIMAL.fullmatch(text):
            raise AttributeValueConversionError("integer", self.value, "not a decimal integer")
        return int(text)

    def to_bytes(self) -> bytes:
        raise AttributeValueConversionError("binary", self.value)


class MessageString(_MessageValueBase):
    kind: Literal["string"] = "string"
    value: StrictStr

    def to_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.value, validate=True)
        except binascii.Error as e:
            raise AttributeValueConversionError("binary", self.value, str(e)) from e


class MessageURI(_MessageValueBase):
    kind: Literal["uri"] = "uri"
    value: AnyUrl

    def to_uri(self) -> AnyUrl:
        return self.value


class MessageURIRef(_MessageValueBase):
    kind: Literal["uriref"] = "uriref"
    value: AnyUrl

    def to_uri(self) -> AnyUrl:
        return self.value


class MessageTime(_MessageValueBase):
    kind: Literal["time"] = "time"
    value: datetime

    @field_validator("value")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def as_str(self) -> str:
        return format_time(self.value)

    def to_time(self) -> datetime:
        return self.value


class MessageBoolean(_MessageValueBase):
    kind: Literal["boolean"] = "boolean"
    value: StrictBool

    def as_str(self) -> str:
        return "true" if self.value else "false"

    def to_bool(self) -> bool:
        return self.value


class MessageInteger(_MessageValueBase):
    kind: Literal["integer"] = "integer"
    value: StrictInt

    def to_int(self) -> int:
        return self.value


class MessageBinary(_MessageValueBase):
    kind: Literal["binary"] = "binary"
    value: StrictBytes

    def as_str(self) -> str:
        return base64.b64encode(self.value).decode("ascii")

    def to_bytes(self) -> bytes:
        return self.value


MessageAttributeValue = Annotated[
    Union[
        MessageString,
        MessageURI,
        MessageURIRef,
        MessageTime,
        MessageBoolean,
        MessageInteger,
        MessageBinary,
    ],
    Field(discriminator="kind"),
]

MESSAGE_VALUE_TYPES = (
    MessageString,
    MessageURI,
    MessageURIRef,
    MessageTime,
    MessageBoolean,
    MessageInteger,
    MessageBinary,
)


def message_value(obj: Any) -> "MessageAttributeValue":
    """Wraps a plain Python value in the matching `MessageAttributeValue` variant."""
    if isinstance(obj, MESSAGE_VALUE_TYPES):
        return obj
    # bool is a subclass of int, so it must be checked first.
    if isinstance(obj, bool):
        return MessageBoolean(value=obj)
    if isinstance(obj, int):
        return MessageInteger(value=obj)
    if isinstance(obj, str):
        return MessageString(value=obj)
    if isinstance(obj, AnyUrl):
        return MessageURI(value=obj)
    if isinstance(obj, datetime):
        return MessageTime(value=obj)
    if isinstance(obj, (bytes, bytearray)):
        return MessageBinary(value=bytes(obj))
    raise AttributeValueConversionError("MessageAttributeValue", obj, f"unsupported type {type(obj).__name__}")
