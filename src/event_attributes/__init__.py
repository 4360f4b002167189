"""
Versioned event context attributes (specversions 0.3 and 1.0), with
conversion between revisions and a format-agnostic visitor protocol for
encoders and decoders.
"""
from .converter import convert
from .errors import (
    AttributesBorrowedError,
    AttributesError,
    AttributeValueConversionError,
    InvalidSpecVersion,
    UnrecognizedAttributeName,
)
from .factories import new_attributes, populate_attributes
from .message import AttributeCollector, collect_attributes
from .models import AttributesIterator, AttributesV03, AttributesV10
from .protocols import (
    AttributesConverter,
    AttributesDeserializer,
    AttributesReader,
    AttributesSerializer,
    AttributesWriter,
    BinarySerializer,
    DataAttributesWriter,
)
from .values import (
    AttributeValue,
    MessageAttributeValue,
    MessageBinary,
    MessageBoolean,
    MessageInteger,
    MessageString,
    MessageTime,
    MessageURI,
    MessageURIRef,
    SpecVersion,
    SpecVersionValue,
    StringValue,
    TimeValue,
    URIRefValue,
    message_value,
)

__all__ = [
    "AttributeCollector",
    "AttributeValue",
    "AttributeValueConversionError",
    "AttributesBorrowedError",
    "AttributesConverter",
    "AttributesDeserializer",
    "AttributesError",
    "AttributesIterator",
    "AttributesReader",
    "AttributesSerializer",
    "AttributesV03",
    "AttributesV10",
    "AttributesWriter",
    "BinarySerializer",
    "DataAttributesWriter",
    "InvalidSpecVersion",
    "MessageAttributeValue",
    "MessageBinary",
    "MessageBoolean",
    "MessageInteger",
    "MessageString",
    "MessageTime",
    "MessageURI",
    "MessageURIRef",
    "SpecVersion",
    "SpecVersionValue",
    "StringValue",
    "TimeValue",
    "URIRefValue",
    "UnrecognizedAttributeName",
    "collect_attributes",
    "convert",
    "message_value",
    "new_attributes",
    "populate_attributes",
]
