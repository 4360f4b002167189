"""
This module implements the revision-independent half of the serialization
visitor protocol.

Attribute sets describe themselves as a lazy sequence of
`(name, MessageAttributeValue)` pairs and a table mapping each settable wire
name to a field and a converter. The functions here drive a visitor over the
former and apply incoming attributes through the latter, so neither the sets
nor the encoders need to know about each other.
"""
import logging
from collections import OrderedDict
from operator import methodcaller
from typing import Any, Callable, Dict, Iterable, Mapping, Tuple

from .errors import UnrecognizedAttributeName
from .protocols import AttributesDeserializer, V
from .values import MessageAttributeValue, message_value

# Converters from a MessageAttributeValue to a concrete field type.
as_str = methodcaller("as_str")
to_uri = methodcaller("to_uri")
to_time = methodcaller("to_time")

FieldTable = Mapping[str, Tuple[str, Callable[[Any], Any]]]


def drive_visitor(pairs: Iterable[Tuple[str, MessageAttributeValue]], visitor: V) -> V:
    """
    Feeds each pair to `visitor.set_attribute`, threading the returned visitor
    into the next call. The first exception raised by the visitor stops the
    traversal and propagates unchanged.
    """
    for name, value in pairs:
        visitor = visitor.set_attribute(name, value)
    return visitor


def apply_attribute(attributes: Any, table: FieldTable, name: str, value: Any) -> None:
    """
    Converts `value` to the concrete type of the field that `name` maps to in
    `table` and assigns it. The field is left untouched if conversion fails.
    """
    entry = table.get(name)
    if entry is None:
        logging.warning(
            f"Rejecting attribute {name!r} for specversion {attributes.get_specversion()}"
        )
        raise UnrecognizedAttributeName(name)
    field, convert = entry
    converted = convert(message_value(value))
    attributes._assign(field, converted)


class AttributeCollector:
    """
    An in-memory `BinarySerializer` that records every attribute it receives,
    in the order received. Useful as a reference visitor, and as the starting
    point for encoders that build a mapping before writing it out.
    """

    def __init__(self):
        self.attributes: Dict[str, MessageAttributeValue] = OrderedDict()

    def set_attribute(self, name: str, value: MessageAttributeValue) -> "AttributeCollector":
        self.attributes[name] = value
        return self

    def items(self):
        return self.attributes.items()


def collect_attributes(attributes: AttributesDeserializer) -> Dict[str, MessageAttributeValue]:
    """Drains `attributes` into an ordered dict of wire name to value."""
    collector = attributes.deserialize_attributes(AttributeCollector())
    return collector.attributes
