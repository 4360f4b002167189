import pytest
from datetime import datetime, timezone, timedelta
from pydantic import TypeAdapter, ValidationError

from event_attributes import (
    AttributeValueConversionError,
    InvalidSpecVersion,
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
from event_attributes.values import format_time, parse_uri

EPOCH_PLUS_61 = datetime(1970, 1, 1, 0, 1, 1, tzinfo=timezone.utc)


def test_spec_version_parse():
    assert SpecVersion.parse("0.3") is SpecVersion.V03
    assert SpecVersion.parse("1.0") is SpecVersion.V10
    assert str(SpecVersion.V10) == "1.0"


def test_spec_version_parse_invalid():
    with pytest.raises(InvalidSpecVersion):
        SpecVersion.parse("2.0")
    # Also usable as a plain ValueError
    with pytest.raises(ValueError):
        SpecVersion.parse("")


def test_attribute_names_tables():
    assert SpecVersion.V03.attribute_names == (
        "specversion", "id", "type", "source", "datacontenttype", "schemaurl", "subject", "time",
    )
    assert SpecVersion.V10.attribute_names == (
        "specversion", "id", "type", "source", "datacontenttype", "dataschema", "subject", "time",
    )


def test_parse_uri_normalizes():
    assert str(parse_uri("https://example.net")) == "https://example.net/"


def test_parse_uri_rejects_relative():
    with pytest.raises(AttributeValueConversionError):
        parse_uri("not a uri")


def test_attribute_values_are_frozen():
    value = StringValue(value="1")
    with pytest.raises(ValidationError):
        value.value = "2"


def test_attribute_value_text():
    assert str(StringValue(value="abc")) == "abc"
    assert str(URIRefValue(value=parse_uri("https://example.net"))) == "https://example.net/"
    assert str(TimeValue(value=EPOCH_PLUS_61)) == "1970-01-01T00:01:01Z"
    assert str(SpecVersionValue(value=SpecVersion.V03)) == "0.3"


def test_attribute_value_to_message():
    uri = parse_uri("https://example.net")
    assert StringValue(value="x").to_message() == MessageString(value="x")
    assert URIRefValue(value=uri).to_message() == MessageURIRef(value=uri)
    assert TimeValue(value=EPOCH_PLUS_61).to_message() == MessageTime(value=EPOCH_PLUS_61)
    assert SpecVersionValue(value=SpecVersion.V10).to_message() == MessageString(value="1.0")


def test_message_value_as_str():
    assert MessageString(value="hello").as_str() == "hello"
    assert MessageURI(value="https://example.net").as_str() == "https://example.net/"
    assert MessageTime(value=EPOCH_PLUS_61).as_str() == "1970-01-01T00:01:01Z"
    assert MessageBoolean(value=False).as_str() == "false"
    assert MessageInteger(value=-7).as_str() == "-7"
    assert MessageBinary(value=b"hi").as_str() == "aGk="


def test_message_value_to_uri():
    assert str(MessageString(value="https://example.net").to_uri()) == "https://example.net/"
    uri = parse_uri("https://example.org/schema")
    assert MessageURIRef(value=uri).to_uri() == uri
    with pytest.raises(AttributeValueConversionError):
        MessageString(value="no scheme here").to_uri()
    with pytest.raises(AttributeValueConversionError):
        MessageInteger(value=3).to_uri()


def test_message_value_to_time():
    assert MessageString(value="1970-01-01T00:01:01Z").to_time() == EPOCH_PLUS_61
    assert MessageTime(value=EPOCH_PLUS_61).to_time() == EPOCH_PLUS_61
    with pytest.raises(AttributeValueConversionError):
        MessageBoolean(value=True).to_time()


def test_message_value_to_time_requires_offset():
    with pytest.raises(AttributeValueConversionError, match="missing UTC offset"):
        MessageString(value="1970-01-01T00:01:01").to_time()


def test_message_time_is_normalized_to_utc():
    plus_two = timezone(timedelta(hours=2))
    value = MessageTime(value=datetime(1970, 1, 1, 2, 1, 1, tzinfo=plus_two))
    assert value.value == EPOCH_PLUS_61
    assert value.value.tzinfo == timezone.utc
    assert format_time(datetime(1970, 1, 1, 0, 1, 1)) == "1970-01-01T00:01:01Z"


def test_message_value_to_bool_and_int():
    assert MessageString(value="true").to_bool() is True
    assert MessageBoolean(value=False).to_bool() is False
    assert MessageString(value="42").to_int() == 42
    assert MessageInteger(value=42).to_int() == 42
    with pytest.raises(AttributeValueConversionError):
        MessageString(value="yes").to_bool()
    with pytest.raises(AttributeValueConversionError):
        MessageBoolean(value=True).to_int()


def test_message_value_to_bytes():
    assert MessageBinary(value=b"\x00\x01").to_bytes() == b"\x00\x01"
    assert MessageString(value="aGk=").to_bytes() == b"hi"
    with pytest.raises(AttributeValueConversionError):
        MessageString(value="not base64!").to_bytes()
    with pytest.raises(AttributeValueConversionError):
        MessageInteger(value=1).to_bytes()


def test_message_variants_are_strict():
    with pytest.raises(ValidationError):
        MessageInteger(value=True)
    with pytest.raises(ValidationError):
        MessageString(value=1)


def test_message_value_from_python():
    assert message_value("x") == MessageString(value="x")
    assert message_value(True) == MessageBoolean(value=True)
    assert message_value(5) == MessageInteger(value=5)
    assert message_value(b"raw") == MessageBinary(value=b"raw")
    assert message_value(EPOCH_PLUS_61) == MessageTime(value=EPOCH_PLUS_61)
    assert isinstance(message_value(parse_uri("https://example.net")), MessageURI)
    existing = MessageURIRef(value="https://example.net")
    assert message_value(existing) is existing


def test_message_value_from_unsupported_python_type():
    with pytest.raises(AttributeValueConversionError, match="unsupported type float"):
        message_value(1.5)


def test_message_attribute_value_discriminator():
    adapter = TypeAdapter(MessageAttributeValue)
    assert adapter.validate_python({"kind": "integer", "value": 3}) == MessageInteger(value=3)
    assert isinstance(adapter.validate_python({"kind": "uri", "value": "https://a.example"}), MessageURI)


def test_message_value_to_int_is_strict_decimal():
    assert MessageString(value="-12").to_int() == -12
    for text in (" 12 ", "1_000", "+5", "", "0x10"):
        with pytest.raises(AttributeValueConversionError, match="not a decimal integer"):
            MessageString(value=text).to_int()
