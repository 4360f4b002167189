import pytest

from event_attributes import (
    AttributesV03,
    AttributesV10,
    AttributeValueConversionError,
    InvalidSpecVersion,
    MessageString,
    SpecVersion,
    UnrecognizedAttributeName,
    new_attributes,
    populate_attributes,
)


def test_new_attributes_per_revision():
    assert isinstance(new_attributes(SpecVersion.V03), AttributesV03)
    assert isinstance(new_attributes("1.0"), AttributesV10)


def test_new_attributes_unknown_revision():
    with pytest.raises(InvalidSpecVersion):
        new_attributes("0.2")


def test_new_attributes_with_config():
    config = {"default_source": "https://producer.example", "default_type": "com.example.created"}
    a = new_attributes("0.3", config)
    assert str(a.get_source()) == "https://producer.example/"
    assert a.get_type() == "com.example.created"
    assert a.get_time() is not None

    b = new_attributes("1.0", config)
    assert b.get_source() == "https://producer.example"


def test_new_attributes_without_time():
    a = new_attributes(SpecVersion.V10, {"with_time": False})
    assert a.get_time() is None
    assert list(a.names()) == ["specversion", "id", "type", "source"]


def test_new_attributes_ignores_unknown_keys():
    a = new_attributes(SpecVersion.V03, {"pool_size": 10})
    assert a.get_type() == "type"


def test_new_attributes_invalid_default_source():
    with pytest.raises(AttributeValueConversionError):
        new_attributes(SpecVersion.V03, {"default_source": "not a uri"})


def test_populate_attributes():
    pairs = [
        ("id", MessageString(value="abc")),
        ("type", "com.example.created"),
        ("source", "https://example.net"),
        ("subject", "orders/42"),
    ]
    a = populate_attributes("0.3", pairs, {"with_time": False})
    assert a.get_id() == "abc"
    assert a.get_type() == "com.example.created"
    assert str(a.get_source()) == "https://example.net/"
    assert a.get_subject() == "orders/42"
    assert a.get_time() is None


def test_populate_attributes_stops_at_unknown_name():
    with pytest.raises(UnrecognizedAttributeName):
        populate_attributes("1.0", [("id", "abc"), ("extension", "x")])
