"""
Producers of attribute sets.

Configuration is a plain dict, read with `config.get(key, default)`:

- `default_source`: overrides the revision's default `source`.
- `default_type`: overrides the revision's default `type`.
- `with_time` (default True): when false, the new set carries no `time`.

Unknown keys are ignored.
"""
from typing import Any, Dict, Iterable, Tuple

from .models import AttributesV03, AttributesV10
from .values import SpecVersion

_MODELS = {
    SpecVersion.V03: AttributesV03,
    SpecVersion.V10: AttributesV10,
}


def new_attributes(spec_version: SpecVersion | str, config: Dict | None = None):
    """Builds a default attribute set of the given revision."""
    if not isinstance(spec_version, SpecVersion):
        spec_version = SpecVersion.parse(spec_version)
    config = config or {}

    attributes = _MODELS[spec_version]()
    default_source = config.get("default_source")
    if default_source is not None:
        attributes.set_source(default_source)
    default_type = config.get("default_type")
    if default_type is not None:
        attributes.set_type(default_type)
    if not config.get("with_time", True):
        attributes.set_time(None)
    return attributes


def populate_attributes(
    spec_version: SpecVersion | str,
    pairs: Iterable[Tuple[str, Any]],
    config: Dict | None = None,
):
    """
    Builds a fresh default set and applies each `(name, value)` pair through
    `serialize_attribute`. This is the decoding counterpart of
    `message.collect_attributes`.
    """
    attributes = new_attributes(spec_version, config)
    for name, value in pairs:
        attributes.serialize_attribute(name, value)
    return attributes
