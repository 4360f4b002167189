"""
Revision-agnostic conversion between attribute sets.

Each set already knows how to turn itself into either revision through
`into_v03`/`into_v10`; `convert` picks the right one from a `SpecVersion`, so
callers holding "some attribute set" never need to know which one it is.
Converting to the set's own revision returns the same object.
"""
import logging
from typing import Callable, Dict

from .protocols import AttributesConverter
from .values import SpecVersion

_CONVERTERS: Dict[SpecVersion, Callable[[AttributesConverter], AttributesConverter]] = {
    SpecVersion.V03: lambda attributes: attributes.into_v03(),
    SpecVersion.V10: lambda attributes: attributes.into_v10(),
}


def convert(attributes: AttributesConverter, target: SpecVersion | str) -> AttributesConverter:
    """
    Converts `attributes` to the `target` revision. The source set must not be
    used afterwards when the revisions differ.
    """
    if not isinstance(target, SpecVersion):
        target = SpecVersion.parse(target)
    source_version = attributes.get_specversion()
    logging.debug(f"Converting attributes from specversion {source_version} to {target}")
    return _CONVERTERS[target](attributes)
