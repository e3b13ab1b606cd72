"""Helpers shared by the section decoders."""

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any

from ..core.base64 import decode
from ..core.bit_reader import BitReader
from ..errors import MalformedInput, MalformedSection
from ..models.vendor_set import VendorSet

SEGMENT_SEPARATOR = "."


def split_segments(text: str) -> list[BitReader]:
    """
    Split a section on ``.`` and open a reader over each part.

    The first reader is the core segment, the rest are optional segments.

    Raises:
        MalformedSection: On an empty part or a character outside base64url
    """
    readers = []
    for part in text.split(SEGMENT_SEPARATOR):
        try:
            readers.append(BitReader.from_segment(decode(part)))
        except MalformedInput as e:
            raise MalformedSection(e.message) from e
    return readers


def read_version(reader: BitReader, expected: int, bits: int = 6) -> int:
    """Read a section version and require it to match."""
    version = reader.read_uint(bits)
    if version != expected:
        raise MalformedSection(
            f"unsupported section version {version} (expected {expected})",
            bit_offset=reader.position - bits,
            field="version",
        )
    return version


def finish(reader: BitReader, strict_padding: bool = True) -> None:
    """Check that only zero padding is left once a segment has been read."""
    if strict_padding:
        reader.expect_zero_padding()


def to_json_value(value: Any) -> Any:
    """Convert a decoded field into plain JSON-ready data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        if hasattr(value, "to_dict"):
            return value.to_dict()
        return section_to_dict(value)
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, VendorSet):
        return value.to_list()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value


def section_to_dict(section: Any) -> dict:
    """Serialize a decoded dataclass field by field."""
    return {
        f.name: to_json_value(getattr(section, f.name))
        for f in dataclasses.fields(section)
    }
