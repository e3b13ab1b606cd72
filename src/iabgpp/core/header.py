"""
GPP header segment decoding.

The header is the first ``~`` segment of a GPP string:

    type (6 bits, always 3) | version (6 bits) | section ids (Fibonacci range)
"""

from dataclasses import dataclass
from typing import Union

from ..errors import DecodeError, MalformedInput, UnsupportedVersion
from ..models.section_id import SectionId
from .base64 import decode
from .bit_reader import BitReader

HEADER_TYPE = 3
GPP_VERSION = 1


@dataclass(frozen=True)
class GppHeader:
    """Decoded header: GPP version and section ids in encoded order."""

    version: int
    section_ids: tuple[Union[SectionId, int], ...]

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "section_ids": [int(section_id) for section_id in self.section_ids],
        }


def decode_header(text: str) -> GppHeader:
    """
    Decode the header segment.

    Raises:
        MalformedInput: Bad base64, wrong header type or a header too short
            to hold its fields
        UnsupportedVersion: Version newer than GPP_VERSION
    """
    reader = BitReader.from_segment(decode(text))
    try:
        header_type = reader.read_uint(6)
        if header_type != HEADER_TYPE:
            raise MalformedInput(
                f"invalid header type (expected {HEADER_TYPE}, found {header_type})",
                field="type",
            )

        version = reader.read_uint(6)
        if version > GPP_VERSION:
            raise UnsupportedVersion(version, GPP_VERSION)
        if version < 1:
            raise MalformedInput(f"invalid GPP version {version}", field="version")

        section_ids = []
        for entry in reader.read_fibonacci_range():
            section_ids.extend(range(entry.start, entry.end + 1))
    except DecodeError as e:
        raise MalformedInput(
            f"unable to decode GPP header: {e.message}",
            bit_offset=e.bit_offset,
        ) from e

    return GppHeader(
        version=version,
        section_ids=tuple(SectionId.lookup(value) for value in section_ids),
    )
