"""
TCF EU v1 section (id 1).

A single segment. Vendor consent is either a bitfield of ``max_vendor_id``
bits or a default consent bit plus a list of ids whose consent is the
opposite of the default. v1 has no legitimate interest signals.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from ..core.bit_reader import BitReader
from ..errors import MalformedSection
from ..models.section_id import SectionId
from ..models.vendor_set import VendorSet
from .segments import finish, read_version, section_to_dict, split_segments

VERSION = 1


def read_vendor_consents(reader: BitReader, max_vendor_id: int) -> VendorSet:
    """Read the v1 vendor consent block that follows the max vendor id."""
    if not reader.read_bool():
        return VendorSet.from_bitfield(reader.read_fixed_bitfield(max_vendor_id))

    default_consent = reader.read_bool()
    listed = VendorSet(reader.read_integer_range())
    if default_consent:
        return listed.complement(max_vendor_id)
    return listed


@dataclass(frozen=True)
class TcfEuV1:
    """Decoded TCF EU v1 section."""

    section_id: ClassVar[SectionId] = SectionId.TCF_EU_V1

    created: datetime
    last_updated: datetime
    cmp_id: int
    cmp_version: int
    consent_screen: int
    consent_language: str
    vendor_list_version: int
    purposes_allowed: frozenset[int]
    max_vendor_id: int
    vendor_consents: VendorSet

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "TcfEuV1":
        readers = split_segments(text)
        if len(readers) > 1:
            raise MalformedSection("TCF v1 strings have no optional segments")
        reader = readers[0]
        read_version(reader, VERSION)
        created = reader.read_datetime()
        last_updated = reader.read_datetime()
        cmp_id = reader.read_uint(12)
        cmp_version = reader.read_uint(12)
        consent_screen = reader.read_uint(6)
        consent_language = reader.read_string(2)
        vendor_list_version = reader.read_uint(12)
        purposes_allowed = reader.read_fixed_bitfield_ids(24)
        max_vendor_id = reader.read_uint(16)
        vendor_consents = read_vendor_consents(reader, max_vendor_id)
        finish(reader, strict_padding)

        return cls(
            created=created,
            last_updated=last_updated,
            cmp_id=cmp_id,
            cmp_version=cmp_version,
            consent_screen=consent_screen,
            consent_language=consent_language,
            vendor_list_version=vendor_list_version,
            purposes_allowed=purposes_allowed,
            max_vendor_id=max_vendor_id,
            vendor_consents=vendor_consents,
        )

    def has_vendor_consent(self, vendor_id: int) -> bool:
        return vendor_id in self.vendor_consents

    def to_dict(self) -> dict:
        return section_to_dict(self)
