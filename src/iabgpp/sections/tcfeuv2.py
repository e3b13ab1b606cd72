"""
TCF EU v2 section (id 2).

The section is a core segment optionally followed by ``.``-separated
segments, each opening with a 3-bit segment type:

    1  disclosed vendors
    2  allowed vendors
    3  publisher purposes (publisher TC)
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import ClassVar, Optional

from ..core.bit_reader import BitReader
from ..core.ranges import PublisherRestriction, read_publisher_restrictions
from ..errors import MalformedSection
from ..models.section_id import SectionId
from ..models.vendor_set import VendorSet
from .segments import finish, read_version, section_to_dict, split_segments

VERSION = 2
SEGMENT_TYPE_BITS = 3


class RestrictionType(IntEnum):
    """Publisher restriction types."""
    NOT_ALLOWED = 0
    REQUIRE_CONSENT = 1
    REQUIRE_LEGITIMATE_INTEREST = 2
    UNDEFINED = 3


class SegmentType(IntEnum):
    """Optional segment discriminants."""
    DISCLOSED_VENDORS = 1
    ALLOWED_VENDORS = 2
    PUBLISHER_PURPOSES = 3


@dataclass(frozen=True)
class PublisherPurposes:
    """Publisher transparency and consent for standard and custom purposes."""

    consents: frozenset[int]
    legitimate_interests: frozenset[int]
    custom_consents: frozenset[int]
    custom_legitimate_interests: frozenset[int]

    @classmethod
    def read(cls, reader: BitReader) -> "PublisherPurposes":
        consents = reader.read_fixed_bitfield_ids(24)
        legitimate_interests = reader.read_fixed_bitfield_ids(24)
        custom_count = reader.read_uint(6)
        return cls(
            consents=consents,
            legitimate_interests=legitimate_interests,
            custom_consents=reader.read_fixed_bitfield_ids(custom_count),
            custom_legitimate_interests=reader.read_fixed_bitfield_ids(custom_count),
        )

    def to_dict(self) -> dict:
        return section_to_dict(self)


@dataclass(frozen=True)
class TcfEuV2Core:
    """Core segment of a TCF v2 string."""

    created: datetime
    last_updated: datetime
    cmp_id: int
    cmp_version: int
    consent_screen: int
    consent_language: str
    vendor_list_version: int
    policy_version: int
    is_service_specific: bool
    use_non_standard_stacks: bool
    special_feature_optins: frozenset[int]
    purpose_consents: frozenset[int]
    purpose_legitimate_interests: frozenset[int]
    purpose_one_treatment: bool
    publisher_country_code: str
    vendor_consents: VendorSet
    vendor_legitimate_interests: VendorSet
    publisher_restrictions: tuple[PublisherRestriction, ...]

    @classmethod
    def read(cls, reader: BitReader) -> "TcfEuV2Core":
        read_version(reader, VERSION)
        return cls(
            created=reader.read_datetime(),
            last_updated=reader.read_datetime(),
            cmp_id=reader.read_uint(12),
            cmp_version=reader.read_uint(12),
            consent_screen=reader.read_uint(6),
            consent_language=reader.read_string(2),
            vendor_list_version=reader.read_uint(12),
            policy_version=reader.read_uint(6),
            is_service_specific=reader.read_bool(),
            use_non_standard_stacks=reader.read_bool(),
            special_feature_optins=reader.read_fixed_bitfield_ids(12),
            purpose_consents=reader.read_fixed_bitfield_ids(24),
            purpose_legitimate_interests=reader.read_fixed_bitfield_ids(24),
            purpose_one_treatment=reader.read_bool(),
            publisher_country_code=reader.read_string(2),
            vendor_consents=reader.read_optimized_integer_range(),
            vendor_legitimate_interests=reader.read_optimized_integer_range(),
            publisher_restrictions=read_publisher_restrictions(
                reader,
                RestrictionType,
                BitReader.read_optimized_integer_range,
            ),
        )

    def to_dict(self) -> dict:
        return section_to_dict(self)


@dataclass(frozen=True)
class TcfEuV2:
    """Decoded TCF EU v2 section."""

    section_id: ClassVar[SectionId] = SectionId.TCF_EU_V2

    core: TcfEuV2Core
    disclosed_vendors: Optional[VendorSet] = None
    allowed_vendors: Optional[VendorSet] = None
    publisher_purposes: Optional[PublisherPurposes] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "TcfEuV2":
        """
        Decode a TCF v2 string (core plus optional segments).

        Raises:
            MalformedSection: Wrong version, unknown or repeated segment type
            TruncatedInput: A segment ends before its fields do
        """
        core_reader, *segment_readers = split_segments(text)
        core = TcfEuV2Core.read(core_reader)
        finish(core_reader, strict_padding)

        segments: dict[SegmentType, object] = {}
        for reader in segment_readers:
            code = reader.read_uint(SEGMENT_TYPE_BITS)
            try:
                segment_type = SegmentType(code)
            except ValueError:
                raise MalformedSection(
                    f"unknown TCF v2 segment type {code}", field="segment_type"
                )
            if segment_type in segments:
                raise MalformedSection(
                    f"duplicate TCF v2 segment {segment_type.name}",
                    field="segment_type",
                )
            if segment_type is SegmentType.PUBLISHER_PURPOSES:
                segments[segment_type] = PublisherPurposes.read(reader)
            else:
                segments[segment_type] = reader.read_optimized_integer_range()
            finish(reader, strict_padding)

        return cls(
            core=core,
            disclosed_vendors=segments.get(SegmentType.DISCLOSED_VENDORS),
            allowed_vendors=segments.get(SegmentType.ALLOWED_VENDORS),
            publisher_purposes=segments.get(SegmentType.PUBLISHER_PURPOSES),
        )

    def has_vendor_consent(self, vendor_id: int) -> bool:
        """Check if a vendor has consent."""
        return vendor_id in self.core.vendor_consents

    def has_purpose_consent(self, purpose_id: int) -> bool:
        """Check if a purpose has consent."""
        return purpose_id in self.core.purpose_consents

    def to_dict(self) -> dict:
        return section_to_dict(self)
