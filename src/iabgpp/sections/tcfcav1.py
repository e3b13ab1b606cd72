"""
TCF Canada v1 section (id 5).

Canadian TCF tracks express and implied consent instead of consent and
legitimate interest. Publisher restrictions were added in v1.1; a v1 core
simply ends before them. Optional segments open with a 3-bit type:

    1  disclosed vendors
    3  publisher purposes
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import ClassVar, Optional

from ..core.bit_reader import RANGE_COUNT_BITS, BitReader
from ..core.ranges import PublisherRestriction, read_publisher_restrictions
from ..errors import MalformedSection
from ..models.section_id import SectionId
from ..models.vendor_set import VendorSet
from .segments import finish, read_version, section_to_dict, split_segments

VERSION = 1
SEGMENT_TYPE_BITS = 3


class RestrictionType(IntEnum):
    """Publisher restriction types."""
    NOT_ALLOWED = 0
    REQUIRE_EXPRESS_CONSENT = 1
    REQUIRE_IMPLIED_CONSENT = 2
    UNDEFINED = 3


class SegmentType(IntEnum):
    """Optional segment discriminants."""
    DISCLOSED_VENDORS = 1
    PUBLISHER_PURPOSES = 3


@dataclass(frozen=True)
class PublisherPurposes:
    purpose_express_consents: frozenset[int]
    purpose_implied_consents: frozenset[int]
    custom_purpose_express_consents: frozenset[int]
    custom_purpose_implied_consents: frozenset[int]

    @classmethod
    def read(cls, reader: BitReader) -> "PublisherPurposes":
        express = reader.read_fixed_bitfield_ids(24)
        implied = reader.read_fixed_bitfield_ids(24)
        custom_count = reader.read_uint(6)
        return cls(
            purpose_express_consents=express,
            purpose_implied_consents=implied,
            custom_purpose_express_consents=reader.read_fixed_bitfield_ids(custom_count),
            custom_purpose_implied_consents=reader.read_fixed_bitfield_ids(custom_count),
        )

    def to_dict(self) -> dict:
        return section_to_dict(self)


@dataclass(frozen=True)
class TcfCaV1Core:
    """Core segment of a Canadian TCF string."""

    created: datetime
    last_updated: datetime
    cmp_id: int
    cmp_version: int
    consent_screen: int
    consent_language: str
    vendor_list_version: int
    policy_version: int
    use_non_standard_stacks: bool
    special_feature_express_consents: frozenset[int]
    purpose_express_consents: frozenset[int]
    purpose_implied_consents: frozenset[int]
    # Deployed encoders write the TCF v2 vendor layout here
    vendor_express_consents: VendorSet
    vendor_implied_consents: VendorSet
    publisher_restrictions: tuple[PublisherRestriction, ...]

    @classmethod
    def read(cls, reader: BitReader) -> "TcfCaV1Core":
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
            use_non_standard_stacks=reader.read_bool(),
            special_feature_express_consents=reader.read_fixed_bitfield_ids(12),
            purpose_express_consents=reader.read_fixed_bitfield_ids(24),
            purpose_implied_consents=reader.read_fixed_bitfield_ids(24),
            vendor_express_consents=reader.read_optimized_integer_range(),
            vendor_implied_consents=reader.read_optimized_integer_range(),
            publisher_restrictions=cls._read_restrictions(reader),
        )

    @staticmethod
    def _read_restrictions(reader: BitReader) -> tuple[PublisherRestriction, ...]:
        # v1.0 strings end here, leaving at most byte padding
        if reader.remaining_bits() < RANGE_COUNT_BITS:
            return ()
        return read_publisher_restrictions(
            reader,
            RestrictionType,
            BitReader.read_optimized_range,
        )

    def to_dict(self) -> dict:
        return section_to_dict(self)


@dataclass(frozen=True)
class TcfCaV1:
    """Decoded TCF Canada v1 section."""

    section_id: ClassVar[SectionId] = SectionId.TCF_CA_V1

    core: TcfCaV1Core
    disclosed_vendors: Optional[VendorSet] = None
    publisher_purposes: Optional[PublisherPurposes] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "TcfCaV1":
        core_reader, *segment_readers = split_segments(text)
        core = TcfCaV1Core.read(core_reader)
        finish(core_reader, strict_padding)

        segments: dict[SegmentType, object] = {}
        for reader in segment_readers:
            code = reader.read_uint(SEGMENT_TYPE_BITS)
            try:
                segment_type = SegmentType(code)
            except ValueError:
                raise MalformedSection(
                    f"unknown TCF CA segment type {code}", field="segment_type"
                )
            if segment_type in segments:
                raise MalformedSection(
                    f"duplicate TCF CA segment {segment_type.name}",
                    field="segment_type",
                )
            if segment_type is SegmentType.DISCLOSED_VENDORS:
                segments[segment_type] = reader.read_optimized_range()
            else:
                segments[segment_type] = PublisherPurposes.read(reader)
            finish(reader, strict_padding)

        return cls(
            core=core,
            disclosed_vendors=segments.get(SegmentType.DISCLOSED_VENDORS),
            publisher_purposes=segments.get(SegmentType.PUBLISHER_PURPOSES),
        )

    def to_dict(self) -> dict:
        return section_to_dict(self)
