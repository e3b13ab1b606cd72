"""Data models shared across the GPP decoder."""

from .section_id import SECTION_API_PREFIXES, SectionId, section_name
from .vendor_set import RangeEntry, VendorSet

__all__ = [
    'SectionId',
    'SECTION_API_PREFIXES',
    'section_name',
    'RangeEntry',
    'VendorSet',
]
