"""
IAB Global Privacy Platform (GPP) string decoder.

Parses GPP strings into their header and sections, and decodes each
section (TCF EU v1/v2, TCF Canada, US Privacy and the US national and
state sections) into typed, immutable records on demand.

Usage:
    import iabgpp

    gpp = iabgpp.parse("DBACNY~CPXxRfAPXxRfAAfKABENB-CgAAAAAAAAAAYgAAAAAAAA~1YNN")
    gpp.section_ids                      # (SectionId.TCF_EU_V2, SectionId.USP_V1)
    tcf = gpp.decode_section(iabgpp.SectionId.TCF_EU_V2)
    tcf.core.cmp_id                      # 31
"""

from .config import DecoderConfig
from .errors import (
    DecodeError,
    GppError,
    MalformedInput,
    MalformedSection,
    ParseError,
    SectionNotPresent,
    TruncatedInput,
    UnknownSectionId,
    UnsupportedVersion,
)
from .gpp_string import GppString, parse
from .models import RangeEntry, SectionId, VendorSet
from .sections import SectionValue, decode_section_str

__version__ = '1.0.0'

__all__ = [
    'parse',
    'GppString',
    'SectionId',
    'SectionValue',
    'VendorSet',
    'RangeEntry',
    'DecoderConfig',
    'decode_section_str',
    'GppError',
    'ParseError',
    'DecodeError',
    'MalformedInput',
    'UnsupportedVersion',
    'SectionNotPresent',
    'UnknownSectionId',
    'TruncatedInput',
    'MalformedSection',
]
