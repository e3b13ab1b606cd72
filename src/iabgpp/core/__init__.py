"""Bitstream primitives: base64url segments, bit reader and header decoding."""

from .base64 import DecodedSegment, decode, is_base64url
from .bit_reader import BitReader
from .header import GPP_VERSION, GppHeader, decode_header
from .ranges import PublisherRestriction, read_publisher_restrictions

__all__ = [
    'BitReader',
    'DecodedSegment',
    'decode',
    'is_base64url',
    'GppHeader',
    'GPP_VERSION',
    'decode_header',
    'PublisherRestriction',
    'read_publisher_restrictions',
]
