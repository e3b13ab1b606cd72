"""
Base64url segment codec.

GPP segments use the URL-safe alphabet without padding characters. Each
character carries 6 bits, most significant bit first; the final byte is
zero-filled. Segments are decoded character by character rather than with
``base64.urlsafe_b64decode`` because the bit length of a segment (6 bits
per character) is significant and rarely a whole number of bytes.
"""

from dataclasses import dataclass

from ..errors import MalformedInput

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"

_DECODE_TABLE = {char: index for index, char in enumerate(ALPHABET)}


@dataclass(frozen=True)
class DecodedSegment:
    """Bytes of a decoded segment plus the exact number of meaningful bits."""

    data: bytes
    bit_length: int


def is_base64url(text: str) -> bool:
    """Check that text is non-empty and only uses the base64url alphabet."""
    return bool(text) and all(char in _DECODE_TABLE for char in text)


def decode(text: str) -> DecodedSegment:
    """
    Decode an unpadded base64url string.

    Args:
        text: Encoded segment

    Returns:
        DecodedSegment holding ``6 * len(text)`` bits

    Raises:
        MalformedInput: On an empty segment or a character outside the alphabet
    """
    if not text:
        raise MalformedInput("empty base64 segment")

    accumulator = 0
    for position, char in enumerate(text):
        value = _DECODE_TABLE.get(char)
        if value is None:
            raise MalformedInput(
                f"invalid base64url character {char!r} at position {position}"
            )
        accumulator = (accumulator << 6) | value

    bit_length = 6 * len(text)
    padding = -bit_length % 8
    byte_length = (bit_length + padding) // 8
    data = (accumulator << padding).to_bytes(byte_length, "big")
    return DecodedSegment(data=data, bit_length=bit_length)
