"""
Bit-level reader over decoded segment bytes.

All reads are most-significant-bit first and bounds-checked against the
reader's bit length: a read that would run past the end raises
TruncatedInput instead of returning zero-filled data.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..errors import MalformedSection, TruncatedInput
from ..models.vendor_set import RangeEntry, VendorSet
from .base64 import DecodedSegment, decode

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Field widths shared by the composite encodings
RANGE_COUNT_BITS = 12
RANGE_ID_BITS = 16
DATETIME_BITS = 36
CHAR_BITS = 6


class BitReader:
    """
    Cursor over an immutable byte buffer.

    Args:
        data: Bytes to read
        bit_length: Number of meaningful bits (defaults to ``8 * len(data)``)
    """

    def __init__(self, data: bytes, bit_length: Optional[int] = None):
        if bit_length is None:
            bit_length = len(data) * 8
        if not 0 <= bit_length <= len(data) * 8:
            raise ValueError(
                f"bit_length {bit_length} out of range for {len(data)} bytes"
            )
        self._data = bytes(data)
        self._bit_length = bit_length
        self._offset = 0

    @classmethod
    def from_segment(cls, segment: DecodedSegment) -> "BitReader":
        return cls(segment.data, segment.bit_length)

    @classmethod
    def from_base64(cls, text: str) -> "BitReader":
        """Create a reader over a base64url encoded segment."""
        return cls.from_segment(decode(text))

    @property
    def position(self) -> int:
        """Current bit offset."""
        return self._offset

    @property
    def bit_length(self) -> int:
        return self._bit_length

    def remaining_bits(self) -> int:
        return self._bit_length - self._offset

    def is_byte_aligned(self) -> bool:
        return self._offset % 8 == 0

    def _require(self, n: int) -> None:
        if n < 0:
            raise ValueError(f"cannot read a negative number of bits ({n})")
        if n > self.remaining_bits():
            raise TruncatedInput(
                f"need {n} bits at offset {self._offset}, "
                f"only {self.remaining_bits()} remain",
                bit_offset=self._offset,
            )

    def skip(self, n: int) -> None:
        """Advance the cursor by n bits."""
        self._require(n)
        self._offset += n

    def read_uint(self, n: int) -> int:
        """
        Read an n-bit unsigned integer.

        Args:
            n: Width in bits (0 to 64)

        Raises:
            TruncatedInput: If fewer than n bits remain
        """
        if n > 64:
            raise ValueError(f"read_uint supports at most 64 bits, got {n}")
        self._require(n)
        if n == 0:
            return 0

        first_byte = self._offset // 8
        last_byte = (self._offset + n - 1) // 8
        chunk = int.from_bytes(self._data[first_byte:last_byte + 1], "big")
        # Drop the bits after the field, then mask off the bits before it
        trailing = (last_byte + 1) * 8 - (self._offset + n)
        value = (chunk >> trailing) & ((1 << n) - 1)
        self._offset += n
        return value

    def read_bool(self) -> bool:
        return self.read_uint(1) != 0

    def read_char6(self) -> str:
        """Read a 6-bit character where 0 is 'A'."""
        return chr(ord("A") + self.read_uint(CHAR_BITS))

    def read_string(self, length: int) -> str:
        return "".join(self.read_char6() for _ in range(length))

    def read_fixed_bitfield(self, n: int) -> tuple[bool, ...]:
        """Read n bits as an ordered sequence of booleans."""
        self._require(n)
        return tuple(self.read_bool() for _ in range(n))

    def read_fixed_bitfield_ids(self, n: int) -> frozenset[int]:
        """Read an n-bit field where bit i being set means id i+1 is present."""
        bits = self.read_fixed_bitfield(n)
        return frozenset(index for index, bit in enumerate(bits, start=1) if bit)

    def read_variable_bitfield(self) -> VendorSet:
        """Read a 16-bit length followed by that many bits."""
        length = self.read_uint(RANGE_ID_BITS)
        return VendorSet.from_bitfield(self.read_fixed_bitfield(length))

    def read_datetime(self) -> datetime:
        """Read a 36-bit timestamp in deciseconds since the Unix epoch."""
        deciseconds = self.read_uint(DATETIME_BITS)
        return EPOCH + timedelta(
            seconds=deciseconds // 10,
            milliseconds=(deciseconds % 10) * 100,
        )

    def read_fibonacci(self) -> int:
        """
        Read a Fibonacci-coded positive integer.

        Bits are weighted 1, 2, 3, 5, 8, ... and the value ends at the first
        pair of consecutive set bits.
        """
        start = self._offset
        total = 0
        previous_bit = False
        weight, next_weight = 1, 2
        while True:
            if self.remaining_bits() == 0:
                raise TruncatedInput(
                    f"unterminated fibonacci integer starting at offset {start}",
                    bit_offset=start,
                )
            bit = self.read_bool()
            if bit and previous_bit:
                return total
            if bit:
                total += weight
            weight, next_weight = next_weight, weight + next_weight
            previous_bit = bit

    def read_integer_range(self) -> list[RangeEntry]:
        """
        Read a 12-bit count of range entries with 16-bit ids.

        Each entry starts with a flag: 0 for a single id, 1 for a start/end pair.
        """
        count = self.read_uint(RANGE_COUNT_BITS)
        entries = []
        for _ in range(count):
            if self.read_bool():
                start = self.read_uint(RANGE_ID_BITS)
                end = self.read_uint(RANGE_ID_BITS)
                entries.append(RangeEntry(start, end))
            else:
                entries.append(RangeEntry.single(self.read_uint(RANGE_ID_BITS)))
        return entries

    def read_fibonacci_range(self) -> list[RangeEntry]:
        """
        Read a 12-bit count of Fibonacci-coded range entries.

        Ids are offsets from the previous id. A group entry holds the offset
        of its first id and the number of ids that follow it.
        """
        count = self.read_uint(RANGE_COUNT_BITS)
        entries = []
        last_id = 0
        for _ in range(count):
            if self.read_bool():
                start = last_id + self.read_fibonacci()
                end = start + self.read_fibonacci()
                entries.append(RangeEntry(start, end))
                last_id = end
            else:
                last_id += self.read_fibonacci()
                entries.append(RangeEntry.single(last_id))
        return entries

    def read_optimized_range(self) -> VendorSet:
        """Read a Fibonacci range (flag 1) or a variable bitfield (flag 0)."""
        if self.read_bool():
            return VendorSet(self.read_fibonacci_range())
        return self.read_variable_bitfield()

    def read_optimized_integer_range(self) -> VendorSet:
        """
        Read a TCF vendor set.

        A 16-bit max id is followed by a flag selecting an integer range (1)
        or a bitfield of max-id bits (0).
        """
        max_id = self.read_uint(RANGE_ID_BITS)
        if self.read_bool():
            return VendorSet(self.read_integer_range())
        return VendorSet.from_bitfield(self.read_fixed_bitfield(max_id))

    def expect_zero_padding(self) -> None:
        """Consume the remaining bits, which must all be zero."""
        offset = self._offset
        remaining = self.remaining_bits()
        while self.remaining_bits():
            if self.read_uint(min(64, self.remaining_bits())):
                raise MalformedSection(
                    f"non-zero padding in the last {remaining} bits",
                    bit_offset=offset,
                )
