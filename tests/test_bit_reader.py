"""Tests for the base64url codec and the bit reader."""

from datetime import datetime, timezone

import pytest

from iabgpp.core.base64 import decode, is_base64url
from iabgpp.core.bit_reader import BitReader
from iabgpp.core.ranges import read_publisher_restrictions
from iabgpp.errors import MalformedInput, MalformedSection, TruncatedInput
from iabgpp.sections.tcfcav1 import RestrictionType as CaRestrictionType
from iabgpp.sections.tcfeuv2 import RestrictionType


def bits(pattern: str) -> BitReader:
    """Build a reader over a string of 0/1 characters (spaces ignored)."""
    pattern = pattern.replace(" ", "")
    padded = pattern + "0" * (-len(pattern) % 8)
    data = int(padded, 2).to_bytes(len(padded) // 8, "big") if padded else b""
    return BitReader(data, len(pattern))


class TestBase64:
    """Tests for base64url segment decoding."""

    def test_decodes_gpp_header(self):
        """Should decode 6 bits per character into zero-filled bytes."""
        segment = decode("DBABM")
        assert list(segment.data) == [12, 16, 1, 48]
        assert segment.bit_length == 30

    def test_whole_bytes(self):
        """Four characters should decode to exactly three bytes."""
        segment = decode("AQID")
        assert segment.data == bytes([1, 2, 3])
        assert segment.bit_length == 24

    def test_url_safe_characters(self):
        """Should accept - and _ as 62 and 63."""
        segment = decode("-_")
        assert segment.bit_length == 12
        assert segment.data == bytes([0b11111011, 0b11110000])

    def test_invalid_character(self):
        """Characters outside the alphabet should be rejected."""
        with pytest.raises(MalformedInput):
            decode("DB!M")

    def test_standard_base64_characters_rejected(self):
        """The standard alphabet's + / and = are not base64url."""
        for text in ("AB+C", "AB/C", "ABC="):
            with pytest.raises(MalformedInput):
                decode(text)

    def test_empty_segment(self):
        """An empty segment should be rejected."""
        with pytest.raises(MalformedInput):
            decode("")

    def test_is_base64url(self):
        """Should validate the alphabet without decoding."""
        assert is_base64url("DBABM") is True
        assert is_base64url("1YNN") is True
        assert is_base64url("") is False
        assert is_base64url("base64!!") is False


class TestReadUint:
    """Tests for fixed width integer reads."""

    def test_reads_across_byte_boundary(self):
        """Should read MSB first across bytes."""
        reader = BitReader(bytes([0b10110011, 0b01010101]))
        assert reader.read_uint(3) == 0b101
        assert reader.read_uint(7) == 0b1001101
        assert reader.position == 10
        assert reader.remaining_bits() == 6

    def test_zero_width(self):
        """A zero width read returns 0 and does not move."""
        reader = BitReader(b"\x01")
        assert reader.read_uint(0) == 0
        assert reader.position == 0

    def test_64_bit_read(self):
        """Should read a full 64-bit value."""
        reader = BitReader(b"\xff" * 8)
        assert reader.read_uint(64) == 2**64 - 1

    def test_wider_than_64_rejected(self):
        """Widths over 64 are a programming error."""
        with pytest.raises(ValueError):
            BitReader(b"\x00" * 9).read_uint(65)

    def test_truncated_read(self):
        """Reading past the end should raise, not zero-fill."""
        reader = BitReader(b"\xff")
        with pytest.raises(TruncatedInput) as exc_info:
            reader.read_uint(9)
        assert exc_info.value.bit_offset == 0
        assert reader.position == 0

    def test_bit_length_bounds_reads(self):
        """Bits past bit_length are not readable even if bytes exist."""
        reader = BitReader(b"\xff", bit_length=4)
        assert reader.read_uint(4) == 15
        with pytest.raises(TruncatedInput):
            reader.read_bool()

    def test_invalid_bit_length(self):
        """bit_length larger than the buffer is rejected."""
        with pytest.raises(ValueError):
            BitReader(b"\x00", bit_length=9)

    def test_read_bool(self):
        """Should read single bits as booleans."""
        reader = bits("10")
        assert reader.read_bool() is True
        assert reader.read_bool() is False


class TestAuxiliary:
    """Tests for skip, alignment and padding checks."""

    def test_skip(self):
        """Skip should advance the cursor."""
        reader = bits("0000 1111")
        reader.skip(4)
        assert reader.read_uint(4) == 15

    def test_skip_is_bounds_checked(self):
        """Skip past the end should raise."""
        with pytest.raises(TruncatedInput):
            bits("0000").skip(5)

    def test_is_byte_aligned(self):
        """Alignment follows the bit offset."""
        reader = BitReader(b"\x00\x00")
        assert reader.is_byte_aligned() is True
        reader.skip(3)
        assert reader.is_byte_aligned() is False
        reader.skip(5)
        assert reader.is_byte_aligned() is True

    def test_zero_padding_accepted(self):
        """Trailing zeros are valid padding."""
        reader = bits("1 0000")
        reader.read_bool()
        reader.expect_zero_padding()
        assert reader.remaining_bits() == 0

    def test_non_zero_padding_rejected(self):
        """A set bit after the last field is malformed."""
        reader = bits("1 0001")
        reader.read_bool()
        with pytest.raises(MalformedSection):
            reader.expect_zero_padding()

    def test_long_padding(self):
        """Padding longer than 64 bits is checked in chunks."""
        reader = bits("0" * 70 + "1")
        with pytest.raises(MalformedSection):
            reader.expect_zero_padding()


class TestStringsAndDates:
    """Tests for 6-bit characters and timestamps."""

    def test_language_code(self):
        """0 maps to A, so 4 and 13 read as EN."""
        assert bits("000100 001101").read_string(2) == "EN"

    def test_characters_past_z(self):
        """Values past 25 continue along the ASCII table."""
        assert bits("101010").read_char6() == "k"
        assert bits("101010 101011").read_string(2) == "kl"

    def test_read_datetime(self):
        """36 bits of deciseconds should become a UTC datetime."""
        value = bits("001111101100100110001110010001011101").read_datetime()
        assert value.tzinfo == timezone.utc
        assert int(value.timestamp()) == 1685434479
        assert value.microsecond == 700000

    def test_read_datetime_epoch(self):
        """Zero is the Unix epoch."""
        value = bits("0" * 36).read_datetime()
        assert value == datetime(1970, 1, 1, tzinfo=timezone.utc)


class TestBitfields:
    """Tests for fixed and variable bitfields."""

    def test_fixed_bitfield(self):
        """Should preserve positions rather than collapse to a number."""
        assert bits("10101").read_fixed_bitfield(5) == (True, False, True, False, True)

    def test_fixed_bitfield_ids(self):
        """Bit i set means id i+1."""
        assert bits("101010").read_fixed_bitfield_ids(6) == frozenset({1, 3, 5})
        assert bits("101010").read_fixed_bitfield_ids(0) == frozenset()

    def test_fixed_bitfield_truncated(self):
        """A bitfield longer than the input should raise."""
        with pytest.raises(TruncatedInput):
            bits("101").read_fixed_bitfield(4)

    def test_variable_bitfield(self):
        """16-bit length followed by the bits."""
        vendors = bits("0000000000000101 10101").read_variable_bitfield()
        assert vendors.to_list() == [1, 3, 5]


class TestFibonacci:
    """Tests for Fibonacci coded integers and ranges."""

    @pytest.mark.parametrize(
        "pattern,expected",
        [
            ("11", 1),
            ("011", 2),
            ("0011", 3),
            ("1011", 4),
            ("00011", 5),
            ("10011", 6),
            ("01011", 7),
        ],
    )
    def test_read_fibonacci(self, pattern, expected):
        """Should sum Fibonacci weights up to the 11 terminator."""
        assert bits(pattern).read_fibonacci() == expected

    def test_unterminated_fibonacci(self):
        """A value without its terminator is truncated."""
        with pytest.raises(TruncatedInput):
            bits("0101").read_fibonacci()

    def test_fibonacci_range_with_group(self):
        """A group holds an offset and a count of following ids."""
        entries = bits("000000000010 0 0011 1 011 0011").read_fibonacci_range()
        assert [(e.start, e.end) for e in entries] == [(3, 3), (5, 8)]

    def test_fibonacci_range_singles(self):
        """Single ids are offsets from the previous id."""
        entries = bits("000000000010 0 011 0 1011").read_fibonacci_range()
        assert [(e.start, e.end) for e in entries] == [(2, 2), (6, 6)]


class TestRanges:
    """Tests for the range-encoded id sets."""

    def test_integer_range(self):
        """16-bit singles and start/end pairs."""
        entries = bits(
            "000000000010 0 0000000000000011 1 0000000000000101 0000000000001000"
        ).read_integer_range()
        assert [(e.start, e.end) for e in entries] == [(3, 3), (5, 8)]

    def test_integer_range_reversed_entry(self):
        """An entry whose start is after its end is malformed."""
        with pytest.raises(MalformedSection):
            bits(
                "000000000001 1 0000000000001000 0000000000000101"
            ).read_integer_range()

    def test_integer_range_truncated(self):
        """Fewer entries than the count declares is truncation."""
        with pytest.raises(TruncatedInput):
            bits("000000000010 0 0000000000000011").read_integer_range()

    def test_optimized_range_fibonacci(self):
        """Flag 1 selects a Fibonacci range."""
        vendors = bits("1 000000000010 0 0011 1 011 0011").read_optimized_range()
        assert vendors.to_list() == [3, 5, 6, 7, 8]

    def test_optimized_range_bitfield(self):
        """Flag 0 selects a variable bitfield."""
        vendors = bits("0 0000000000000101 10101").read_optimized_range()
        assert vendors.to_list() == [1, 3, 5]

    def test_optimized_integer_range_ranges(self):
        """Flag 1 after the max id selects an integer range."""
        vendors = bits(
            "0000000000000000 1 000000000010 0 0000000000000011 "
            "1 0000000000000101 0000000000001000"
        ).read_optimized_integer_range()
        assert vendors.to_list() == [3, 5, 6, 7, 8]

    def test_optimized_integer_range_bitfield(self):
        """Flag 0 reads max id bits."""
        vendors = bits("0000000000000101 0 10101").read_optimized_integer_range()
        assert vendors.to_list() == [1, 3, 5]

    def test_optimized_integer_range_overlap(self):
        """Overlapping entries are malformed."""
        with pytest.raises(MalformedSection):
            bits(
                "0000000000000000 1 000000000010 "
                "1 0000000000000011 0000000000000110 0 0000000000000101"
            ).read_optimized_integer_range()

    def test_optimized_integer_range_descending(self):
        """Descending entries are malformed."""
        with pytest.raises(MalformedSection):
            bits(
                "0000000000000000 1 000000000010 "
                "0 0000000000001000 0 0000000000000011"
            ).read_optimized_integer_range()


class TestPublisherRestrictions:
    """Tests for restriction lists."""

    def test_empty(self):
        """A zero count reads no restrictions."""
        reader = bits("000000000000")
        assert read_publisher_restrictions(
            reader, RestrictionType, BitReader.read_optimized_integer_range
        ) == ()

    def test_tcf_v2_restrictions(self):
        """Purpose, type and vendor set per entry, in order."""
        reader = bits(
            "000000000010 000011 01 0000000000000101 0 10101 "
            "000010 10 0000000000000000 1 000000000010 0 0000000000000011 "
            "1 0000000000000101 0000000000001000"
        )
        restrictions = read_publisher_restrictions(
            reader, RestrictionType, BitReader.read_optimized_integer_range
        )
        assert len(restrictions) == 2
        assert restrictions[0].purpose_id == 3
        assert restrictions[0].restriction_type is RestrictionType.REQUIRE_CONSENT
        assert restrictions[0].vendors == {1, 3, 5}
        assert restrictions[1].purpose_id == 2
        assert (
            restrictions[1].restriction_type
            is RestrictionType.REQUIRE_LEGITIMATE_INTEREST
        )
        assert restrictions[1].vendors == {3, 5, 6, 7, 8}

    def test_canadian_restrictions(self):
        """Canadian restrictions use optimized ranges for vendors."""
        reader = bits(
            "000000000010 000011 01 0 0000000000000101 10101 "
            "000010 10 1 000000000010 0 0011 1 011 0011"
        )
        restrictions = read_publisher_restrictions(
            reader, CaRestrictionType, BitReader.read_optimized_range
        )
        assert [r.purpose_id for r in restrictions] == [3, 2]
        assert restrictions[0].restriction_type is CaRestrictionType.REQUIRE_EXPRESS_CONSENT
        assert restrictions[0].vendors == {1, 3, 5}
        assert restrictions[1].restriction_type is CaRestrictionType.REQUIRE_IMPLIED_CONSENT
        assert restrictions[1].vendors == {3, 5, 6, 7, 8}

    def test_to_dict(self):
        """Restrictions serialize with the type name."""
        reader = bits("000000000001 000011 00 0000000000000010 0 01")
        (restriction,) = read_publisher_restrictions(
            reader, RestrictionType, BitReader.read_optimized_integer_range
        )
        assert restriction.to_dict() == {
            "purpose_id": 3,
            "restriction_type": "NOT_ALLOWED",
            "vendors": [2],
        }
