"""Tests for the VendorSet model."""

import pytest

from iabgpp.errors import MalformedSection
from iabgpp.models import RangeEntry, VendorSet


class TestRangeEntry:
    """Tests for range entry validation."""

    def test_single(self):
        """A single id is a one-element range."""
        entry = RangeEntry.single(7)
        assert entry.is_single is True
        assert len(entry) == 1
        assert 7 in entry

    def test_range(self):
        """Ranges are inclusive on both ends."""
        entry = RangeEntry(3, 6)
        assert entry.is_single is False
        assert len(entry) == 4
        assert 3 in entry and 6 in entry
        assert 7 not in entry

    def test_zero_id_rejected(self):
        """Vendor ids start at 1."""
        with pytest.raises(MalformedSection):
            RangeEntry.single(0)

    def test_reversed_rejected(self):
        """Start after end is malformed."""
        with pytest.raises(MalformedSection):
            RangeEntry(8, 5)


class TestVendorSet:
    """Tests for set semantics independent of encoding."""

    def test_contains(self):
        """Membership should work across runs."""
        vendors = VendorSet([RangeEntry.single(3), RangeEntry(5, 8)])
        assert vendors.contains(3) is True
        assert vendors.contains(4) is False
        assert 8 in vendors
        assert 9 not in vendors
        assert 0 not in vendors
        assert "3" not in vendors

    def test_iteration_and_len(self):
        """Iteration yields ids in ascending order."""
        vendors = VendorSet([RangeEntry.single(3), RangeEntry(5, 8)])
        assert list(vendors) == [3, 5, 6, 7, 8]
        assert len(vendors) == 5
        assert vendors.max_id == 8

    def test_empty(self):
        """An empty set is falsy."""
        vendors = VendorSet()
        assert not vendors
        assert len(vendors) == 0
        assert vendors.max_id == 0
        assert vendors.to_list() == []

    def test_bitfield_and_ranges_are_equal(self):
        """The same ids from either encoding compare equal."""
        from_bits = VendorSet.from_bitfield(
            [False, False, True, False, True, True, True, True]
        )
        from_ranges = VendorSet([RangeEntry.single(3), RangeEntry(5, 8)])
        assert from_bits == from_ranges
        assert hash(from_bits) == hash(from_ranges)
        for vendor_id in range(0, 12):
            assert (vendor_id in from_bits) == (vendor_id in from_ranges)

    def test_adjacent_entries_merge(self):
        """Adjacent entries normalize to a single run."""
        split = VendorSet([RangeEntry(1, 3), RangeEntry(4, 5)])
        assert split == VendorSet([RangeEntry(1, 5)])
        assert repr(split) == "VendorSet(1-5)"

    def test_overlap_rejected(self):
        """Overlapping entries are malformed."""
        with pytest.raises(MalformedSection):
            VendorSet([RangeEntry(1, 5), RangeEntry(5, 6)])

    def test_descending_rejected(self):
        """Descending entries are malformed."""
        with pytest.raises(MalformedSection):
            VendorSet([RangeEntry.single(9), RangeEntry.single(2)])

    def test_from_ids(self):
        """Arbitrary ids are sorted and deduplicated."""
        vendors = VendorSet.from_ids([9, 2, 3, 2])
        assert vendors.to_list() == [2, 3, 9]

    def test_equality_with_plain_sets(self):
        """A VendorSet compares equal to a set with the same ids."""
        vendors = VendorSet.from_ids([1, 3, 5])
        assert vendors == {1, 3, 5}
        assert vendors == frozenset({1, 3, 5})
        assert vendors != {1, 3}
        assert vendors != {1, 3, 6}

    def test_hash_matches_frozenset(self):
        """Equal VendorSets and frozensets are interchangeable as keys."""
        vendors = VendorSet([RangeEntry(1, 3), RangeEntry(7, 7)])
        assert hash(vendors) == hash(frozenset({1, 2, 3, 7}))
        lookup = {frozenset({1, 2, 3, 7}): "found"}
        assert lookup[vendors] == "found"
        assert vendors in {frozenset({1, 2, 3, 7})}
        assert hash(VendorSet([])) == hash(frozenset())

    def test_complement(self):
        """Complement lists ids up to max_id that are missing."""
        vendors = VendorSet.from_ids([9])
        complement = vendors.complement(2011)
        assert len(complement) == 2010
        assert 9 not in complement
        assert 1 in complement and 2011 in complement
        assert 2012 not in complement

    def test_complement_with_ids_past_max(self):
        """Ids above max_id are ignored by complement."""
        vendors = VendorSet([RangeEntry(2, 3), RangeEntry(5, 100)])
        assert vendors.complement(6).to_list() == [1, 4]

    def test_large_range_is_compact(self):
        """A wide range does not need to be expanded to test membership."""
        vendors = VendorSet([RangeEntry(1, 65535)])
        assert len(vendors) == 65535
        assert 40000 in vendors
