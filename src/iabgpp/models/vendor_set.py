"""Vendor set model shared by the TCF decoders and the GPP header."""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from ..errors import MalformedSection


@dataclass(frozen=True)
class RangeEntry:
    """
    A single id or an inclusive range of ids.

    A single id is stored as a range whose start equals its end.
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 1:
            raise MalformedSection(f"range entry id must be >= 1, got {self.start}")
        if self.start > self.end:
            raise MalformedSection(
                f"range entry start {self.start} is after end {self.end}"
            )

    @classmethod
    def single(cls, value: int) -> "RangeEntry":
        return cls(start=value, end=value)

    @property
    def is_single(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, value: int) -> bool:
        return self.start <= value <= self.end


class VendorSet:
    """
    Immutable set of vendor (or purpose, section) ids.

    The TCF formats carry vendor sets either as a bitfield or as a list of
    range entries. Both forms normalize to the same sorted, merged run list,
    so membership, iteration and equality do not depend on how the set was
    encoded.
    """

    __slots__ = ("_runs", "_starts", "_size")

    def __init__(self, entries: Iterable[RangeEntry] = ()):
        runs: list[tuple[int, int]] = []
        for entry in entries:
            if runs and entry.start <= runs[-1][1]:
                raise MalformedSection(
                    f"range entries must be ascending and non-overlapping: "
                    f"{entry.start}-{entry.end} follows {runs[-1][0]}-{runs[-1][1]}"
                )
            if runs and entry.start == runs[-1][1] + 1:
                # Adjacent entries collapse into one run
                runs[-1] = (runs[-1][0], entry.end)
            else:
                runs.append((entry.start, entry.end))

        self._runs = tuple(runs)
        self._starts = tuple(start for start, _ in runs)
        self._size = sum(end - start + 1 for start, end in runs)

    @classmethod
    def from_bitfield(cls, bits: Sequence[bool]) -> "VendorSet":
        """Build a set where bit i being set means id i+1 is present."""
        entries = []
        run_start = None
        for index, bit in enumerate(bits, start=1):
            if bit and run_start is None:
                run_start = index
            elif not bit and run_start is not None:
                entries.append(RangeEntry(run_start, index - 1))
                run_start = None
        if run_start is not None:
            entries.append(RangeEntry(run_start, len(bits)))
        return cls(entries)

    @classmethod
    def from_ids(cls, ids: Iterable[int]) -> "VendorSet":
        """Build a set from arbitrary ids (duplicates and order ignored)."""
        return cls(RangeEntry.single(value) for value in sorted(set(ids)))

    def complement(self, max_id: int) -> "VendorSet":
        """Return the ids in ``1..max_id`` that are not in this set."""
        entries = []
        next_id = 1
        for start, end in self._runs:
            if start > max_id:
                break
            if start > next_id:
                entries.append(RangeEntry(next_id, start - 1))
            next_id = end + 1
        if next_id <= max_id:
            entries.append(RangeEntry(next_id, max_id))
        return VendorSet(entries)

    def contains(self, vendor_id: int) -> bool:
        """Check if a vendor id is in the set."""
        index = bisect_right(self._starts, vendor_id) - 1
        return index >= 0 and vendor_id <= self._runs[index][1]

    def __contains__(self, vendor_id: object) -> bool:
        return isinstance(vendor_id, int) and self.contains(vendor_id)

    def __iter__(self) -> Iterator[int]:
        for start, end in self._runs:
            yield from range(start, end + 1)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VendorSet):
            return self._runs == other._runs
        if isinstance(other, (set, frozenset)):
            return len(other) == self._size and all(self.contains(v) for v in other)
        return NotImplemented

    def __hash__(self) -> int:
        # Must agree with frozenset since the two compare equal
        return hash(frozenset(self))

    def __repr__(self) -> str:
        parts = [
            str(start) if start == end else f"{start}-{end}"
            for start, end in self._runs
        ]
        return f"VendorSet({', '.join(parts)})"

    @property
    def max_id(self) -> int:
        """Highest id in the set, 0 when empty."""
        return self._runs[-1][1] if self._runs else 0

    def to_list(self) -> list[int]:
        return list(self)
