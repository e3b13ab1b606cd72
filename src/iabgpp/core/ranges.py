"""Publisher restriction lists used by the TCF sections."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Type

from ..models.vendor_set import VendorSet
from .bit_reader import RANGE_COUNT_BITS, BitReader

PURPOSE_ID_BITS = 6
RESTRICTION_TYPE_BITS = 2


@dataclass(frozen=True)
class PublisherRestriction:
    """A restriction a publisher places on vendors for one purpose."""

    purpose_id: int
    restriction_type: IntEnum
    vendors: VendorSet

    def to_dict(self) -> dict:
        return {
            "purpose_id": self.purpose_id,
            "restriction_type": self.restriction_type.name,
            "vendors": self.vendors.to_list(),
        }


def read_publisher_restrictions(
    reader: BitReader,
    restriction_types: Type[IntEnum],
    read_vendors: Callable[[BitReader], VendorSet],
) -> tuple[PublisherRestriction, ...]:
    """
    Read a 12-bit count of (purpose, type, vendors) restrictions.

    Args:
        reader: Reader positioned at the count
        restriction_types: Enum covering every 2-bit restriction code
        read_vendors: Reads the vendor set of one restriction

    Returns:
        Restrictions in encoded order; purpose ids may repeat
    """
    count = reader.read_uint(RANGE_COUNT_BITS)
    restrictions = []
    for _ in range(count):
        purpose_id = reader.read_uint(PURPOSE_ID_BITS)
        restriction_type = restriction_types(reader.read_uint(RESTRICTION_TYPE_BITS))
        restrictions.append(
            PublisherRestriction(
                purpose_id=purpose_id,
                restriction_type=restriction_type,
                vendors=read_vendors(reader),
            )
        )
    return tuple(restrictions)
