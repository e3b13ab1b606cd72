"""
US Privacy v1 section (id 6), the CCPA string.

Format: 4 characters, not base64
- Position 1: Specification version (currently "1")
- Position 2: Explicit Notice/Opportunity to Opt Out (Y/N/-)
- Position 3: Opt-Out Sale (Y/N/-)
- Position 4: LSPA Covered Transaction (Y/N/-)

Examples:
- "1YNN" = Notice given, not opted out, not LSPA
- "1YYN" = Notice given, opted out of sale
- "1---" = Not applicable
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional

from ..errors import MalformedSection, TruncatedInput
from ..models.section_id import SectionId

VERSION = 1


class Flag(Enum):
    """Y/N/- signal value."""
    YES = "Y"
    NO = "N"
    NOT_APPLICABLE = "-"

    def as_bool(self) -> Optional[bool]:
        """Y=True, N=False, -=None."""
        if self is Flag.NOT_APPLICABLE:
            return None
        return self is Flag.YES


@dataclass(frozen=True)
class UspV1:
    """Decoded US Privacy string."""

    section_id: ClassVar[SectionId] = SectionId.USP_V1

    opt_out_notice: Flag
    opt_out_sale: Flag
    lspa_covered_transaction: Flag

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UspV1":
        """
        Parse a US Privacy string.

        Characters after the fourth are ignored. ``strict_padding`` is
        accepted for a uniform decoder signature and has no effect.

        Raises:
            TruncatedInput: Fewer than four characters
            MalformedSection: Bad version or flag character
        """
        if not text:
            raise TruncatedInput("empty US Privacy string", bit_offset=0)

        version_char = text[0]
        if version_char not in "0123456789":
            raise MalformedSection(
                f"invalid character {version_char!r} in US Privacy string {text!r}",
                field="version",
            )
        if int(version_char) != VERSION:
            raise MalformedSection(
                f"unsupported section version {version_char} (expected {VERSION})",
                field="version",
            )

        def parse_char(position: int, name: str) -> Flag:
            if position >= len(text):
                raise TruncatedInput(
                    f"US Privacy string {text!r} ends before {name}", field=name
                )
            try:
                return Flag(text[position])
            except ValueError:
                raise MalformedSection(
                    f"invalid character {text[position]!r} in US Privacy "
                    f"string {text!r}",
                    field=name,
                )

        return cls(
            opt_out_notice=parse_char(1, "opt_out_notice"),
            opt_out_sale=parse_char(2, "opt_out_sale"),
            lspa_covered_transaction=parse_char(3, "lspa_covered_transaction"),
        )

    def has_opted_out(self) -> bool:
        """Check if user has opted out of data sale."""
        return self.opt_out_sale is Flag.YES

    def notice_given(self) -> bool:
        """Check if explicit notice was given."""
        return self.opt_out_notice is Flag.YES

    def to_dict(self) -> dict:
        return {
            "opt_out_notice": self.opt_out_notice.name,
            "opt_out_sale": self.opt_out_sale.name,
            "lspa_covered_transaction": self.lspa_covered_transaction.name,
        }
