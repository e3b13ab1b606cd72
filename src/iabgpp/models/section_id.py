"""Section identifiers assigned by the GPP section registry."""

from enum import IntEnum
from typing import Union


class SectionId(IntEnum):
    """GPP section ids."""
    TCF_EU_V1 = 1
    TCF_EU_V2 = 2
    GPP_HEADER = 3
    GPP_SIGNAL_INTEGRITY = 4
    TCF_CA_V1 = 5
    USP_V1 = 6
    US_NAT = 7
    US_CA = 8
    US_VA = 9
    US_CO = 10
    US_UT = 11
    US_CT = 12
    US_FL = 13
    US_MT = 14
    US_OR = 15
    US_TX = 16
    US_DE = 17
    US_IA = 18
    US_NE = 19
    US_NH = 20
    US_NJ = 21
    US_TN = 22

    @classmethod
    def lookup(cls, value: int) -> Union["SectionId", int]:
        """
        Map a raw id to its enum member.

        Ids not known to this build are returned unchanged as plain ints so
        they can still be listed alongside the known ones.
        """
        try:
            return cls(value)
        except ValueError:
            return value


# Short API prefixes used by the GPP CMP API for each section
SECTION_API_PREFIXES = {
    SectionId.TCF_EU_V1: "tcfeuv1",
    SectionId.TCF_EU_V2: "tcfeuv2",
    SectionId.GPP_HEADER: "header",
    SectionId.GPP_SIGNAL_INTEGRITY: "signalintegrity",
    SectionId.TCF_CA_V1: "tcfcav1",
    SectionId.USP_V1: "uspv1",
    SectionId.US_NAT: "usnat",
    SectionId.US_CA: "usca",
    SectionId.US_VA: "usva",
    SectionId.US_CO: "usco",
    SectionId.US_UT: "usut",
    SectionId.US_CT: "usct",
    SectionId.US_FL: "usfl",
    SectionId.US_MT: "usmt",
    SectionId.US_OR: "usor",
    SectionId.US_TX: "ustx",
    SectionId.US_DE: "usde",
    SectionId.US_IA: "usia",
    SectionId.US_NE: "usne",
    SectionId.US_NH: "usnh",
    SectionId.US_NJ: "usnj",
    SectionId.US_TN: "ustn",
}


def section_name(section_id: int) -> str:
    """Human readable name for a section id, ``UNKNOWN`` when unregistered."""
    resolved = SectionId.lookup(section_id)
    if isinstance(resolved, SectionId):
        return resolved.name
    return "UNKNOWN"
