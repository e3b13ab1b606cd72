"""
Section decoder registry.

Every supported section is a frozen dataclass exposing ``section_id`` and
``parse(text, strict_padding)``. DECODERS maps each SectionId to its class;
a format is added by writing its module and listing the class here.

Usage:
    from iabgpp.sections import decode_section_str, SectionId

    usp = decode_section_str(SectionId.USP_V1, "1YNN")
    usp.opt_out_sale
"""

from typing import Type, Union

from ..errors import DecodeError, UnknownSectionId
from ..logging import decoder_logger
from ..models.section_id import SectionId
from .tcfcav1 import TcfCaV1
from .tcfeuv1 import TcfEuV1
from .tcfeuv2 import TcfEuV2
from .usca import UsCa
from .usco import UsCo
from .usct import UsCt
from .usde import UsDe
from .usfl import UsFl
from .usia import UsIa
from .usmt import UsMt
from .usnat import UsNat
from .usne import UsNe
from .usnh import UsNh
from .usnj import UsNj
from .usor import UsOr
from .uspv1 import UspV1
from .ustn import UsTn
from .ustx import UsTx
from .usut import UsUt
from .usva import UsVa

SectionValue = Union[
    TcfEuV1, TcfEuV2, TcfCaV1, UspV1,
    UsNat, UsCa, UsVa, UsCo, UsUt, UsCt, UsFl, UsMt,
    UsOr, UsTx, UsDe, UsIa, UsNe, UsNh, UsNj, UsTn,
]

DECODERS: dict[SectionId, Type] = {
    cls.section_id: cls
    for cls in (
        TcfEuV1, TcfEuV2, TcfCaV1, UspV1,
        UsNat, UsCa, UsVa, UsCo, UsUt, UsCt, UsFl, UsMt,
        UsOr, UsTx, UsDe, UsIa, UsNe, UsNh, UsNj, UsTn,
    )
}


def decoder_for(section_id: int) -> Type:
    """
    Look up the section class registered for an id.

    Raises:
        UnknownSectionId: If no decoder is registered (including the header
            and signal integrity ids, which never appear as sections)
    """
    try:
        return DECODERS[SectionId(section_id)]
    except (KeyError, ValueError):
        raise UnknownSectionId(section_id) from None


def decode_section_str(
    section_id: int,
    text: str,
    strict_padding: bool = True,
) -> SectionValue:
    """
    Decode one section string outside of a GPP container.

    Args:
        section_id: Section format of text
        text: Raw section text (e.g. a bare TCF v2 string or ``1YNN``)
        strict_padding: Reject non-zero bits after the last field

    Returns:
        The decoded section

    Raises:
        UnknownSectionId: No decoder for section_id
        TruncatedInput: The payload ends before its fields do
        MalformedSection: The payload is internally inconsistent
    """
    section_type = decoder_for(section_id)
    logger = decoder_logger(section_id)
    try:
        section = section_type.parse(text, strict_padding=strict_padding)
    except DecodeError as e:
        if e.section_id is None:
            e.section_id = section_type.section_id
        logger.debug("Section decode failed", error=type(e).__name__, reason=e.message)
        raise
    logger.debug("Section decoded", section=section_type.__name__)
    return section


__all__ = [
    'DECODERS',
    'SectionValue',
    'decoder_for',
    'decode_section_str',
    'SectionId',
    'TcfEuV1',
    'TcfEuV2',
    'TcfCaV1',
    'UspV1',
    'UsNat',
    'UsCa',
    'UsVa',
    'UsCo',
    'UsUt',
    'UsCt',
    'UsFl',
    'UsMt',
    'UsOr',
    'UsTx',
    'UsDe',
    'UsIa',
    'UsNe',
    'UsNh',
    'UsNj',
    'UsTn',
]
