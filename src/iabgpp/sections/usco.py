"""US Colorado section (id 10)."""

from dataclasses import dataclass
from typing import ClassVar, Optional

from ..models.section_id import SectionId
from .segments import section_to_dict
from .us_common import (
    Consent,
    MspaMode,
    Notice,
    OptOut,
    decode_us_section,
    mspa_covered_transaction_field,
)


@dataclass(frozen=True)
class SensitiveDataProcessing:
    racial_or_ethnic_origin: Consent
    religious_beliefs: Consent
    health_condition_or_diagnosis: Consent
    sex_life_or_sexual_orientation: Consent
    citizenship_data: Consent
    genetic_unique_identification: Consent
    biometric_unique_identification: Consent


@dataclass(frozen=True)
class UsCoCore:
    sharing_notice: Notice
    sale_opt_out_notice: Notice
    targeted_advertising_opt_out_notice: Notice
    sale_opt_out: OptOut
    targeted_advertising_opt_out: OptOut
    sensitive_data_processing: SensitiveDataProcessing
    known_child_sensitive_data_consents: Consent
    mspa_covered_transaction: bool = mspa_covered_transaction_field()
    mspa_opt_out_option_mode: MspaMode
    mspa_service_provider_mode: MspaMode


@dataclass(frozen=True)
class UsCo:
    """Decoded US Colorado section."""

    section_id: ClassVar[SectionId] = SectionId.US_CO

    core: UsCoCore
    gpc: Optional[bool] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UsCo":
        core, gpc = decode_us_section(text, UsCoCore, True, strict_padding)
        return cls(core=core, gpc=gpc)

    def to_dict(self) -> dict:
        return section_to_dict(self)
