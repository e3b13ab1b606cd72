"""US Utah section (id 11). Utah defines no GPC segment."""

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
    sexual_orientation: Consent
    citizenship_or_immigration_status: Consent
    health_data: Consent
    genetic_unique_identification: Consent
    biometric_unique_identification: Consent
    specific_geolocation_data: Consent


@dataclass(frozen=True)
class UsUtCore:
    sharing_notice: Notice
    sale_opt_out_notice: Notice
    targeted_advertising_opt_out_notice: Notice
    sensitive_data_processing_opt_out_notice: Notice
    sale_opt_out: OptOut
    targeted_advertising_opt_out: OptOut
    sensitive_data_processing: SensitiveDataProcessing
    known_child_sensitive_data_consents: Consent
    mspa_covered_transaction: bool = mspa_covered_transaction_field()
    mspa_opt_out_option_mode: MspaMode
    mspa_service_provider_mode: MspaMode


@dataclass(frozen=True)
class UsUt:
    """Decoded US Utah section."""

    section_id: ClassVar[SectionId] = SectionId.US_UT

    core: UsUtCore
    # Always None here; present so every US state record exposes gpc
    gpc: Optional[bool] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UsUt":
        core, gpc = decode_us_section(text, UsUtCore, False, strict_padding)
        return cls(core=core, gpc=gpc)

    def to_dict(self) -> dict:
        return section_to_dict(self)
