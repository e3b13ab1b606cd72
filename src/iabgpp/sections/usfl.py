"""US Florida section (id 13). Florida defines no GPC segment."""

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
    health_data: Consent
    sex_life_or_sexual_orientation: Consent
    citizenship_or_immigration_status: Consent
    genetic_unique_identification: Consent
    biometric_unique_identification: Consent
    precise_geolocation_data: Consent


@dataclass(frozen=True)
class KnownChildSensitiveDataConsents:
    under_13: Consent
    from_13_to_16: Consent
    from_16_to_18: Consent


@dataclass(frozen=True)
class UsFlCore:
    processing_notice: Notice
    sale_opt_out_notice: Notice
    targeted_advertising_opt_out_notice: Notice
    sale_opt_out: OptOut
    targeted_advertising_opt_out: OptOut
    sensitive_data_processing: SensitiveDataProcessing
    known_child_sensitive_data_consents: KnownChildSensitiveDataConsents
    additional_data_processing_consent: Consent
    mspa_covered_transaction: bool = mspa_covered_transaction_field()
    mspa_opt_out_option_mode: MspaMode
    mspa_service_provider_mode: MspaMode


@dataclass(frozen=True)
class UsFl:
    """Decoded US Florida section."""

    section_id: ClassVar[SectionId] = SectionId.US_FL

    core: UsFlCore
    # Always None here; present so every US state record exposes gpc
    gpc: Optional[bool] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UsFl":
        core, gpc = decode_us_section(text, UsFlCore, False, strict_padding)
        return cls(core=core, gpc=gpc)

    def to_dict(self) -> dict:
        return section_to_dict(self)
