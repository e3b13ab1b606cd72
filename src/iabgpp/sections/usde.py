"""US Delaware section (id 17)."""

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
    transgender_or_nonbinary_status: Consent
    national_origin: Consent
    citizenship_or_immigration_status: Consent
    genetic_or_biometric_data: Consent
    precise_geolocation_data: Consent


@dataclass(frozen=True)
class KnownChildSensitiveDataConsents:
    process_sensitive_data_from_known_child: Consent
    sell_personal_data_from_13_to_16: Consent
    process_personal_data_from_13_to_16: Consent
    sell_personal_data_from_16_to_17: Consent
    process_personal_data_from_16_to_17: Consent


@dataclass(frozen=True)
class UsDeCore:
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
class UsDe:
    """Decoded US Delaware section."""

    section_id: ClassVar[SectionId] = SectionId.US_DE

    core: UsDeCore
    gpc: Optional[bool] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UsDe":
        core, gpc = decode_us_section(text, UsDeCore, True, strict_padding)
        return cls(core=core, gpc=gpc)

    def to_dict(self) -> dict:
        return section_to_dict(self)
