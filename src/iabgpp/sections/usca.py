"""US California section (id 8)."""

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
    """Opt-outs for each sensitive personal information category."""

    identification_documents: OptOut
    financial_data: OptOut
    precise_geolocation: OptOut
    origin_beliefs_or_union: OptOut
    mail_email_or_text_messages: OptOut
    genetic_data: OptOut
    biometric_unique_identification: OptOut
    health_data: OptOut
    sex_life_or_sexual_orientation: OptOut


@dataclass(frozen=True)
class KnownChildSensitiveDataConsents:
    sell_personal_information: Consent
    share_personal_information: Consent


@dataclass(frozen=True)
class UsCaCore:
    sale_opt_out_notice: Notice
    sharing_opt_out_notice: Notice
    sensitive_data_limit_use_notice: Notice
    sale_opt_out: OptOut
    sharing_opt_out: OptOut
    sensitive_data_processing: SensitiveDataProcessing
    known_child_sensitive_data_consents: KnownChildSensitiveDataConsents
    personal_data_consent: Consent
    mspa_covered_transaction: bool = mspa_covered_transaction_field()
    mspa_opt_out_option_mode: MspaMode
    mspa_service_provider_mode: MspaMode


@dataclass(frozen=True)
class UsCa:
    """Decoded US California section."""

    section_id: ClassVar[SectionId] = SectionId.US_CA

    core: UsCaCore
    gpc: Optional[bool] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UsCa":
        core, gpc = decode_us_section(text, UsCaCore, True, strict_padding)
        return cls(core=core, gpc=gpc)

    def to_dict(self) -> dict:
        return section_to_dict(self)
