"""
US National (MSPA) section (id 7).

Unlike the state sections, two core versions are in circulation. Version 2
widened the sensitive data categories to 16 and the known child consents
to 3; the version number in the first 6 bits selects the layout.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from ..errors import MalformedSection
from ..models.section_id import SectionId
from .segments import finish, section_to_dict, split_segments
from .us_common import (
    Consent,
    MspaMode,
    Notice,
    OptOut,
    mspa_covered_transaction_field,
    read_fields,
    read_optional_gpc,
)


@dataclass(frozen=True)
class SensitiveDataProcessingV1:
    racial_or_ethnic_origin: Consent
    religious_or_philosophical_beliefs: Consent
    health_data: Consent
    sex_life_or_sexual_orientation: Consent
    citizenship_or_immigration_status: Consent
    genetic_unique_identification: Consent
    biometric_unique_identification: Consent
    precise_geolocation_data: Consent
    identification_documents: Consent
    financial_data: Consent
    union_membership: Consent
    mail_email_or_text_messages: Consent


@dataclass(frozen=True)
class KnownChildSensitiveDataConsentsV1:
    from_13_to_16: Consent
    under_13: Consent


@dataclass(frozen=True)
class UsNatCoreV1:
    sharing_notice: Notice
    sale_opt_out_notice: Notice
    sharing_opt_out_notice: Notice
    targeted_advertising_opt_out_notice: Notice
    sensitive_data_processing_opt_out_notice: Notice
    sensitive_data_limit_use_notice: Notice
    sale_opt_out: OptOut
    sharing_opt_out: OptOut
    targeted_advertising_opt_out: OptOut
    sensitive_data_processing: SensitiveDataProcessingV1
    known_child_sensitive_data_consents: KnownChildSensitiveDataConsentsV1
    personal_data_consent: Consent
    mspa_covered_transaction: bool = mspa_covered_transaction_field()
    mspa_opt_out_option_mode: MspaMode
    mspa_service_provider_mode: MspaMode


@dataclass(frozen=True)
class SensitiveDataProcessingV2:
    racial_or_ethnic_origin: Consent
    religious_or_philosophical_beliefs: Consent
    health_data: Consent
    sex_life_or_sexual_orientation: Consent
    citizenship_or_immigration_status: Consent
    genetic_unique_identification: Consent
    biometric_unique_identification: Consent
    precise_geolocation_data: Consent
    identification_documents: Consent
    financial_account_data: Consent
    union_membership: Consent
    mail_email_or_text_messages: Consent
    general_health_data: Consent
    crime_victim_status: Consent
    national_origin: Consent
    transgender_or_nonbinary_status: Consent


@dataclass(frozen=True)
class KnownChildSensitiveDataConsentsV2:
    process_sensitive_data_from_13_to_16: Consent
    process_sensitive_data_under_13: Consent
    process_personal_data_from_16_to_17: Consent


@dataclass(frozen=True)
class UsNatCoreV2:
    sharing_notice: Notice
    sale_opt_out_notice: Notice
    sharing_opt_out_notice: Notice
    targeted_advertising_opt_out_notice: Notice
    sensitive_data_processing_opt_out_notice: Notice
    sensitive_data_limit_use_notice: Notice
    sale_opt_out: OptOut
    sharing_opt_out: OptOut
    targeted_advertising_opt_out: OptOut
    sensitive_data_processing: SensitiveDataProcessingV2
    known_child_sensitive_data_consents: KnownChildSensitiveDataConsentsV2
    personal_data_consent: Consent
    mspa_covered_transaction: bool = mspa_covered_transaction_field()
    mspa_opt_out_option_mode: MspaMode
    mspa_service_provider_mode: MspaMode


# Section version -> core layout
CORE_VERSIONS = {
    1: UsNatCoreV1,
    2: UsNatCoreV2,
}


@dataclass(frozen=True)
class UsNat:
    """Decoded US National section."""

    section_id: ClassVar[SectionId] = SectionId.US_NAT

    version: int
    core: Union[UsNatCoreV1, UsNatCoreV2]
    gpc: Optional[bool] = None

    @classmethod
    def parse(cls, text: str, strict_padding: bool = True) -> "UsNat":
        core_reader, *segment_readers = split_segments(text)
        version = core_reader.read_uint(6)
        core_type = CORE_VERSIONS.get(version)
        if core_type is None:
            raise MalformedSection(
                f"unsupported US National version {version}",
                bit_offset=0,
                field="version",
            )
        core = read_fields(core_reader, core_type)
        finish(core_reader, strict_padding)
        gpc = read_optional_gpc(segment_readers, True, strict_padding)
        return cls(version=version, core=core, gpc=gpc)

    def to_dict(self) -> dict:
        return section_to_dict(self)
