"""Tests for the US Privacy string and the US national and state sections."""

import pytest

from iabgpp.core.base64 import ALPHABET
from iabgpp.errors import MalformedSection, TruncatedInput
from iabgpp.sections import (
    UsCa,
    UsCo,
    UsCt,
    UsDe,
    UsFl,
    UsIa,
    UsMt,
    UsNat,
    UsNe,
    UsNh,
    UsNj,
    UsOr,
    UspV1,
    UsTn,
    UsTx,
    UsUt,
    UsVa,
)
from iabgpp.sections.us_common import Consent, MspaMode, Notice, OptOut
from iabgpp.sections.usnat import UsNatCoreV1
from iabgpp.sections.uspv1 import Flag


def us_section(codes, version=1, gpc=None):
    """Encode a version and a list of 2-bit field codes as a section string."""
    pattern = format(version, "06b") + "".join(format(c, "02b") for c in codes)
    pattern += "0" * (-len(pattern) % 6)
    text = "".join(
        ALPHABET[int(pattern[i:i + 6], 2)] for i in range(0, len(pattern), 6)
    )
    if gpc is not None:
        text += ".YA" if gpc else ".QA"
    return text


class TestUspV1:
    """Tests for the plain-text US Privacy string."""

    def test_notice_given_not_opted_out(self):
        """Should map each character onto a flag."""
        usp = UspV1.parse("1YN-")
        assert usp.opt_out_notice is Flag.YES
        assert usp.opt_out_sale is Flag.NO
        assert usp.lspa_covered_transaction is Flag.NOT_APPLICABLE
        assert usp.notice_given() is True
        assert usp.has_opted_out() is False

    def test_opted_out(self):
        """Y in the sale position means the user opted out."""
        assert UspV1.parse("1YYY").has_opted_out() is True
        assert UspV1.parse("1NNN").notice_given() is False

    def test_flag_as_bool(self):
        """Not applicable has no boolean value."""
        assert Flag.YES.as_bool() is True
        assert Flag.NO.as_bool() is False
        assert Flag.NOT_APPLICABLE.as_bool() is None

    @pytest.mark.parametrize("text", ["", "1", "1N"])
    def test_truncated(self, text):
        """Fewer than four characters is truncated input."""
        with pytest.raises(TruncatedInput):
            UspV1.parse(text)

    @pytest.mark.parametrize("text", ["ZYN-", "2YN-", "1A", "1YNX"])
    def test_malformed(self, text):
        """Bad version or flag characters are malformed."""
        with pytest.raises(MalformedSection):
            UspV1.parse(text)

    def test_to_dict(self):
        """Flags serialize by name."""
        assert UspV1.parse("1YN-").to_dict() == {
            "opt_out_notice": "YES",
            "opt_out_sale": "NO",
            "lspa_covered_transaction": "NOT_APPLICABLE",
        }


class TestUsNat:
    """Tests for the US National section."""

    def test_not_applicable(self):
        """Zero codes decode to not applicable."""
        usnat = UsNat.parse("BAAAAAAAAQA")
        assert usnat.version == 1
        assert isinstance(usnat.core, UsNatCoreV1)
        assert usnat.core.sharing_notice is Notice.NOT_APPLICABLE
        assert usnat.core.sale_opt_out is OptOut.NOT_APPLICABLE
        assert usnat.core.sensitive_data_processing.health_data is Consent.NOT_APPLICABLE
        assert usnat.core.mspa_covered_transaction is True
        assert usnat.core.mspa_opt_out_option_mode is MspaMode.NOT_APPLICABLE
        assert usnat.gpc is None

    def test_populated(self):
        """Code 1 fields decode to provided, opted out and no consent."""
        core = UsNat.parse("BVVVVVVVVWA").core
        assert core.sale_opt_out_notice is Notice.PROVIDED
        assert core.targeted_advertising_opt_out is OptOut.OPTED_OUT
        assert core.sensitive_data_processing.union_membership is Consent.NO_CONSENT
        assert core.known_child_sensitive_data_consents.under_13 is Consent.NO_CONSENT
        assert core.personal_data_consent is Consent.NO_CONSENT
        assert core.mspa_covered_transaction is True
        assert core.mspa_opt_out_option_mode is MspaMode.YES
        assert core.mspa_service_provider_mode is MspaMode.NO

    def test_gpc_segment(self):
        """The GPC segment sets the gpc flag."""
        assert UsNat.parse("BVVVVVVVVWA.YA").gpc is True
        assert UsNat.parse("BVVVVVVVVWA.QA").gpc is False

    def test_unknown_segment_type(self):
        """Segment type 0 is not a GPC segment."""
        with pytest.raises(MalformedSection):
            UsNat.parse("BVVVVVVVVWA.AA")

    def test_duplicate_gpc_segment(self):
        """GPC may appear once."""
        with pytest.raises(MalformedSection):
            UsNat.parse("BVVVVVVVVWA.YA.YA")

    def test_version_2_layout(self):
        """Version 2 selects the wider core which a version 1 body cannot fill."""
        with pytest.raises(TruncatedInput):
            UsNat.parse(us_section([1] * 20, version=2))

    def test_version_2_with_version_1_body(self):
        """A version 1 body read as version 2 misplaces the MSPA fields."""
        with pytest.raises(MalformedSection):
            UsNat.parse("CVVVVVVVVWA.YA")

    def test_version_2_decodes(self):
        """A full version 2 core decodes every sensitive data category."""
        usnat = UsNat.parse(us_section([0] * 9 + [2] * 16 + [1] * 3 + [0, 1, 0, 0], 2))
        assert usnat.version == 2
        sensitive = usnat.core.sensitive_data_processing
        assert sensitive.transgender_or_nonbinary_status is Consent.CONSENT
        children = usnat.core.known_child_sensitive_data_consents
        assert children.process_personal_data_from_16_to_17 is Consent.NO_CONSENT

    def test_unsupported_version(self):
        """Versions other than 1 and 2 are malformed."""
        with pytest.raises(MalformedSection):
            UsNat.parse(us_section([0] * 24 + [1, 0, 0], version=3))

    def test_invalid_covered_transaction(self):
        """Covered transaction must be 1 or 2."""
        with pytest.raises(MalformedSection) as exc_info:
            UsNat.parse(us_section([0] * 24 + [0, 0, 0]))
        assert exc_info.value.field == "mspa_covered_transaction"

    def test_invalid_enum_code(self):
        """Code 3 is not a declared notice value."""
        with pytest.raises(MalformedSection) as exc_info:
            UsNat.parse(us_section([3] + [0] * 23 + [1, 0, 0]))
        assert exc_info.value.field == "sharing_notice"
        assert exc_info.value.bit_offset == 6

    def test_empty(self):
        """An empty section cannot be decoded."""
        with pytest.raises(MalformedSection):
            UsNat.parse("")

    def test_to_dict(self):
        """Nested records serialize as nested dicts with enum names."""
        data = UsNat.parse("BVVVVVVVVWA.YA").to_dict()
        assert data["version"] == 1
        assert data["gpc"] is True
        assert data["core"]["sale_opt_out"] == "OPTED_OUT"
        assert data["core"]["mspa_covered_transaction"] is True
        assert data["core"]["sensitive_data_processing"]["health_data"] == "NO_CONSENT"


class TestStateSections:
    """Tests for state sections with verified encodings."""

    def test_california(self):
        """California has sharing notices and a GPC segment."""
        core = UsCa.parse("BAAAAACA").core
        assert core.sale_opt_out_notice is Notice.NOT_APPLICABLE
        assert core.mspa_covered_transaction is False

        core = UsCa.parse("BVVVVVVY").core
        assert core.sharing_opt_out_notice is Notice.PROVIDED
        assert core.sharing_opt_out is OptOut.OPTED_OUT
        assert core.sensitive_data_processing.genetic_data is OptOut.OPTED_OUT
        assert core.known_child_sensitive_data_consents.sell_personal_information is Consent.NO_CONSENT
        assert core.mspa_covered_transaction is True
        assert core.mspa_opt_out_option_mode is MspaMode.YES
        assert core.mspa_service_provider_mode is MspaMode.NO

    def test_california_with_gpc(self):
        """Code 2 fields decode to did not opt out and consent."""
        usca = UsCa.parse("BVqqqqpY.YA")
        assert usca.core.sale_opt_out is OptOut.DID_NOT_OPT_OUT
        assert usca.core.personal_data_consent is Consent.CONSENT
        assert usca.core.mspa_covered_transaction is True
        assert usca.gpc is True

    def test_california_wrong_version(self):
        """Only version 1 is defined for California."""
        with pytest.raises(MalformedSection):
            UsCa.parse("CVVVVVVVVWA.YA")

    def test_virginia(self):
        """Virginia has no GPC segment."""
        assert UsVa.parse("BAAAABA").core.mspa_covered_transaction is True
        core = UsVa.parse("BVVVVWY").core
        assert core.sensitive_data_processing.precise_geolocation_data is Consent.NO_CONSENT
        assert core.known_child_sensitive_data_consents is Consent.NO_CONSENT
        assert core.mspa_covered_transaction is False
        assert core.mspa_opt_out_option_mode is MspaMode.YES
        assert core.mspa_service_provider_mode is MspaMode.NO
        assert UsVa.parse("BVVVVWY").gpc is None
        assert UsVa.parse("BVVVVWY").to_dict()["gpc"] is None

    def test_virginia_rejects_gpc(self):
        """A state without GPC has no optional segments."""
        with pytest.raises(MalformedSection):
            UsVa.parse("BVVVVWY.YA")

    def test_colorado(self):
        """Colorado decodes with and without GPC."""
        assert UsCo.parse("BAAAAEA").core.mspa_covered_transaction is True
        usco = UsCo.parse("BVVVVVg.YA")
        assert usco.core.sensitive_data_processing.citizenship_data is Consent.NO_CONSENT
        assert usco.core.mspa_opt_out_option_mode is MspaMode.YES
        assert usco.gpc is True
        assert UsCo.parse("BVVVVVg").gpc is None

    def test_utah(self):
        """Utah has a sensitive data opt-out notice and no GPC."""
        assert UsUt.parse("BAAAAAQA").core.mspa_covered_transaction is True
        core = UsUt.parse("BVVVVVmA").core
        assert core.sensitive_data_processing_opt_out_notice is Notice.PROVIDED
        assert core.mspa_covered_transaction is False
        assert core.mspa_service_provider_mode is MspaMode.NO

    def test_connecticut(self):
        """Connecticut has three known child consents."""
        assert UsCt.parse("BAAAAAEA").core.mspa_covered_transaction is True
        usct = UsCt.parse("BVVVVVVg.YA")
        children = usct.core.known_child_sensitive_data_consents
        assert children.process_personal_data_from_13_to_16 is Consent.NO_CONSENT
        assert usct.gpc is True

    def test_connecticut_bad_segment(self):
        """An unknown optional segment type is malformed."""
        with pytest.raises(MalformedSection):
            UsCt.parse("BVVVVVVg.AA")

    def test_non_zero_padding(self):
        """Trailing set bits are rejected unless padding is lenient."""
        text = us_section([0] * 13 + [1, 0, 0])[:-1] + "B"
        with pytest.raises(MalformedSection):
            UsCo.parse(text)
        assert UsCo.parse(text, strict_padding=False).core.mspa_covered_transaction


# (section class, number of 2-bit fields after the version, has GPC)
STATE_LAYOUTS = [
    (UsCa, 20, True),
    (UsVa, 17, False),
    (UsCo, 16, True),
    (UsUt, 18, False),
    (UsCt, 19, True),
    (UsFl, 20, False),
    (UsMt, 20, True),
    (UsOr, 23, True),
    (UsTx, 18, True),
    (UsDe, 23, True),
    (UsIa, 18, True),
    (UsNe, 18, True),
    (UsNh, 20, True),
    (UsNj, 24, True),
    (UsTn, 18, True),
]


class TestStateLayouts:
    """Tests run against every state section layout."""

    @pytest.mark.parametrize("section_type,field_count,has_gpc", STATE_LAYOUTS)
    def test_all_not_applicable(self, section_type, field_count, has_gpc):
        """Zero codes decode with a covered transaction."""
        section = section_type.parse(us_section([0] * (field_count - 3) + [1, 0, 0]))
        assert section.core.sale_opt_out is OptOut.NOT_APPLICABLE
        assert section.core.mspa_covered_transaction is True
        assert section.core.mspa_service_provider_mode is MspaMode.NOT_APPLICABLE
        assert section.gpc is None

    @pytest.mark.parametrize("section_type,field_count,has_gpc", STATE_LAYOUTS)
    def test_mspa_fields_are_last(self, section_type, field_count, has_gpc):
        """The MSPA trio follows every other field."""
        section = section_type.parse(us_section([1] * (field_count - 3) + [2, 1, 2]))
        assert section.core.sale_opt_out is OptOut.OPTED_OUT
        assert section.core.mspa_covered_transaction is False
        assert section.core.mspa_opt_out_option_mode is MspaMode.YES
        assert section.core.mspa_service_provider_mode is MspaMode.NO

    @pytest.mark.parametrize("section_type,field_count,has_gpc", STATE_LAYOUTS)
    def test_gpc(self, section_type, field_count, has_gpc):
        """GPC decodes where defined and is rejected elsewhere."""
        text = us_section([0] * (field_count - 3) + [1, 0, 0], gpc=True)
        if has_gpc:
            assert section_type.parse(text).gpc is True
        else:
            with pytest.raises(MalformedSection):
                section_type.parse(text)

    @pytest.mark.parametrize("section_type,field_count,has_gpc", STATE_LAYOUTS)
    def test_version_2_rejected(self, section_type, field_count, has_gpc):
        """State sections are only defined at version 1."""
        with pytest.raises(MalformedSection):
            section_type.parse(us_section([0] * (field_count - 3) + [1, 0, 0], 2))

    def test_delaware_sensitive_data(self):
        """Delaware has nine sensitive data categories and five child consents."""
        codes = [0] * 5 + [0] * 8 + [2] + [0] * 4 + [1] + [0, 1, 0, 0]
        core = UsDe.parse(us_section(codes)).core
        assert core.sensitive_data_processing.precise_geolocation_data is Consent.CONSENT
        children = core.known_child_sensitive_data_consents
        assert children.process_personal_data_from_16_to_17 is Consent.NO_CONSENT
        assert core.additional_data_processing_consent is Consent.NOT_APPLICABLE

    def test_florida_child_consents(self):
        """Florida reads three child consents before additional processing."""
        codes = [0] * 13 + [0, 0, 2] + [1] + [1, 0, 0]
        core = UsFl.parse(us_section(codes)).core
        assert core.known_child_sensitive_data_consents.from_16_to_18 is Consent.CONSENT
        assert core.additional_data_processing_consent is Consent.NO_CONSENT

    def test_montana_starts_with_sharing_notice(self):
        """Montana's first field is its sharing notice."""
        core = UsMt.parse(us_section([1] + [0] * 16 + [1, 0, 0])).core
        assert core.sharing_notice is Notice.PROVIDED
        assert core.sale_opt_out_notice is Notice.NOT_APPLICABLE
