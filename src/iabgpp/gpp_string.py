"""
GPP string parsing and on-demand section decoding.

A GPP string is a header segment followed by one segment per section,
joined with ``~``:

    DBACNY~CPXxRfAPXxRfAAfKABENB-CgAAAAAAAAAAYgAAAAAAAA~1YNN

Parsing validates the container and decodes the header only. Sections are
decoded when first requested and cached on the instance.
"""

import threading
from typing import Iterator, Optional, Type, TypeVar, Union

from .config import DecoderConfig, get_decoder_config
from .core.base64 import is_base64url
from .core.header import GppHeader, decode_header
from .errors import DecodeError, GppError, MalformedInput, SectionNotPresent
from .logging import decoder_logger, log_execution_time
from .models.section_id import SECTION_API_PREFIXES, SectionId, section_name
from .sections import SectionValue, decode_section_str
from .sections.segments import SEGMENT_SEPARATOR

SECTION_SEPARATOR = "~"

T = TypeVar("T")

logger = decoder_logger()


def split_gpp_string(text: str, max_length: int = 0) -> list[str]:
    """
    Split a GPP string into its segments and validate their alphabet.

    Raises:
        MalformedInput: Empty input, an empty segment or sub-segment, a
            character outside base64url, or input over max_length
    """
    if not text:
        raise MalformedInput("empty GPP string")
    if max_length and len(text) > max_length:
        raise MalformedInput(
            f"GPP string is {len(text)} characters, limit is {max_length}"
        )

    segments = text.split(SECTION_SEPARATOR)
    for index, segment in enumerate(segments):
        if not segment:
            raise MalformedInput(f"segment {index} is empty")
        for part in segment.split(SEGMENT_SEPARATOR):
            if not is_base64url(part):
                raise MalformedInput(
                    f"segment {index} is not valid base64url: {segment!r}"
                )
    return segments


class GppString:
    """
    A parsed GPP string.

    Args:
        text: Raw GPP string
        config: Decoder settings (uses the global config if not provided)

    Raises:
        MalformedInput: Bad container structure or header
        UnsupportedVersion: Header version newer than supported
    """

    def __init__(self, text: str, config: Optional[DecoderConfig] = None):
        self._config = config or get_decoder_config()
        header_text, *section_texts = split_gpp_string(
            text, self._config.max_length
        )
        self.raw = text
        self.header: GppHeader = decode_header(header_text)

        if len(self.header.section_ids) != len(section_texts):
            raise MalformedInput(
                f"ids do not match sections (number of ids "
                f"{len(self.header.section_ids)}, number of sections "
                f"{len(section_texts)})"
            )

        self._sections: dict[Union[SectionId, int], str] = dict(
            zip(self.header.section_ids, section_texts)
        )
        self._cache: dict[Union[SectionId, int], SectionValue] = {}
        self._lock = threading.Lock()

    @classmethod
    def parse(cls, text: str, config: Optional[DecoderConfig] = None) -> "GppString":
        return cls(text, config)

    @property
    def version(self) -> int:
        return self.header.version

    @property
    def section_ids(self) -> tuple[Union[SectionId, int], ...]:
        """Section ids in header order. Unknown ids appear as plain ints."""
        return self.header.section_ids

    def section(self, section_id: int) -> Optional[str]:
        """Raw text of a section, or None if it is not present."""
        return self._sections.get(section_id)

    def sections(self) -> Iterator[tuple[Union[SectionId, int], str]]:
        """Iterate over (section id, raw section text) in header order."""
        return iter(self._sections.items())

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._sections

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        ids = ", ".join(str(int(section_id)) for section_id in self.section_ids)
        return f"GppString(version={self.version}, section_ids=[{ids}])"

    def decode_section(self, section_id: int) -> SectionValue:
        """
        Decode a section, caching the result.

        Repeated calls return the same cached object. Failures are not
        cached, so every call for a broken section raises again.

        Raises:
            SectionNotPresent: The id is not in this string
            UnknownSectionId: The id has no registered decoder
            TruncatedInput: The payload ends before its fields do
            MalformedSection: The payload is internally inconsistent
        """
        section_id = SectionId.lookup(section_id)
        cached = self._cache.get(section_id)
        if cached is not None:
            return cached

        text = self._sections.get(section_id)
        if text is None:
            raise SectionNotPresent(section_id)

        section = decode_section_str(
            section_id, text, strict_padding=self._config.strict_padding
        )
        with self._lock:
            # A concurrent first decode may have won; keep its value
            return self._cache.setdefault(section_id, section)

    def decode(self, section_type: Type[T]) -> T:
        """
        Decode a section by its class.

        Example:
            tcf = gpp.decode(TcfEuV2)
        """
        return self.decode_section(section_type.section_id)

    @log_execution_time(logger)
    def decode_all(self) -> dict[Union[SectionId, int], Union[SectionValue, DecodeError]]:
        """
        Decode every section in header order.

        A failing section is reported as its exception in the result and
        does not stop the others from being decoded.
        """
        results: dict[Union[SectionId, int], Union[SectionValue, DecodeError]] = {}
        for section_id in self.section_ids:
            try:
                results[section_id] = self.decode_section(section_id)
            except DecodeError as e:
                logger.warning(
                    "Section failed to decode",
                    section_id=int(section_id),
                    error=type(e).__name__,
                    reason=e.message,
                )
                results[section_id] = e
        return results

    def decode_all_sections(self) -> list[Union[SectionValue, DecodeError]]:
        """Decode every section, returning results in header order."""
        return list(self.decode_all().values())

    def to_dict(self) -> dict:
        """Header plus every section, errors included, as JSON-ready data."""
        sections = []
        for section_id, result in self.decode_all().items():
            entry = {
                "id": int(section_id),
                "name": section_name(section_id),
            }
            prefix = SECTION_API_PREFIXES.get(section_id)
            if prefix:
                entry["api_prefix"] = prefix
            if isinstance(result, GppError):
                entry["error"] = result.to_dict()
            else:
                entry["data"] = result.to_dict()
            sections.append(entry)
        return {
            "version": self.version,
            "section_ids": [int(section_id) for section_id in self.section_ids],
            "sections": sections,
        }


def parse(text: str, config: Optional[DecoderConfig] = None) -> GppString:
    """
    Parse a GPP string.

    Args:
        text: Raw GPP string
        config: Optional decoder settings

    Returns:
        GppString with its header decoded; sections decode on demand
    """
    return GppString(text, config)
