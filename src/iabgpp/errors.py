"""
Exception hierarchy for GPP parsing and section decoding.

Parsing failures (the container or header is unusable) derive from
ParseError; failures confined to a single section derive from DecodeError.
Both share GppError so callers can catch everything in one place.
"""

from typing import Optional


class GppError(Exception):
    """Base exception for all GPP errors."""

    def __init__(
        self,
        message: str,
        section_id: Optional[int] = None,
        bit_offset: Optional[int] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.section_id = section_id
        self.bit_offset = bit_offset
        self.field = field

    def to_dict(self) -> dict:
        """Serialize the error for JSON output."""
        data = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.section_id is not None:
            data["section_id"] = int(self.section_id)
        if self.bit_offset is not None:
            data["bit_offset"] = self.bit_offset
        if self.field:
            data["field"] = self.field
        return data


class ParseError(GppError):
    """Raised when a GPP string cannot be parsed."""
    pass


class MalformedInput(ParseError):
    """Raised on bad delimiter structure, bad base64 or an unusable header."""
    pass


class UnsupportedVersion(ParseError):
    """Raised when the header declares a GPP version newer than supported."""

    def __init__(self, version: int, supported: int):
        super().__init__(
            f"unsupported GPP version {version} (highest supported is {supported})"
        )
        self.version = version
        self.supported = supported


class DecodeError(GppError):
    """Raised when a single section cannot be decoded."""
    pass


class SectionNotPresent(DecodeError):
    """Raised when the requested section id is not in the GPP string."""

    def __init__(self, section_id: int):
        super().__init__(
            f"section {int(section_id)} is not present in this GPP string",
            section_id=section_id,
        )


class UnknownSectionId(DecodeError):
    """Raised when a section id has no registered decoder."""

    def __init__(self, section_id: int):
        super().__init__(
            f"no decoder registered for section id {int(section_id)}",
            section_id=section_id,
        )


class TruncatedInput(DecodeError):
    """Raised when a read runs past the end of a segment."""
    pass


class MalformedSection(DecodeError):
    """Raised when a section payload is internally inconsistent."""
    pass
