"""
Building blocks shared by the US national and state sections.

Every US section is a core segment of 2-bit enumerated fields behind a
6-bit version, optionally followed by a GPC segment. The per-state record
types declare their fields in wire order; ``read_fields`` walks the
dataclass fields and reads each one according to its type:

- an ``IntEnum`` field is a 2-bit code that must be a declared member
- a nested dataclass is read recursively (sensitive data and child blocks)
- a field with a ``reader`` entry in its metadata uses that callable
"""

import dataclasses
from enum import IntEnum
from typing import Any, Optional, Type, TypeVar

from ..core.bit_reader import BitReader
from ..errors import MalformedSection
from .segments import finish, read_version, split_segments

FIELD_BITS = 2
GPC_SEGMENT_TYPE_BITS = 2
GPC_SEGMENT_TYPE = 1

T = TypeVar("T")


class Notice(IntEnum):
    NOT_APPLICABLE = 0
    PROVIDED = 1
    NOT_PROVIDED = 2


class OptOut(IntEnum):
    NOT_APPLICABLE = 0
    OPTED_OUT = 1
    DID_NOT_OPT_OUT = 2


class Consent(IntEnum):
    NOT_APPLICABLE = 0
    NO_CONSENT = 1
    CONSENT = 2


class MspaMode(IntEnum):
    NOT_APPLICABLE = 0
    YES = 1
    NO = 2


def read_enum(reader: BitReader, enum_type: Type[IntEnum], name: str) -> IntEnum:
    """Read a 2-bit code and map it onto enum_type."""
    offset = reader.position
    code = reader.read_uint(FIELD_BITS)
    try:
        return enum_type(code)
    except ValueError:
        raise MalformedSection(
            f"invalid value {code} for {name}",
            bit_offset=offset,
            field=name,
        )


def read_mspa_covered_transaction(reader: BitReader) -> bool:
    """Read the MSPA covered transaction flag, encoded 1 (yes) or 2 (no)."""
    offset = reader.position
    code = reader.read_uint(FIELD_BITS)
    if code == 1:
        return True
    if code == 2:
        return False
    raise MalformedSection(
        f"invalid value {code} for mspa_covered_transaction (expected 1 or 2)",
        bit_offset=offset,
        field="mspa_covered_transaction",
    )


def mspa_covered_transaction_field() -> Any:
    """Dataclass field for the MSPA covered transaction flag."""
    return dataclasses.field(metadata={"reader": read_mspa_covered_transaction})


def read_fields(reader: BitReader, record_type: Type[T]) -> T:
    """Read a US record by walking its dataclass fields in order."""
    values = {}
    for f in dataclasses.fields(record_type):
        custom_reader = f.metadata.get("reader")
        if custom_reader is not None:
            values[f.name] = custom_reader(reader)
        elif dataclasses.is_dataclass(f.type):
            values[f.name] = read_fields(reader, f.type)
        elif isinstance(f.type, type) and issubclass(f.type, IntEnum):
            values[f.name] = read_enum(reader, f.type, f.name)
        else:
            raise TypeError(f"{record_type.__name__}.{f.name} has no bit layout")
    return record_type(**values)


def read_gpc_segment(reader: BitReader) -> bool:
    """Read the optional Global Privacy Control segment."""
    segment_type = reader.read_uint(GPC_SEGMENT_TYPE_BITS)
    if segment_type != GPC_SEGMENT_TYPE:
        raise MalformedSection(
            f"unknown US segment type {segment_type}", field="segment_type"
        )
    return reader.read_bool()


def decode_us_section(
    text: str,
    core_type: Type[T],
    has_gpc: bool,
    strict_padding: bool = True,
    version: int = 1,
) -> tuple[T, Optional[bool]]:
    """
    Decode a US state section.

    Args:
        text: Section string (core plus optional segments)
        core_type: Dataclass describing the core fields in wire order
        has_gpc: Whether the state defines the GPC segment
        strict_padding: Reject non-zero trailing bits
        version: Required section version

    Returns:
        The core record and the GPC flag (None when absent)
    """
    core_reader, *segment_readers = split_segments(text)
    read_version(core_reader, version)
    core = read_fields(core_reader, core_type)
    finish(core_reader, strict_padding)
    return core, read_optional_gpc(segment_readers, has_gpc, strict_padding)


def read_optional_gpc(
    segment_readers: list[BitReader],
    has_gpc: bool,
    strict_padding: bool = True,
) -> Optional[bool]:
    """Read the GPC flag from the optional segments, if any."""
    if not segment_readers:
        return None
    if not has_gpc:
        raise MalformedSection("this section defines no optional segments")
    if len(segment_readers) > 1:
        raise MalformedSection("duplicate GPC segment", field="segment_type")
    reader = segment_readers[0]
    gpc = read_gpc_segment(reader)
    finish(reader, strict_padding)
    return gpc
