"""
Constant pool — decode the class file's constant table.

Responsibilities:
  - Read every entry between index 1 and pool_count - 1.
  - Keep only what later resolution needs: Utf8 text, Class name indices,
    NameAndType index pairs.  Everything else becomes an OpaqueEntry.
  - Reserve the second slot of Long / Double entries as an unresolvable
    placeholder.
  - Stop hard on an unknown tag: its payload width is unknown, so any
    guess would corrupt every later offset.

Reference: JVMS §4.4 (The Constant Pool).
"""
from dataclasses import dataclass
from enum import IntEnum, unique
from typing import List, Optional, Tuple, Union

from classfile_ranker.core.byte_cursor import ByteCursor
from classfile_ranker.core.errors import (
    InvalidReferenceError,
    UnknownConstantTagError,
)


@unique
class ConstantTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


# Payload widths of tags whose content is skipped, never dereferenced.
_OPAQUE_WIDTHS = {
    ConstantTag.INTEGER: 4,
    ConstantTag.FLOAT: 4,
    ConstantTag.LONG: 8,
    ConstantTag.DOUBLE: 8,
    ConstantTag.STRING: 2,
    ConstantTag.FIELDREF: 4,
    ConstantTag.METHODREF: 4,
    ConstantTag.INTERFACE_METHODREF: 4,
    ConstantTag.METHOD_HANDLE: 3,
    ConstantTag.METHOD_TYPE: 2,
    ConstantTag.DYNAMIC: 4,
    ConstantTag.INVOKE_DYNAMIC: 4,
    ConstantTag.MODULE: 2,
    ConstantTag.PACKAGE: 2,
}

_DOUBLE_SLOT = frozenset({ConstantTag.LONG, ConstantTag.DOUBLE})


# ── Entry variants ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Utf8Entry:
    text: str


@dataclass(frozen=True)
class ClassRefEntry:
    name_index: int


@dataclass(frozen=True)
class NameAndTypeEntry:
    name_index: int
    descriptor_index: int


@dataclass(frozen=True)
class OpaqueEntry:
    tag: ConstantTag


ConstantPoolEntry = Union[Utf8Entry, ClassRefEntry, NameAndTypeEntry, OpaqueEntry]


def _describe(entry: Optional[ConstantPoolEntry]) -> str:
    if entry is None:
        return "empty slot"
    if isinstance(entry, OpaqueEntry):
        return entry.tag.name
    return type(entry).__name__


class ConstantPool:
    """
    Finished, 1-indexed constant table.

    Slot 0 and the slot after each Long / Double hold None.
    """

    def __init__(self, slots: List[Optional[ConstantPoolEntry]]):
        self._slots = slots

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, index: int) -> Optional[ConstantPoolEntry]:
        return self._slots[index]

    def _slot(self, index: int, expected: str) -> Optional[ConstantPoolEntry]:
        if index <= 0 or index >= len(self._slots):
            raise InvalidReferenceError(index, expected, "out-of-range index")
        return self._slots[index]

    def resolve_utf8(self, index: int) -> str:
        entry = self._slot(index, "UTF8")
        if not isinstance(entry, Utf8Entry):
            raise InvalidReferenceError(index, "UTF8", _describe(entry))
        return entry.text

    def resolve_class_name(self, index: int) -> str:
        """Resolve a Class entry to its internal-form name (``a/b/C``)."""
        entry = self._slot(index, "class")
        if not isinstance(entry, ClassRefEntry):
            raise InvalidReferenceError(index, "class", _describe(entry))
        return self.resolve_utf8(entry.name_index)


def _read_entry(
    cursor: ByteCursor, tag_value: int, index: int, tag_offset: int,
) -> Tuple[ConstantPoolEntry, int]:
    """Consume one entry's payload; return (entry, slots_consumed)."""
    try:
        tag = ConstantTag(tag_value)
    except ValueError:
        raise UnknownConstantTagError(tag_value, index, tag_offset) from None

    if tag == ConstantTag.UTF8:
        length = cursor.read_u16()
        raw = cursor.read_bytes(length)
        return Utf8Entry(bytes(raw).decode("utf-8", errors="replace")), 1

    if tag == ConstantTag.CLASS:
        return ClassRefEntry(cursor.read_u16()), 1

    if tag == ConstantTag.NAME_AND_TYPE:
        name_index = cursor.read_u16()
        descriptor_index = cursor.read_u16()
        return NameAndTypeEntry(name_index, descriptor_index), 1

    cursor.skip(_OPAQUE_WIDTHS[tag])
    return OpaqueEntry(tag), 2 if tag in _DOUBLE_SLOT else 1


def read_constant_pool(cursor: ByteCursor) -> ConstantPool:
    """
    Read pool_count and the entries that follow it.

    On return *cursor* sits on the first byte after the pool.
    """
    pool_count = cursor.read_u16()
    slots: List[Optional[ConstantPoolEntry]] = [None]

    index = 1
    while index < pool_count:
        tag_offset = cursor.position
        tag_value = cursor.read_u8()
        entry, width = _read_entry(cursor, tag_value, index, tag_offset)
        slots.append(entry)
        if width == 2:
            slots.append(None)
        index += width

    return ConstantPool(slots)
