"""
Method extractor — name, descriptor and bytecode length for every method.

The Code attribute body is taken as one bounds-checked slice of its declared
length, and code_length is read from a sub-cursor over that slice.  The main
cursor therefore always ends exactly one declared length past the attribute
header, whatever the body contains.
"""
from dataclasses import dataclass
from typing import List

from classfile_ranker.core.byte_cursor import ByteCursor
from classfile_ranker.core.constant_pool import ConstantPool

CODE_ATTRIBUTE = "Code"


@dataclass(frozen=True)
class MethodRecord:
    """One method of a decoded class."""

    name: str
    descriptor: str
    bytecode_size: int = 0     # 0 when there is no Code attribute


def _code_length(body: memoryview, body_offset: int) -> int:
    """Read code_length from a Code attribute body."""
    sub = ByteCursor(body, base_offset=body_offset)
    sub.skip(2)    # max_stack
    sub.skip(2)    # max_locals
    return sub.read_u32()


def _read_method_attributes(
    cursor: ByteCursor,
    pool: ConstantPool,
    code_attribute: str,
) -> int:
    """Walk one method's attribute table and return its bytecode size."""
    bytecode_size = 0
    count = cursor.read_u16()
    for _ in range(count):
        name_index = cursor.read_u16()
        length = cursor.read_u32()
        name = pool.resolve_utf8(name_index)

        if name == code_attribute:
            body_offset = cursor.position
            body = cursor.read_bytes(length)
            bytecode_size = _code_length(body, body_offset)
        else:
            cursor.skip(length)

    return bytecode_size


def extract_methods(
    cursor: ByteCursor,
    pool: ConstantPool,
    code_attribute: str = CODE_ATTRIBUTE,
) -> List[MethodRecord]:
    """Read the method count and every method_info that follows."""
    count = cursor.read_u16()
    methods: List[MethodRecord] = []

    for _ in range(count):
        cursor.skip(2)                      # access_flags
        name_index = cursor.read_u16()
        descriptor_index = cursor.read_u16()

        name = pool.resolve_utf8(name_index)
        descriptor = pool.resolve_utf8(descriptor_index)

        methods.append(
            MethodRecord(
                name=name,
                descriptor=descriptor,
                bytecode_size=_read_method_attributes(cursor, pool, code_attribute),
            )
        )

    return methods
