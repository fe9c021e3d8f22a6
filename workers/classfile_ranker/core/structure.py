"""
Structure walker — step over the fixed class-file sections.

Each section is always present in the format, even when its count is zero,
and is consumed in strict order: header, interfaces, fields, (methods,
handled by method_extractor), class attributes.
"""
from dataclasses import dataclass

from classfile_ranker.core.byte_cursor import ByteCursor
from classfile_ranker.core.constant_pool import ConstantPool

# access_flags (2) + name_index (2) + descriptor_index (2)
MEMBER_HEADER_SIZE = 6


@dataclass(frozen=True)
class ClassHeader:
    access_flags: int
    class_name: str          # internal form, e.g. "java/lang/String"
    super_class_index: int


def read_class_header(cursor: ByteCursor, pool: ConstantPool) -> ClassHeader:
    """Read access_flags, this_class and super_class."""
    access_flags = cursor.read_u16()
    this_class = cursor.read_u16()
    super_class = cursor.read_u16()
    return ClassHeader(
        access_flags=access_flags,
        class_name=pool.resolve_class_name(this_class),
        super_class_index=super_class,
    )


def skip_interfaces(cursor: ByteCursor) -> int:
    """Skip the interface index table; return the interface count."""
    count = cursor.read_u16()
    cursor.skip(count * 2)
    return count


def skip_attributes(cursor: ByteCursor) -> int:
    """
    Skip an attribute table without interpreting any attribute.

    Works for attribute kinds this decoder has never heard of, standard or
    vendor-specific, because every attribute declares its own length.
    Returns the attribute count.
    """
    count = cursor.read_u16()
    for _ in range(count):
        cursor.skip(2)                  # attribute_name_index
        length = cursor.read_u32()
        cursor.skip(length)
    return count


def skip_fields(cursor: ByteCursor) -> int:
    """Skip the field table; return the field count."""
    count = cursor.read_u16()
    for _ in range(count):
        cursor.skip(MEMBER_HEADER_SIZE)
        skip_attributes(cursor)
    return count
