"""
Class decoder — raw class-file bytes → ClassDecodeResult.

A strictly linear pipeline: every state runs once, in order, and either
advances or raises.  There is no retry and no partial result; a failure
discards all work for this buffer and leaves other buffers untouched.
"""
from dataclasses import dataclass
from enum import Enum, unique
from typing import Tuple

from classfile_ranker.core.byte_cursor import Buffer, ByteCursor
from classfile_ranker.core.constant_pool import read_constant_pool
from classfile_ranker.core.errors import BadMagicError, DecodeError
from classfile_ranker.core.method_extractor import (
    CODE_ATTRIBUTE,
    MethodRecord,
    extract_methods,
)
from classfile_ranker.core.structure import (
    read_class_header,
    skip_attributes,
    skip_fields,
    skip_interfaces,
)

MAGIC = 0xCAFEBABE


@unique
class DecoderState(str, Enum):
    EXPECT_MAGIC = "EXPECT_MAGIC"
    EXPECT_VERSION = "EXPECT_VERSION"
    EXPECT_POOL = "EXPECT_POOL"
    EXPECT_HEADER_AND_CLASS_NAME = "EXPECT_HEADER_AND_CLASS_NAME"
    EXPECT_INTERFACES = "EXPECT_INTERFACES"
    EXPECT_FIELDS = "EXPECT_FIELDS"
    EXPECT_METHODS = "EXPECT_METHODS"
    EXPECT_CLASS_ATTRIBUTES = "EXPECT_CLASS_ATTRIBUTES"
    DONE = "DONE"


@dataclass(frozen=True)
class ClassDecodeResult:
    """Structural metadata of one decoded class file."""

    class_name: str                       # internal form: "pkg/Outer$Inner"
    major_version: int
    minor_version: int
    methods: Tuple[MethodRecord, ...] = ()

    @property
    def display_name(self) -> str:
        """Class name with '.' separators: "pkg.Outer$Inner"."""
        return self.class_name.replace("/", ".")


def decode_class(data: Buffer, code_attribute: str = CODE_ATTRIBUTE) -> ClassDecodeResult:
    """
    Decode one class file.

    Raises
    ------
    DecodeError
        BadMagicError, TruncationError, UnknownConstantTagError or
        InvalidReferenceError.  ``err.state`` names the DecoderState that
        failed.
    """
    cursor = ByteCursor(data)
    state = DecoderState.EXPECT_MAGIC

    try:
        magic = cursor.read_u32()
        if magic != MAGIC:
            raise BadMagicError(observed=magic, expected=MAGIC)

        state = DecoderState.EXPECT_VERSION
        minor_version = cursor.read_u16()
        major_version = cursor.read_u16()

        state = DecoderState.EXPECT_POOL
        pool = read_constant_pool(cursor)

        state = DecoderState.EXPECT_HEADER_AND_CLASS_NAME
        header = read_class_header(cursor, pool)

        state = DecoderState.EXPECT_INTERFACES
        skip_interfaces(cursor)

        state = DecoderState.EXPECT_FIELDS
        skip_fields(cursor)

        state = DecoderState.EXPECT_METHODS
        methods = extract_methods(cursor, pool, code_attribute)

        state = DecoderState.EXPECT_CLASS_ATTRIBUTES
        skip_attributes(cursor)
    except DecodeError as e:
        e.state = state.value
        raise

    return ClassDecodeResult(
        class_name=header.class_name,
        major_version=major_version,
        minor_version=minor_version,
        methods=tuple(methods),
    )
