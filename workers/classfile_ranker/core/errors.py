"""
Errors — typed failures raised while decoding class files and archives.

Every per-buffer failure derives from DecodeError and carries a
DecodeErrorKind plus a message naming the offending offset, index or tag.
InvalidContainerError is deliberately *not* a DecodeError: it aborts the
whole archive run instead of a single entry.
"""
from enum import Enum, unique
from typing import Optional


@unique
class DecodeErrorKind(str, Enum):
    BAD_MAGIC = "BAD_MAGIC"
    TRUNCATED = "TRUNCATED"
    UNKNOWN_CONSTANT_TAG = "UNKNOWN_CONSTANT_TAG"
    INVALID_REFERENCE = "INVALID_REFERENCE"
    ENTRY_UNREADABLE = "ENTRY_UNREADABLE"


class DecodeError(Exception):
    """Base class for failures local to one class-file buffer."""

    kind: DecodeErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        # Filled in by decode_class with the DecoderState that failed.
        self.state: Optional[str] = None


class BadMagicError(DecodeError):
    kind = DecodeErrorKind.BAD_MAGIC

    def __init__(self, observed: int, expected: int):
        super().__init__(
            f"Invalid class file: expected magic number 0x{expected:08X}, "
            f"got 0x{observed:08X}"
        )
        self.observed = observed
        self.expected = expected


class TruncationError(DecodeError):
    kind = DecodeErrorKind.TRUNCATED

    def __init__(self, offset: int, needed: int, available: int):
        super().__init__(
            f"Truncated input at offset {offset}: need {needed} bytes, "
            f"{available} available"
        )
        self.offset = offset
        self.needed = needed
        self.available = available


class UnknownConstantTagError(DecodeError):
    kind = DecodeErrorKind.UNKNOWN_CONSTANT_TAG

    def __init__(self, tag: int, index: int, offset: int):
        super().__init__(
            f"Unknown constant pool tag: {tag} at index {index} (offset {offset})"
        )
        self.tag = tag
        self.index = index
        self.offset = offset


class InvalidReferenceError(DecodeError):
    kind = DecodeErrorKind.INVALID_REFERENCE

    def __init__(self, index: int, expected: str, found: str):
        super().__init__(
            f"Invalid {expected} reference at index {index}: found {found}"
        )
        self.index = index
        self.expected = expected
        self.found = found


class EntryReadError(DecodeError):
    """Raised when an archive entry's bytes cannot be extracted."""

    kind = DecodeErrorKind.ENTRY_UNREADABLE

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot read archive entry {path}: {reason}")
        self.path = path


class InvalidContainerError(Exception):
    """The archive itself is not a readable ZIP container."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid JAR file: not a valid ZIP archive ({reason})")
        self.reason = reason
