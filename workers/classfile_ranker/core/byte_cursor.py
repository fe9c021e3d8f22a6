"""
Byte cursor — bounds-checked, big-endian, forward-only reader.

Every read checks the remaining length itself. Counts and lengths inside a
class file come straight from the (possibly corrupt) input, so a single
upfront size check cannot protect later reads.
"""
import struct
from typing import Union

from classfile_ranker.core.errors import TruncationError

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")

Buffer = Union[bytes, bytearray, memoryview]


class ByteCursor:
    """
    Forward-only reader over an immutable buffer.

    *base_offset* shifts the offsets reported in TruncationError, so a
    cursor over an attribute body still reports positions relative to the
    start of the whole class file.
    """

    __slots__ = ("_buf", "_pos", "_base")

    def __init__(self, data: Buffer, base_offset: int = 0):
        self._buf = memoryview(data)
        self._pos = 0
        self._base = base_offset

    @property
    def position(self) -> int:
        """Absolute offset of the next unread byte."""
        return self._base + self._pos

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def _require(self, n: int) -> int:
        if n < 0 or n > len(self._buf) - self._pos:
            raise TruncationError(
                offset=self.position,
                needed=n,
                available=len(self._buf) - self._pos,
            )
        start = self._pos
        self._pos += n
        return start

    def read_u8(self) -> int:
        start = self._require(1)
        return self._buf[start]

    def read_u16(self) -> int:
        start = self._require(2)
        return _U16.unpack_from(self._buf, start)[0]

    def read_u32(self) -> int:
        start = self._require(4)
        return _U32.unpack_from(self._buf, start)[0]

    def read_bytes(self, n: int) -> memoryview:
        """Return a zero-copy view of the next *n* bytes."""
        start = self._require(n)
        return self._buf[start:start + n]

    def skip(self, n: int) -> None:
        self._require(n)
