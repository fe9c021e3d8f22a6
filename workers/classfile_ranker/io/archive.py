"""
Archive — enumerate entries of a JAR (ZIP) container.

Responsibilities:
  - Validate that the buffer is a readable ZIP container.
  - Yield entries in the container's own enumeration order.
  - Defer decompression of each entry until its bytes are asked for.

This module intentionally does NOT decode class files.
"""
import io
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import Iterator, Optional

from classfile_ranker.core.errors import EntryReadError, InvalidContainerError


@dataclass(frozen=True)
class ArchiveEntry:
    """One named member of the archive; bytes are read on demand."""

    path: str
    is_directory: bool
    file_size: int
    _archive: "JarArchive" = field(repr=False, compare=False)
    _info: zipfile.ZipInfo = field(repr=False, compare=False)

    def read(self) -> bytes:
        return self._archive.read(self._info)


class JarArchive:
    """
    Holds an open ZipFile over an in-memory archive buffer.

    Usage::

        with JarArchive(archive_bytes) as archive:
            for entry in archive.iter_entries():
                data = entry.read()

    The ZipFile stays open for the lifetime of the context manager because
    entry bytes are inflated lazily.
    """

    def __init__(self, archive_bytes: bytes):
        self._bytes = archive_bytes
        self._zip: Optional[zipfile.ZipFile] = None

    # -- context manager -------------------------------------------------------

    def __enter__(self) -> "JarArchive":
        try:
            self._zip = zipfile.ZipFile(io.BytesIO(self._bytes))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, ValueError) as e:
            raise InvalidContainerError(str(e)) from e
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._zip is not None:
            self._zip.close()
        return False

    # -- public API ------------------------------------------------------------

    @property
    def zip(self) -> zipfile.ZipFile:
        assert self._zip is not None, "JarArchive not entered as context manager"
        return self._zip

    def iter_entries(self) -> Iterator[ArchiveEntry]:
        """Yield every member, directories included, in archive order."""
        for info in self.zip.infolist():
            yield ArchiveEntry(
                path=info.filename,
                is_directory=info.is_dir(),
                file_size=info.file_size,
                _archive=self,
                _info=info,
            )

    def read(self, info: zipfile.ZipInfo) -> bytes:
        """Inflate one member; failures are local to that member."""
        try:
            return self.zip.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError,
                RuntimeError, EOFError) as e:
            raise EntryReadError(info.filename, str(e)) from e
