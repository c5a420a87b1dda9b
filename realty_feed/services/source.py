"""Resolve the feed byte stream and unwrap it from an archive when needed."""

from __future__ import annotations

import bz2
import gzip
import io
import logging
import lzma
import tarfile
import zipfile
from contextlib import ExitStack
from dataclasses import dataclass
from typing import BinaryIO, Callable, Union

from ..core import ImportSource
from ..core.exceptions import FormatError, OperationError

logger = logging.getLogger(__name__)

PROBE_SIZE = 512
TAR_MAGIC_OFFSET = 257

ARCHIVE_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"PK\x03\x04", "zip"),
    (b"PK\x05\x06", "zip"),
    (b"\x1f\x8b", "gzip"),
    (b"BZh", "bzip2"),
    (b"\xfd7zXZ\x00", "xz"),
)

# Compressed formats that may hold either a tarball or a single document.
_SINGLE_STREAM_OPENERS: dict[str, Callable[[BinaryIO], BinaryIO]] = {
    "gzip": lambda raw: gzip.GzipFile(fileobj=raw, mode="rb"),
    "bzip2": lambda raw: bz2.BZ2File(raw, mode="rb"),
    "xz": lambda raw: lzma.LZMAFile(raw, mode="rb"),
}


def resolve_source(source: ImportSource) -> BinaryIO:
    """Return the byte stream described by ``source``.

    Opening a path is left to the platform: a missing or unreadable file
    raises :class:`OSError` unchanged.
    """

    source.validate()
    if source.path is not None:
        return open(source.path, "rb")
    return source.stream  # type: ignore[return-value]


def detect_archive_format(header: bytes) -> str | None:
    """Return the archive format announced by the leading bytes, if any."""

    for signature, name in ARCHIVE_SIGNATURES:
        if header.startswith(signature):
            return name
    if header[TAR_MAGIC_OFFSET:TAR_MAGIC_OFFSET + 5] == b"ustar":
        return "tar"
    return None


@dataclass(frozen=True, slots=True)
class ArchiveDetected:
    archive_format: str
    stream: BinaryIO


@dataclass(frozen=True, slots=True)
class PlainDocument:
    stream: BinaryIO


@dataclass(frozen=True, slots=True)
class ProbeFailed:
    reason: str


ProbeResult = Union[ArchiveDetected, PlainDocument, ProbeFailed]


@dataclass(frozen=True, slots=True)
class UnwrappedStream:
    """The stream handed to the XML parser plus its provenance."""

    stream: BinaryIO
    archive_format: str | None = None
    entry_name: str | None = None


class ArchiveUnwrapper:
    """Select the document stream from a raw feed stream."""

    def __init__(self, *, probe_size: int = PROBE_SIZE):
        self.probe_size = probe_size

    def probe(self, stream: BinaryIO) -> ProbeResult:
        """Classify ``stream`` as an archive or a plain document.

        Probing consumes the leading bytes, so a plain document must be
        rewound. Forward-only archives are buffered in memory because the
        archive readers need random access.
        """

        header = _read_exactly(stream, self.probe_size)
        archive_format = detect_archive_format(header)
        seekable = _is_seekable(stream)

        if archive_format is None:
            if not seekable:
                return ProbeFailed("cannot seek file to reset reading")
            stream.seek(0)
            return PlainDocument(stream)

        if seekable:
            stream.seek(0)
            return ArchiveDetected(archive_format, stream)
        return ArchiveDetected(archive_format, io.BytesIO(header + stream.read()))

    def unwrap(self, stream: BinaryIO, stack: ExitStack) -> UnwrappedStream:
        """Return the stream to parse; archive handles are registered on ``stack``."""

        result = self.probe(stream)
        if isinstance(result, ProbeFailed):
            raise OperationError(result.reason)
        if isinstance(result, PlainDocument):
            return UnwrappedStream(stream=result.stream)

        logger.debug("Feed stream looks like a %s archive", result.archive_format)
        if result.archive_format == "zip":
            return self._open_zip_entry(result.stream, stack)
        return self._open_tar_or_compressed(result, stack)

    def _open_zip_entry(self, raw: BinaryIO, stack: ExitStack) -> UnwrappedStream:
        try:
            archive = stack.enter_context(zipfile.ZipFile(raw))
        except zipfile.BadZipFile as exc:
            raise FormatError("corrupt zip archive", details={"reason": str(exc)}) from exc

        for info in archive.infolist():
            if info.is_dir():
                continue
            handle = stack.enter_context(archive.open(info))
            return UnwrappedStream(stream=handle, archive_format="zip", entry_name=info.filename)
        raise FormatError("cannot find a file in archive")

    def _open_tar_or_compressed(self, detected: ArchiveDetected, stack: ExitStack) -> UnwrappedStream:
        raw = detected.stream
        try:
            archive = tarfile.open(fileobj=raw, mode="r:*")
        except tarfile.ReadError as exc:
            opener = _SINGLE_STREAM_OPENERS.get(detected.archive_format)
            if opener is None:
                raise FormatError("corrupt tar archive", details={"reason": str(exc)}) from exc
            raw.seek(0)
            handle = stack.enter_context(opener(raw))
            return UnwrappedStream(stream=handle, archive_format=detected.archive_format)

        stack.enter_context(archive)
        for member in archive:
            if member.isdir():
                continue
            handle = archive.extractfile(member)
            if handle is None:
                continue
            stack.enter_context(handle)
            return UnwrappedStream(stream=handle, archive_format="tar", entry_name=member.name)
        raise FormatError("cannot find a file in archive")


def _is_seekable(stream: BinaryIO) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable and seekable())


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)
