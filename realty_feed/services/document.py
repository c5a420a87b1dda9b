"""Load and cache the parsed feed document."""

from __future__ import annotations

import gzip
import logging
import lzma
import tarfile
import threading
import xml.etree.ElementTree as ET
import zipfile
import zlib
from contextlib import ExitStack, closing

from ..core import ImportSource, ResolvedDocument
from ..core.exceptions import FormatError
from .source import ArchiveUnwrapper, resolve_source

logger = logging.getLogger(__name__)

# Errors raised while reading a document out of a damaged container.
_CORRUPT_CONTENT_ERRORS = (
    ET.ParseError,
    EOFError,
    gzip.BadGzipFile,
    lzma.LZMAError,
    tarfile.TarError,
    zipfile.BadZipFile,
    zlib.error,
)


class DocumentLoader:
    """Parse the feed once and hand out the same tree afterwards."""

    def __init__(self, source: ImportSource, *, unwrapper: ArchiveUnwrapper | None = None):
        self.source = source
        self.unwrapper = unwrapper or ArchiveUnwrapper()
        self._document: ResolvedDocument | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._document is not None

    @property
    def document(self) -> ResolvedDocument:
        return self.load()

    def load(self) -> ResolvedDocument:
        """Return the parsed document, reading the source on first use."""

        if self._document is None:
            with self._lock:
                if self._document is None:
                    self._document = self._read()
        return self._document

    def _read(self) -> ResolvedDocument:
        self.source.validate()
        with ExitStack() as stack:
            raw = stack.enter_context(closing(resolve_source(self.source)))
            unwrapped = self.unwrapper.unwrap(raw, stack)
            try:
                tree = ET.parse(unwrapped.stream)
            except _CORRUPT_CONTENT_ERRORS as exc:
                raise self._malformed(exc) from exc
            except OSError as exc:
                # Decompressors report bad data as an OSError without an errno.
                if exc.errno is not None or not unwrapped.archive_format:
                    raise
                raise self._malformed(exc) from exc

        if unwrapped.archive_format:
            logger.info(
                "Loaded feed %s from %s archive entry %s",
                self.source.describe(),
                unwrapped.archive_format,
                unwrapped.entry_name or "<compressed stream>",
            )
        else:
            logger.info("Loaded feed %s", self.source.describe())

        return ResolvedDocument(
            tree=tree,
            archive_format=unwrapped.archive_format,
            entry_name=unwrapped.entry_name,
        )

    def _malformed(self, exc: Exception) -> FormatError:
        return FormatError(
            "feed is not a well-formed XML document",
            details={"source": self.source.describe(), "reason": str(exc)},
        )
