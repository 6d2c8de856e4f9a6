"""Download sinks: where operation artifacts are handed over for saving."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from bulkpdf.config import PDF_MIME_TYPE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutputArtifact:
    """One produced file: its bytes and the name it is saved under."""

    data: bytes = field(repr=False)
    filename: str
    mime_type: str = PDF_MIME_TYPE


class DownloadSink(Protocol):
    """Receives finished artifacts. Emitting is fire-and-forget."""

    def emit(self, data: bytes, filename: str, mime_type: str = PDF_MIME_TYPE) -> None: ...


class DirectorySink:
    """Write each artifact into a directory, replacing files of the same name."""

    def __init__(self, directory: str | os.PathLike) -> None:
        self.directory = Path(directory)
        self.written: list[Path] = []

    def emit(self, data: bytes, filename: str, mime_type: str = PDF_MIME_TYPE) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Keep artifacts inside the target directory whatever the input name was
        path = self.directory / Path(filename).name
        path.write_bytes(data)
        self.written.append(path)
        logger.info("Saved %s (%d bytes)", path, len(data))


class MemorySink:
    """Collect artifacts in memory, in emission order."""

    def __init__(self) -> None:
        self.artifacts: list[OutputArtifact] = []

    def emit(self, data: bytes, filename: str, mime_type: str = PDF_MIME_TYPE) -> None:
        self.artifacts.append(OutputArtifact(bytes(data), filename, mime_type))
        logger.debug("Collected %s (%d bytes)", filename, len(data))

    @property
    def filenames(self) -> list[str]:
        return [a.filename for a in self.artifacts]

    def clear(self) -> None:
        self.artifacts.clear()
