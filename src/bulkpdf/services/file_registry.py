"""File registry: the ordered working set of uploaded files."""

from __future__ import annotations

import logging
import mimetypes
import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from bulkpdf.config import IMAGE_MIME_PREFIX, PDF_MIME_TYPE
from bulkpdf.utils.exceptions import ReorderError
from bulkpdf.utils.format_utils import format_file_size
from bulkpdf.utils.i18n import _

logger = logging.getLogger(__name__)

ByteReader = Callable[[], bytes]


def guess_mime_type(name: str) -> str:
    """Guess a MIME type from a file name, defaulting to octet-stream."""
    mime_type, _encoding = mimetypes.guess_type(name)
    return mime_type or "application/octet-stream"


@dataclass(frozen=True)
class RawFile:
    """An upload as delivered by a file picker or drop zone.

    Attributes:
        name: Display name of the file
        mime_type: Declared MIME type
        size: Size in bytes
        reader: Zero-argument callable returning the file bytes
    """

    name: str
    mime_type: str
    size: int
    reader: ByteReader = field(repr=False, compare=False)

    @classmethod
    def from_path(cls, path: str | os.PathLike, mime_type: str | None = None) -> RawFile:
        """Describe a file on disk without reading it."""
        path = Path(path)
        return cls(
            name=path.name,
            mime_type=mime_type or guess_mime_type(path.name),
            size=path.stat().st_size,
            reader=path.read_bytes,
        )

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: str | None = None) -> RawFile:
        """Wrap an in-memory buffer."""
        return cls(
            name=name,
            mime_type=mime_type or guess_mime_type(name),
            size=len(data),
            reader=lambda: data,
        )


class InputFile:
    """One accepted file in the registry.

    Bytes are read lazily on first access and cached; they are never
    rewritten. Two InputFiles with equal names are distinct entities.
    """

    __slots__ = ("_name", "_mime_type", "_size", "_reader", "_data")

    def __init__(self, name: str, mime_type: str, size: int, reader: ByteReader) -> None:
        self._name = name
        self._mime_type = mime_type
        self._size = size
        self._reader = reader
        self._data: bytes | None = None

    @classmethod
    def from_raw(cls, raw: RawFile) -> InputFile:
        return cls(raw.name, raw.mime_type, raw.size, raw.reader)

    @property
    def name(self) -> str:
        return self._name

    @property
    def mime_type(self) -> str:
        return self._mime_type

    @property
    def size(self) -> int:
        return self._size

    @property
    def is_pdf(self) -> bool:
        return self._mime_type == PDF_MIME_TYPE

    @property
    def is_image(self) -> bool:
        return self._mime_type.startswith(IMAGE_MIME_PREFIX)

    def read_bytes(self) -> bytes:
        """Return the full file contents, reading them on first call."""
        if self._data is None:
            self._data = bytes(self._reader())
        return self._data

    def __repr__(self) -> str:
        return f"InputFile(name={self._name!r}, mime_type={self._mime_type!r}, size={self._size})"


@dataclass
class AppendResult:
    """Outcome of an append: accepted and filtered-out uploads."""

    added: int = 0
    skipped: int = 0
    skipped_names: list[str] = field(default_factory=list)

    @property
    def status_message(self) -> str:
        text = _("{count} added").format(count=self.added)
        if self.skipped:
            text += ", " + _("{count} skipped").format(count=self.skipped)
        return text


class FileRegistry:
    """Ordered, user-reorderable list of input files.

    The order held here is the order the list shows and the order the
    next operation processes. Operations never read the registry directly;
    they work on a :meth:`snapshot`.
    """

    def __init__(self, accept_images: bool = True) -> None:
        self.accept_images = accept_images
        self._files: list[InputFile] = []

    def accepts(self, mime_type: str) -> bool:
        """Whether uploads of this MIME type are kept."""
        if mime_type == PDF_MIME_TYPE:
            return True
        return self.accept_images and mime_type.startswith(IMAGE_MIME_PREFIX)

    def append(self, raw_files: Iterable[RawFile]) -> AppendResult:
        """Append accepted uploads in the given order and count the rest.

        Unsupported types are filtered, not treated as an error.
        """
        result = AppendResult()
        for raw in raw_files:
            if self.accepts(raw.mime_type):
                self._files.append(InputFile.from_raw(raw))
                result.added += 1
            else:
                result.skipped += 1
                result.skipped_names.append(raw.name)

        if result.skipped:
            logger.info(
                "Added %d file(s), skipped %d unsupported: %s",
                result.added,
                result.skipped,
                ", ".join(result.skipped_names),
            )
        else:
            logger.info("Added %d file(s)", result.added)
        return result

    def reorder(self, new_order: Sequence[int]) -> None:
        """Replace the sequence with the files at ``new_order`` positions.

        Args:
            new_order: Original indices in their new order; must be a
                permutation of ``range(len(self))``.

        Raises:
            ReorderError: If ``new_order`` is not a permutation. The
                registry is left unchanged.
        """
        order = list(new_order)
        count = len(self._files)

        if len(order) != count:
            raise ReorderError(order, f"expected {count} indices, got {len(order)}")
        for index in order:
            if isinstance(index, bool) or not isinstance(index, int):
                raise ReorderError(order, f"index {index!r} is not an integer")
            if not 0 <= index < count:
                raise ReorderError(order, f"index {index} is out of range")
        if len(set(order)) != count:
            missing = sorted(set(range(count)) - set(order))
            raise ReorderError(order, f"indices repeated, missing {missing}")

        self._files = [self._files[i] for i in order]
        logger.debug("Registry reordered: %s", order)

    def clear(self) -> str:
        """Remove every file and return the status text."""
        self._files.clear()
        logger.info("Registry cleared")
        return _("All files cleared.")

    def snapshot(self) -> tuple[InputFile, ...]:
        """Return the current order as an immutable tuple."""
        return tuple(self._files)

    def is_empty(self) -> bool:
        return not self._files

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self._files)

    def listing(self) -> list[str]:
        """Numbered list lines as rendered in the file list."""
        return [
            f"{i}. {f.name} ({format_file_size(f.size)})"
            for i, f in enumerate(self._files, start=1)
        ]

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[InputFile]:
        return iter(tuple(self._files))

    def __getitem__(self, index: int) -> InputFile:
        return self._files[index]
