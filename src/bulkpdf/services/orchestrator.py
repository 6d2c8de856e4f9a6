"""
BulkPdf - Operation Orchestrator

Runs the four bulk operations over a registry snapshot:
  - merge: every file, in order, into one document
  - split: every page of every PDF into its own document
  - rotate: one page of every PDF by another 90 degrees
  - remove: one page of every PDF

Operations are coroutines that suspend after each load, page copy and
save so the host event loop stays responsive. Split additionally pauses
between batches of outputs. The first failing file stops the operation;
artifacts already emitted for earlier files stay emitted.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum

from bulkpdf.config import (
    REMOVED_NAME_TEMPLATE,
    ROTATED_NAME_TEMPLATE,
    SPLIT_NAME_TEMPLATE,
    OrchestratorConfig,
)
from bulkpdf.constants import ROTATION_STEP_DEGREES
from bulkpdf.services.download import DownloadSink
from bulkpdf.services.file_registry import InputFile
from bulkpdf.services.pdf_codec import PdfDocument, create_document, load_document
from bulkpdf.utils.exceptions import PageRangeError, UserInputError
from bulkpdf.utils.format_utils import output_basename
from bulkpdf.utils.i18n import _

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class Operation(Enum):
    """The bulk operations a user can trigger."""

    MERGE = "merge"
    SPLIT = "split"
    ROTATE = "rotate"
    REMOVE = "remove"


@dataclass
class OperationResult:
    """Summary of a finished operation."""

    operation: Operation
    artifacts_emitted: int = 0
    files_processed: int = 0
    total_pages: int = 0
    message: str = ""


def parse_page_number(value: str | int) -> int:
    """Parse the page-number input into a 1-based page number.

    Raises:
        UserInputError: If the value is not a positive integer.
    """
    if isinstance(value, bool):
        raise UserInputError(_("Enter a valid page number"))
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            raise UserInputError(_("Enter a valid page number"), details=f"value={value!r}") from None
    if number < 1:
        raise UserInputError(_("Enter a valid page number"), details=f"value={value!r}")
    return number


class OperationOrchestrator:
    """Translate bulk operations into codec calls and emitted artifacts.

    The orchestrator only reads the snapshots it is given; it never holds
    or mutates the registry.
    """

    def __init__(
        self,
        sink: DownloadSink,
        config: OrchestratorConfig | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.sink = sink
        self.config = (config or OrchestratorConfig()).validate()
        self.progress = progress

    # -- helpers --------------------------------------------------------------

    @staticmethod
    async def _yield() -> None:
        await asyncio.sleep(0)

    def _report(self, current: int, total: int, message: str) -> None:
        if self.progress is not None:
            self.progress(current, total, message)

    def _emit(self, data: bytes, filename: str) -> None:
        self.sink.emit(data, filename)
        logger.debug("Emitted %s", filename)

    async def _load(self, input_file: InputFile) -> PdfDocument:
        await self._yield()
        return load_document(
            input_file.read_bytes(),
            ignore_encryption=self.config.ignore_encryption,
            name=input_file.name,
        )

    @staticmethod
    def _require_files(snapshot: Sequence[InputFile]) -> list[InputFile]:
        files = list(snapshot)
        if not files:
            raise UserInputError(_("Upload files first"))
        return files

    def _require_pdfs(self, snapshot: Sequence[InputFile]) -> list[InputFile]:
        pdfs = [f for f in self._require_files(snapshot) if f.is_pdf]
        if not pdfs:
            raise UserInputError(_("Upload PDFs first"))
        return pdfs

    # -- merge ----------------------------------------------------------------

    async def merge(self, snapshot: Sequence[InputFile]) -> OperationResult:
        """Merge all files into one document, file by file, page by page.

        Raises:
            UserInputError: If fewer than ``min_merge_files`` files are given.
            LoadError: If any file cannot be read; nothing is emitted.
        """
        files = self._require_files(snapshot)
        minimum = self.config.min_merge_files
        if len(files) < minimum:
            raise UserInputError(
                _("Need at least {count} files to merge").format(count=minimum),
                details=f"files={len(files)}",
            )

        total_pages = 0
        merged_files = 0
        with create_document(self.config.merged_filename) as out, ExitStack() as sources:
            for position, input_file in enumerate(files, 1):
                self._report(position, len(files), _("Merging {name}").format(name=input_file.name))

                if input_file.is_pdf:
                    src = sources.enter_context(await self._load(input_file))
                    pages = out.copy_pages(src, src.page_indices())
                    for page in pages:
                        out.add_page(page)
                        await self._yield()
                    total_pages += len(pages)
                elif input_file.is_image and self.config.accept_images:
                    image = out.embed_image(input_file.read_bytes(), input_file.name)
                    out.draw_image(image, *self.config.image_page_size)
                    total_pages += 1
                else:
                    logger.warning("Skipping unsupported file in merge: %s", input_file.name)
                    continue

                merged_files += 1
                await self._yield()

            data = out.save()

        await self._yield()
        self._emit(data, self.config.merged_filename)
        logger.info("Merged %d files into %d pages", merged_files, total_pages)

        return OperationResult(
            operation=Operation.MERGE,
            artifacts_emitted=1,
            files_processed=merged_files,
            total_pages=total_pages,
            message=_("Merged {files} files ({pages} pages)").format(
                files=merged_files, pages=total_pages
            ),
        )

    # -- split ----------------------------------------------------------------

    async def split(self, snapshot: Sequence[InputFile]) -> OperationResult:
        """Emit every page of every PDF as its own single-page document.

        Outputs are produced in batches of ``batch_size``; between batches
        of the same file the coroutine sleeps ``batch_delay`` seconds.

        Raises:
            LoadError: If a file cannot be read; later files are not processed.
        """
        pdfs = self._require_pdfs(snapshot)
        batch_size = self.config.batch_size
        emitted = 0

        for position, input_file in enumerate(pdfs, 1):
            with await self._load(input_file) as src:
                count = src.page_count()
                base = output_basename(input_file.name)
                logger.info("Splitting %s (%d pages)", input_file.name, count)

                for start in range(0, count, batch_size):
                    end = min(start + batch_size, count)
                    for index in range(start, end):
                        self._report(
                            index + 1,
                            count,
                            _("Splitting {name} ({current}/{files})").format(
                                name=input_file.name, current=position, files=len(pdfs)
                            ),
                        )
                        filename = SPLIT_NAME_TEMPLATE.format(base=base, page=index + 1)
                        with create_document(filename) as single:
                            for page in single.copy_pages(src, [index]):
                                single.add_page(page)
                            await self._yield()
                            data = single.save()
                        self._emit(data, filename)
                        emitted += 1

                    if end < count:
                        logger.debug("Batch %d-%d of %s done, pausing", start + 1, end, input_file.name)
                        await asyncio.sleep(self.config.batch_delay)

        logger.info("Split %d files into %d documents", len(pdfs), emitted)
        return OperationResult(
            operation=Operation.SPLIT,
            artifacts_emitted=emitted,
            files_processed=len(pdfs),
            total_pages=emitted,
            message=_("Split complete: {count} files created").format(count=emitted),
        )

    # -- rotate / remove --------------------------------------------------------

    async def _apply_to_each(
        self,
        snapshot: Sequence[InputFile],
        page_number: int,
        operation: Operation,
        name_template: str,
        change: Callable[[PdfDocument, int], None],
    ) -> int:
        """Load each PDF, check the page exists, apply ``change`` and emit.

        Returns the number of artifacts emitted.
        """
        page_number = parse_page_number(page_number)
        index = page_number - 1
        pdfs = self._require_pdfs(snapshot)
        emitted = 0

        for position, input_file in enumerate(pdfs, 1):
            self._report(
                position,
                len(pdfs),
                _("Processing {name}").format(name=input_file.name),
            )
            with await self._load(input_file) as doc:
                count = doc.page_count()
                if index >= count:
                    raise PageRangeError(input_file.name, page_number, count)

                change(doc, index)
                await self._yield()
                data = doc.save()

            self._emit(data, name_template.format(base=output_basename(input_file.name)))
            emitted += 1

        logger.info("%s page %d in %d files", operation.value, page_number, emitted)
        return emitted

    async def rotate_page(self, snapshot: Sequence[InputFile], page_number: int) -> OperationResult:
        """Turn the given page of every PDF a further 90 degrees clockwise.

        Raises:
            PageRangeError: At the first file without that page.
        """

        def rotate(doc: PdfDocument, index: int) -> None:
            current = doc.get_rotation(index)
            doc.set_rotation(index, current + ROTATION_STEP_DEGREES)

        emitted = await self._apply_to_each(
            snapshot, page_number, Operation.ROTATE, ROTATED_NAME_TEMPLATE, rotate
        )
        return OperationResult(
            operation=Operation.ROTATE,
            artifacts_emitted=emitted,
            files_processed=emitted,
            total_pages=emitted,
            message=_("Rotated page {page} in {count} files").format(page=page_number, count=emitted),
        )

    async def remove_page(self, snapshot: Sequence[InputFile], page_number: int) -> OperationResult:
        """Delete the given page from every PDF.

        Raises:
            PageRangeError: At the first file without that page, or whose
                only page it is.
        """

        def remove(doc: PdfDocument, index: int) -> None:
            if doc.page_count() == 1:
                raise PageRangeError(
                    doc.name, index + 1, 1, reason=_("cannot remove the only page")
                )
            doc.remove_page(index)

        emitted = await self._apply_to_each(
            snapshot, page_number, Operation.REMOVE, REMOVED_NAME_TEMPLATE, remove
        )
        return OperationResult(
            operation=Operation.REMOVE,
            artifacts_emitted=emitted,
            files_processed=emitted,
            total_pages=emitted,
            message=_("Removed page {page} from {count} files").format(
                page=page_number, count=emitted
            ),
        )

    async def run(
        self, operation: Operation, snapshot: Sequence[InputFile], page_number: int | None = None
    ) -> OperationResult:
        """Dispatch to the coroutine for ``operation``."""
        if operation is Operation.MERGE:
            return await self.merge(snapshot)
        if operation is Operation.SPLIT:
            return await self.split(snapshot)
        if page_number is None:
            raise UserInputError(_("Enter a valid page number"))
        if operation is Operation.ROTATE:
            return await self.rotate_page(snapshot, page_number)
        return await self.remove_page(snapshot, page_number)
