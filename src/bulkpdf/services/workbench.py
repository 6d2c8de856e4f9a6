"""Workbench session: UI event handlers around the registry and orchestrator."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from bulkpdf.config import OrchestratorConfig
from bulkpdf.services.download import DownloadSink
from bulkpdf.services.file_registry import AppendResult, FileRegistry, RawFile
from bulkpdf.services.orchestrator import (
    Operation,
    OperationOrchestrator,
    OperationResult,
    parse_page_number,
)
from bulkpdf.utils.exceptions import (
    BulkPdfError,
    BusyError,
    LoadError,
    PageRangeError,
    UserInputError,
)
from bulkpdf.utils.format_utils import format_elapsed_time
from bulkpdf.utils.i18n import _

logger = logging.getLogger(__name__)


class StatusLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    """A message for the transient status/toast region."""

    text: str
    level: StatusLevel = StatusLevel.INFO


_BUSY_TEXT = {
    Operation.MERGE: _("Merging PDFs..."),
    Operation.SPLIT: _("Splitting PDFs..."),
    Operation.ROTATE: _("Rotating page..."),
    Operation.REMOVE: _("Removing page..."),
}


class Workbench:
    """One user session: a file registry, an orchestrator and a busy gate.

    List edits are synchronous. Operations are coroutines; while one runs
    the gate refuses list edits and further operations, and the busy
    indicator is cleared on every exit path.
    """

    def __init__(self, sink: DownloadSink, config: OrchestratorConfig | None = None) -> None:
        self.config = (config or OrchestratorConfig()).validate()
        self.registry = FileRegistry(accept_images=self.config.accept_images)
        self.orchestrator = OperationOrchestrator(sink, self.config, progress=self._on_progress)
        self.history: list[StatusMessage] = []
        self._running: Operation | None = None
        self.busy_text: str = ""

    # -- state ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._running is not None

    @property
    def status(self) -> StatusMessage | None:
        return self.history[-1] if self.history else None

    def _show(self, text: str, level: StatusLevel = StatusLevel.INFO) -> StatusMessage:
        message = StatusMessage(text, level)
        self.history.append(message)
        return message

    def _on_progress(self, current: int, total: int, message: str) -> None:
        self.busy_text = f"{message} [{current}/{total}]"
        logger.debug(self.busy_text)

    def _ensure_idle(self) -> None:
        if self._running is not None:
            raise BusyError(self._running.value)

    # -- list events ----------------------------------------------------------

    def add_files(self, raw_files: Iterable[RawFile]) -> AppendResult:
        """Handle files dropped or picked by the user."""
        self._ensure_idle()
        result = self.registry.append(raw_files)
        self._show(result.status_message)
        return result

    def reorder(self, new_order: Sequence[int]) -> None:
        """Handle the end of a drag-reorder gesture."""
        self._ensure_idle()
        self.registry.reorder(new_order)

    def clear(self) -> None:
        self._ensure_idle()
        self._show(self.registry.clear())

    # -- operations -----------------------------------------------------------

    async def merge(self) -> OperationResult | None:
        return await self._run(Operation.MERGE)

    async def split(self) -> OperationResult | None:
        return await self._run(Operation.SPLIT)

    async def rotate(self, page_text: str | int) -> OperationResult | None:
        return await self._run(Operation.ROTATE, page_text)

    async def remove(self, page_text: str | int) -> OperationResult | None:
        return await self._run(Operation.REMOVE, page_text)

    async def _run(
        self, operation: Operation, page_text: str | int | None = None
    ) -> OperationResult | None:
        """Run one operation behind the busy gate and report its outcome.

        Returns the result, or None when the operation was refused or failed.
        """
        if self._running is not None:
            logger.warning("Ignoring %s: %s is running", operation.value, self._running.value)
            self._show(_("Please wait for the current operation to finish"), StatusLevel.ERROR)
            return None

        self._running = operation
        self.busy_text = _BUSY_TEXT[operation]
        start = time.monotonic()
        try:
            page_number = None
            if operation in (Operation.ROTATE, Operation.REMOVE):
                page_number = parse_page_number(page_text if page_text is not None else "")

            snapshot = self.registry.snapshot()
            result = await self.orchestrator.run(operation, snapshot, page_number)

        except UserInputError as e:
            logger.warning("%s refused: %s", operation.value, e)
            self._show(e.message, StatusLevel.ERROR)
            return None
        except (LoadError, PageRangeError) as e:
            logger.error("%s failed: %s", operation.value, e)
            self._show(e.message, StatusLevel.ERROR)
            return None
        except BulkPdfError as e:
            logger.error("%s failed: %s", operation.value, e)
            self._show(_("Error: {error}").format(error=e.message), StatusLevel.ERROR)
            return None
        finally:
            self._running = None
            self.busy_text = ""

        elapsed = format_elapsed_time(time.monotonic() - start)
        logger.info("%s finished in %s: %s", operation.value, elapsed, result.message)
        self._show(result.message, StatusLevel.SUCCESS)
        return result
