"""Tests for the Workbench session: status messages, busy gate and error reporting."""

import asyncio

import pikepdf
import pytest

from bulkpdf.config import OrchestratorConfig
from bulkpdf.services.download import MemorySink
from bulkpdf.services.file_registry import RawFile
from bulkpdf.services.workbench import StatusLevel, Workbench
from bulkpdf.utils.exceptions import BusyError, ReorderError

from conftest import make_pdf_bytes, page_labels, raw_pdf


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def workbench(sink):
    return Workbench(sink, OrchestratorConfig(batch_delay=0, accept_images=False))


class TestListEvents:
    def test_add_files_reports_counts(self, workbench):
        text = RawFile.from_bytes("readme.txt", b"x", "text/plain")
        result = workbench.add_files([raw_pdf("A.pdf", 1), raw_pdf("B.pdf", 1), text])
        assert result.added == 2
        assert result.skipped == 1
        assert workbench.status.text == "2 added, 1 skipped"
        assert len(workbench.registry) == 2

    def test_clear_reports(self, workbench, abc_files):
        workbench.add_files(abc_files)
        workbench.clear()
        assert workbench.registry.is_empty()
        assert workbench.status.text == "All files cleared."

    def test_invalid_reorder_propagates(self, workbench, abc_files):
        workbench.add_files(abc_files)
        with pytest.raises(ReorderError):
            workbench.reorder([0, 0, 1])


class TestOperations:
    def test_merge_after_reorder_uses_displayed_order(self, workbench, sink, abc_files):
        workbench.add_files(abc_files)
        workbench.reorder([2, 0, 1])

        result = asyncio.run(workbench.merge())

        assert result is not None
        assert page_labels(sink.artifacts[0].data) == ["C1", "C2", "C3", "A1", "A2", "B1"]
        assert workbench.status.level is StatusLevel.SUCCESS
        assert workbench.status.text == "Merged 3 files (6 pages)"
        assert not workbench.busy
        assert workbench.busy_text == ""

    def test_empty_list_reports_user_error(self, workbench, sink):
        assert asyncio.run(workbench.split()) is None
        assert workbench.status.text == "Upload files first"
        assert workbench.status.level is StatusLevel.ERROR
        assert sink.artifacts == []
        assert not workbench.busy

    @pytest.mark.parametrize("page_text", ["", "abc", "0", "-2"])
    def test_bad_page_text_reports_user_error(self, workbench, sink, abc_files, page_text):
        workbench.add_files(abc_files)
        assert asyncio.run(workbench.rotate(page_text)) is None
        assert workbench.status.text == "Enter a valid page number"
        assert sink.artifacts == []
        assert not workbench.busy

    def test_out_of_range_reports_single_error_for_first_file(self, workbench, sink, abc_files):
        workbench.add_files(abc_files)
        before = len(workbench.history)

        assert asyncio.run(workbench.remove("10")) is None

        assert sink.artifacts == []
        assert len(workbench.history) == before + 1
        assert workbench.status.level is StatusLevel.ERROR
        assert workbench.status.text == "A.pdf: page 10 doesn't exist (file has 2 pages)"
        assert not workbench.busy

    def test_load_error_reported_with_file_name(self, workbench, sink):
        corrupt = RawFile.from_bytes("broken.pdf", b"garbage", "application/pdf")
        workbench.add_files([raw_pdf("A.pdf", 1), corrupt])

        assert asyncio.run(workbench.merge()) is None

        assert "broken.pdf" in workbench.status.text
        assert sink.artifacts == []
        assert not workbench.busy

    @pytest.mark.parametrize("run", ["merge", "split"])
    def test_password_protected_file_reported_as_status(self, workbench, sink, run):
        locked = RawFile.from_bytes(
            "locked.pdf", make_pdf_bytes("L", 1, password="secret"), "application/pdf"
        )
        workbench.add_files([raw_pdf("A.pdf", 1), locked])

        assert asyncio.run(getattr(workbench, run)()) is None

        assert workbench.status.level is StatusLevel.ERROR
        assert "locked.pdf" in workbench.status.text
        assert "password" in workbench.status.text.lower()
        assert not workbench.busy
        assert workbench.busy_text == ""

    def test_save_failure_reported_as_status(self, workbench, sink, abc_files, monkeypatch):
        workbench.add_files(abc_files)

        def unwritable(self, *args, **kwargs):
            raise pikepdf.PdfError("unable to write object stream")

        monkeypatch.setattr(pikepdf.Pdf, "save", unwritable)

        assert asyncio.run(workbench.merge()) is None

        assert sink.artifacts == []
        assert workbench.status.level is StatusLevel.ERROR
        assert workbench.status.text.startswith("Could not load 'merged.pdf'")
        assert not workbench.busy

    def test_rotate_success_status(self, workbench, sink, abc_files):
        workbench.add_files(abc_files)
        result = asyncio.run(workbench.rotate("1"))
        assert result.artifacts_emitted == 3
        assert sink.filenames == ["A_rotated.pdf", "B_rotated.pdf", "C_rotated.pdf"]
        assert workbench.status.text == "Rotated page 1 in 3 files"


class TestBusyGate:
    def test_second_trigger_and_list_edits_refused_while_running(self, workbench, sink, abc_files):
        workbench.add_files(abc_files)

        async def scenario():
            first = asyncio.create_task(workbench.split())
            await asyncio.sleep(0)

            assert workbench.busy
            assert workbench.busy_text

            assert await workbench.merge() is None
            assert workbench.status.text == "Please wait for the current operation to finish"
            with pytest.raises(BusyError):
                workbench.clear()
            with pytest.raises(BusyError):
                workbench.add_files([raw_pdf("D.pdf", 1)])

            return await first

        result = asyncio.run(scenario())

        assert result.artifacts_emitted == 6
        assert len(workbench.registry) == 3
        assert not workbench.busy
        assert sink.filenames[0] == "A_page_1.pdf"
