"""Tests for FileRegistry and its input types."""

import pytest

from bulkpdf.services.file_registry import AppendResult, FileRegistry, InputFile, RawFile
from bulkpdf.utils.exceptions import ReorderError, ValidationError

from conftest import raw_pdf


def _names(registry):
    return [f.name for f in registry]


class TestAppend:
    def test_mixed_batch_counts_skipped(self):
        registry = FileRegistry()
        text = RawFile.from_bytes("notes.txt", b"hello", "text/plain")
        result = registry.append([raw_pdf("a.pdf", 1), text, raw_pdf("b.pdf", 2)])
        assert len(registry) == 2
        assert result.added == 2
        assert result.skipped == 1
        assert result.skipped_names == ["notes.txt"]
        assert result.status_message == "2 added, 1 skipped"

    def test_preserves_insertion_order(self, abc_files):
        registry = FileRegistry()
        registry.append(abc_files[:2])
        registry.append(abc_files[2:])
        assert _names(registry) == ["A.pdf", "B.pdf", "C.pdf"]

    def test_duplicate_names_are_distinct_entries(self):
        registry = FileRegistry()
        registry.append([raw_pdf("same.pdf", 1), raw_pdf("same.pdf", 2)])
        assert len(registry) == 2
        assert registry[0] is not registry[1]

    def test_images_accepted_by_default(self, png_upload):
        registry = FileRegistry()
        result = registry.append([png_upload])
        assert result.added == 1
        assert registry[0].is_image

    def test_images_skipped_when_disabled(self, png_upload):
        registry = FileRegistry(accept_images=False)
        result = registry.append([png_upload, raw_pdf("a.pdf", 1)])
        assert result.added == 1
        assert result.skipped == 1
        assert _names(registry) == ["a.pdf"]

    def test_status_without_skips(self):
        assert AppendResult(added=3).status_message == "3 added"


class TestReorder:
    def test_reorder_applies_permutation(self, abc_files):
        registry = FileRegistry()
        registry.append(abc_files)
        registry.reorder([2, 0, 1])
        assert _names(registry) == ["C.pdf", "A.pdf", "B.pdf"]

    def test_identity_reorder(self, abc_files):
        registry = FileRegistry()
        registry.append(abc_files)
        registry.reorder([0, 1, 2])
        assert _names(registry) == ["A.pdf", "B.pdf", "C.pdf"]

    @pytest.mark.parametrize(
        "order",
        [
            [0, 1],  # too short
            [0, 1, 2, 3],  # too long
            [0, 0, 1],  # index reused, 2 missing
            [0, 1, 3],  # out of range
            [-1, 0, 1],  # negative
            [0, 1, "2"],  # not an int
        ],
    )
    def test_invalid_order_fails_and_keeps_list(self, abc_files, order):
        registry = FileRegistry()
        registry.append(abc_files)
        with pytest.raises(ReorderError):
            registry.reorder(order)
        assert _names(registry) == ["A.pdf", "B.pdf", "C.pdf"]

    def test_reorder_error_is_validation_error(self):
        registry = FileRegistry()
        with pytest.raises(ValidationError):
            registry.reorder([0])


class TestClearAndSnapshot:
    def test_clear_empties_and_reports(self, abc_files):
        registry = FileRegistry()
        registry.append(abc_files)
        assert registry.clear() == "All files cleared."
        assert registry.is_empty()

    def test_snapshot_is_insulated_from_later_changes(self, abc_files):
        registry = FileRegistry()
        registry.append(abc_files)
        snapshot = registry.snapshot()
        registry.reorder([2, 1, 0])
        registry.clear()
        assert isinstance(snapshot, tuple)
        assert [f.name for f in snapshot] == ["A.pdf", "B.pdf", "C.pdf"]

    def test_listing_is_numbered_with_sizes(self):
        registry = FileRegistry()
        registry.append([RawFile.from_bytes("x.pdf", b"%PDF" + b"0" * 2044, "application/pdf")])
        assert registry.listing() == ["1. x.pdf (2.00 KB)"]
        assert registry.total_size == 2048


class TestInputFile:
    def test_bytes_are_read_once(self):
        calls = []

        def reader():
            calls.append(1)
            return b"data"

        f = InputFile("a.pdf", "application/pdf", 4, reader)
        assert calls == []
        assert f.read_bytes() == b"data"
        assert f.read_bytes() == b"data"
        assert len(calls) == 1

    def test_raw_file_from_path_guesses_type(self, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"%PDF-1.7")
        raw = RawFile.from_path(path)
        assert raw.name == "doc.pdf"
        assert raw.mime_type == "application/pdf"
        assert raw.size == 8
        assert raw.reader() == b"%PDF-1.7"

    def test_unknown_extension_is_octet_stream(self):
        raw = RawFile.from_bytes("blob.zzz-unknown", b"")
        assert raw.mime_type == "application/octet-stream"
