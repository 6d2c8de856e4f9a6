"""Pytest configuration for bulkpdf tests.

Builds small labelled PDFs and images in memory. Each page's content
stream draws a label such as ``A1`` so tests can tell pages apart after
they have been merged, split or reordered.
"""

import io
import re

import pikepdf
import pytest
from PIL import Image

from bulkpdf.services.file_registry import RawFile

_LABEL = re.compile(rb"\((\w+)\) Tj")


def make_pdf_bytes(label: str, num_pages: int, password: str | None = None) -> bytes:
    """Create a PDF whose pages are labelled ``<label>1`` .. ``<label>N``."""
    pdf = pikepdf.Pdf.new()
    for i in range(num_pages):
        page = pikepdf.Page(
            pikepdf.Dictionary(
                Type=pikepdf.Name.Page,
                MediaBox=[0, 0, 612, 792],
                Contents=pdf.make_stream(f"BT /F1 12 Tf 100 700 Td ({label}{i + 1}) Tj ET".encode()),
            )
        )
        pdf.pages.append(page)

    buf = io.BytesIO()
    if password is None:
        pdf.save(buf)
    else:
        pdf.save(buf, encryption=pikepdf.Encryption(owner="owner", user=password))
    pdf.close()
    return buf.getvalue()


def page_labels(data: bytes) -> list[str]:
    """Return the label drawn on each page of a PDF, in page order."""
    labels = []
    with pikepdf.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            contents = page.obj.get("/Contents")
            if contents is None:
                labels.append("")
                continue
            match = _LABEL.search(contents.read_bytes())
            labels.append(match.group(1).decode() if match else "")
    return labels


def page_rotations(data: bytes) -> list[int]:
    with pikepdf.open(io.BytesIO(data)) as pdf:
        return [int(page.obj.get("/Rotate", 0)) for page in pdf.pages]


def make_png_bytes(size=(40, 20), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def raw_pdf(name: str, num_pages: int, label: str | None = None) -> RawFile:
    """A PDF upload labelled by its name stem unless ``label`` is given."""
    label = label or name.split(".")[0]
    return RawFile.from_bytes(name, make_pdf_bytes(label, num_pages), "application/pdf")


@pytest.fixture
def abc_files():
    """Three uploads A (2 pages), B (1 page), C (3 pages)."""
    return [raw_pdf("A.pdf", 2), raw_pdf("B.pdf", 1), raw_pdf("C.pdf", 3)]


@pytest.fixture
def png_upload():
    return RawFile.from_bytes("photo.png", make_png_bytes(), "image/png")
