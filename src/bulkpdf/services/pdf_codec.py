"""
BulkPdf - PDF Codec Adapter

Thin document API over pikepdf used by the operation orchestrator:
load/create documents, copy/add/remove pages, read and set rotation,
embed images on fixed-size pages and serialize to bytes.

Images are decoded with Pillow and drawn onto a page with reportlab,
then the rendered page is appended with pikepdf.
"""

import io
import logging

import pikepdf
from PIL import Image, ImageOps, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from bulkpdf.constants import FULL_TURN_DEGREES
from bulkpdf.utils.exceptions import LoadError, PageRangeError
from bulkpdf.utils.i18n import _

logger = logging.getLogger(__name__)


def _friendly_error(e: Exception) -> str:
    """Map codec exceptions to user-facing text."""
    if isinstance(e, pikepdf.PasswordError):
        return _("This PDF is password-protected. Remove the password first.")
    if isinstance(e, pikepdf.PdfError):
        return _("The PDF file appears to be damaged or invalid: {error}").format(error=e)
    if isinstance(e, UnidentifiedImageError):
        return _("The image format is not supported.")
    return str(e)


def _resolve_rotation(page: pikepdf.Page) -> int:
    """Resolve the effective /Rotate of a page, including inherited values."""
    node = page.obj
    while node is not None:
        if "/Rotate" in node:
            return int(node["/Rotate"]) % FULL_TURN_DEGREES
        node = node.get("/Parent")
    return 0


class EmbeddedImage:
    """A decoded image ready to be drawn onto a page."""

    def __init__(self, image: Image.Image, name: str = "") -> None:
        self.image = image
        self.name = name

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size


class PdfDocument:
    """An in-memory PDF owned through pikepdf.

    Pages copied from another document reference that document's data
    until this one is saved, so the source must stay open until
    :meth:`save` returns.
    """

    def __init__(self, pdf: pikepdf.Pdf, name: str = "") -> None:
        self._pdf = pdf
        self.name = name
        self._scratch: list[pikepdf.Pdf] = []

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the document and any scratch documents it created."""
        for scratch in self._scratch:
            scratch.close()
        self._scratch.clear()
        self._pdf.close()

    # -- pages --------------------------------------------------------------

    def page_count(self) -> int:
        return len(self._pdf.pages)

    def page_indices(self) -> list[int]:
        return list(range(self.page_count()))

    def _check_index(self, index: int) -> None:
        count = self.page_count()
        if not 0 <= index < count:
            raise PageRangeError(self.name, index + 1, count)

    def copy_pages(self, src: "PdfDocument", indices: list[int]) -> list[pikepdf.Page]:
        """Return the pages of ``src`` at ``indices`` for adding to this document."""
        for index in indices:
            src._check_index(index)
        return [src._pdf.pages[index] for index in indices]

    def add_page(self, page: pikepdf.Page) -> None:
        self._pdf.pages.append(page)

    def remove_page(self, index: int) -> None:
        """Remove the page at ``index``; later pages shift down by one."""
        self._check_index(index)
        del self._pdf.pages[index]

    def get_rotation(self, index: int) -> int:
        self._check_index(index)
        return _resolve_rotation(self._pdf.pages[index])

    def set_rotation(self, index: int, degrees: int) -> None:
        self._check_index(index)
        self._pdf.pages[index].obj.Rotate = degrees % FULL_TURN_DEGREES

    # -- images -------------------------------------------------------------

    def embed_image(self, data: bytes, name: str = "") -> EmbeddedImage:
        """Decode image bytes (JPEG, PNG and other Pillow formats).

        Raises:
            LoadError: If Pillow cannot decode the data.
        """
        try:
            img = Image.open(io.BytesIO(data))
            img = ImageOps.exif_transpose(img)
            if img.mode != "RGB":
                img = img.convert("RGB")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise LoadError(name, _friendly_error(e)) from e
        return EmbeddedImage(img, name)

    def draw_image(self, image: EmbeddedImage, width: float, height: float) -> None:
        """Append a ``width`` x ``height`` page with ``image`` stretched to fill it.

        Raises:
            LoadError: If the image cannot be rendered onto a page.
        """
        buf = io.BytesIO()
        try:
            c = canvas.Canvas(buf, pagesize=(width, height))
            c.drawImage(ImageReader(image.image), 0, 0, width=width, height=height)
            c.showPage()
            c.save()
            buf.seek(0)
            rendered = pikepdf.open(buf)
        except (pikepdf.PdfError, OSError, ValueError) as e:
            logger.error("Failed to render image %s: %s", image.name, e)
            raise LoadError(image.name, _friendly_error(e)) from e

        self._scratch.append(rendered)
        self._pdf.pages.append(rendered.pages[0])
        logger.debug("Drew image %s (%dx%d px) on a %gx%g page", image.name, *image.size, width, height)

    # -- output -------------------------------------------------------------

    def save(self) -> bytes:
        """Serialize the document.

        Raises:
            LoadError: If pikepdf cannot write the document.
        """
        buf = io.BytesIO()
        try:
            self._pdf.save(buf)
        except (pikepdf.PdfError, OSError, ValueError) as e:
            logger.error("Failed to save %s: %s", self.name, e)
            raise LoadError(self.name, _friendly_error(e)) from e
        return buf.getvalue()


def create_document(name: str = "") -> PdfDocument:
    """Create an empty document."""
    return PdfDocument(pikepdf.Pdf.new(), name)


def load_document(data: bytes, *, ignore_encryption: bool = False, name: str = "") -> PdfDocument:
    """Parse PDF bytes.

    Args:
        data: The complete file contents
        ignore_encryption: Open encrypted files that need no password
            instead of refusing them
        name: File name used in error messages

    Raises:
        LoadError: If the bytes are not a usable PDF.
    """
    try:
        pdf = pikepdf.open(io.BytesIO(data))
    except (pikepdf.PasswordError, pikepdf.PdfError, ValueError, OSError) as e:
        logger.error("Failed to load %s: %s", name, e)
        raise LoadError(name, _friendly_error(e)) from e

    if pdf.is_encrypted and not ignore_encryption:
        pdf.close()
        logger.error("Refusing encrypted document %s", name)
        raise LoadError(name, _("The document is encrypted."))

    return PdfDocument(pdf, name)
