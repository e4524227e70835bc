"""PDF to page image rasterization.

Uses PyMuPDF (fitz) to render each page of an in-memory PDF into a PNG at a
fixed scale. One PDF point becomes `scale` pixels.
"""

import fitz  # PyMuPDF

from pdf2imagefill.pdf.base import DecodeError, PageImage
from pdf2imagefill.utils.logging import get_logger

logger = get_logger(__name__)


def rasterize_pdf(pdf_bytes: bytes, scale: float = 2.0) -> list[PageImage]:
    """Render every page of a PDF to a PNG image.

    Args:
        pdf_bytes: Raw PDF file bytes
        scale: Rendering scale (1.0 = 72 DPI, 2.0 = 144 DPI)

    Returns:
        One PageImage per page, numbered from 1 in document order

    Raises:
        ValueError: If scale is not positive
        DecodeError: If the PDF cannot be opened or a page cannot be rendered
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")

    doc = _open_pdf(pdf_bytes)

    try:
        page_count = doc.page_count
        logger.info("Rasterizing PDF", page_count=page_count, scale=scale)

        matrix = fitz.Matrix(scale, scale)
        pages = []
        for index in range(page_count):
            try:
                pix = doc[index].get_pixmap(matrix=matrix, alpha=False)
                png = pix.tobytes("png")
            except Exception as e:
                raise DecodeError(f"Failed to render page {index + 1}", str(e)) from e

            pages.append(
                PageImage(
                    page_number=index + 1,
                    width=pix.width,
                    height=pix.height,
                    image_bytes=png,
                )
            )
            logger.debug(f"Rendered page {index + 1}", width=pix.width, height=pix.height)

        return pages

    finally:
        doc.close()


def _open_pdf(pdf_bytes: bytes) -> fitz.Document:
    """Open a PDF from memory, rejecting anything PyMuPDF cannot render."""
    if not pdf_bytes:
        raise DecodeError("Failed to open PDF", "empty document")

    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        logger.error("Failed to open PDF", error=str(e), size_bytes=len(pdf_bytes))
        raise DecodeError("Failed to open PDF", str(e)) from e

    if doc.needs_pass:
        doc.close()
        raise DecodeError("Failed to open PDF", "document is password protected")

    if doc.page_count == 0:
        doc.close()
        raise DecodeError("Failed to open PDF", "document has no pages")

    return doc
