"""PDF assembly from page images.

Each image becomes one page whose media box matches the image's pixel
dimensions exactly (1 pixel = 1 point), so coordinates stay in pixel space.
"""

import io
import uuid
from pathlib import Path

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pdf2imagefill.pdf.base import AssemblyError, PageImage
from pdf2imagefill.utils.logging import get_logger

logger = get_logger(__name__)


def assemble_pdf(pages: list[PageImage], temp_dir: Path) -> bytes:
    """Write page images into a single PDF.

    The document is written to a uniquely named file under `temp_dir`, read
    back, and the file is removed whether or not assembly succeeded.

    Args:
        pages: Page images in output order
        temp_dir: Directory for the transient output file

    Returns:
        PDF bytes

    Raises:
        AssemblyError: If the PDF cannot be written
    """
    if not pages:
        raise AssemblyError("Failed to assemble PDF", "no pages to write")

    temp_path = Path(temp_dir) / f"{uuid.uuid4().hex}.pdf"

    try:
        temp_path.parent.mkdir(parents=True, exist_ok=True)

        first = pages[0]
        pdf = canvas.Canvas(str(temp_path), pagesize=(first.width, first.height))
        pdf.setTitle("output.pdf")

        for page in pages:
            pdf.setPageSize((page.width, page.height))
            pdf.drawImage(
                ImageReader(io.BytesIO(page.image_bytes)),
                0,
                0,
                width=page.width,
                height=page.height,
                mask="auto",
            )
            pdf.showPage()

        pdf.save()
        pdf_bytes = temp_path.read_bytes()

    except Exception as e:
        logger.error("PDF assembly failed", error=str(e), page_count=len(pages))
        raise AssemblyError("Failed to assemble PDF", str(e)) from e

    finally:
        temp_path.unlink(missing_ok=True)

    logger.info("PDF assembled", page_count=len(pages), size_bytes=len(pdf_bytes))
    return pdf_bytes
