"""Pipeline processor - Orchestrates annotation compositing and PDF assembly."""

import time
from dataclasses import dataclass
from pathlib import Path

from pdf2imagefill.pdf.assembler import assemble_pdf
from pdf2imagefill.pdf.base import PageImage
from pdf2imagefill.pdf.overlay import (
    Annotation,
    composite_annotations,
    group_annotations_by_page,
)
from pdf2imagefill.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AssemblyResult:
    """Result from assembling annotated pages into a PDF.

    Attributes:
        pdf_bytes: The assembled PDF
        page_count: Number of pages written
        annotation_count: Annotations drawn onto pages
        dropped_annotations: Annotations referencing pages that do not exist
        processing_time_ms: Total processing time in milliseconds
    """

    pdf_bytes: bytes
    page_count: int
    annotation_count: int = 0
    dropped_annotations: int = 0
    processing_time_ms: int = 0


class AnnotationPipeline:
    """Draws annotations onto page images and assembles them into one PDF.

    Usage:
        pipeline = AnnotationPipeline(temp_dir=settings.temp_dir)
        result = pipeline.process(
            images=[page_1_png, page_2_png],
            annotations=[TextAnnotation(page=1, x=100, y=200, text="John Doe")],
        )

    The pipeline:
    1. Groups annotations by page, keeping input order within a page
    2. Composites each page's annotations onto its image, one page at a time
    3. Writes the pages into a PDF sized to each image

    Image i (0-based) is page i + 1. Annotations for pages outside the
    image list are dropped.
    """

    def __init__(self, temp_dir: Path):
        self.temp_dir = Path(temp_dir)

    def process(
        self,
        images: list[bytes],
        annotations: list[Annotation],
    ) -> AssemblyResult:
        """Run the pipeline.

        Args:
            images: Encoded page images in page order
            annotations: Annotations for any of the pages

        Returns:
            AssemblyResult with the PDF and counts

        Raises:
            ValueError: If no images are given
            DecodeError: If an image cannot be decoded
            AssemblyError: If an overlay or the PDF cannot be written
        """
        if not images:
            raise ValueError("At least one image is required")

        start_time = time.time()

        by_page = group_annotations_by_page(annotations)
        page_numbers = range(1, len(images) + 1)
        drawn = sum(len(by_page.get(number, [])) for number in page_numbers)
        dropped = len(annotations) - drawn

        if dropped:
            logger.warning(
                "Dropping annotations for pages that do not exist",
                dropped=dropped,
                image_count=len(images),
            )

        pages = []
        for number, image_bytes in zip(page_numbers, images):
            png, width, height = composite_annotations(image_bytes, by_page.get(number, []))
            pages.append(
                PageImage(page_number=number, width=width, height=height, image_bytes=png)
            )

        pdf_bytes = assemble_pdf(pages, self.temp_dir)

        processing_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Annotated PDF assembled",
            page_count=len(pages),
            annotation_count=drawn,
            processing_time_ms=processing_time_ms,
        )

        return AssemblyResult(
            pdf_bytes=pdf_bytes,
            page_count=len(pages),
            annotation_count=drawn,
            dropped_annotations=dropped,
            processing_time_ms=processing_time_ms,
        )
