"""API router - FastAPI endpoints."""

from typing import Any

from fastapi import APIRouter, Body, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from pdf2imagefill import __version__
from pdf2imagefill.api.errors import APIError, ClientInputError
from pdf2imagefill.api.models import (
    ErrorResponse,
    HealthResponse,
    PdfToImagesResponse,
    parse_assembly_request,
)
from pdf2imagefill.config import get_settings
from pdf2imagefill.pdf.base import ConversionError
from pdf2imagefill.pdf.rasterizer import rasterize_pdf
from pdf2imagefill.pipeline.processor import AnnotationPipeline
from pdf2imagefill.utils.image_utils import decode_base64_image
from pdf2imagefill.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["PDF2ImageFill"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check if the API is healthy and running",
)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        message="PDF2ImageFill API is running",
        version=__version__,
    )


@router.post(
    "/pdf-to-images",
    response_model=PdfToImagesResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No PDF provided"},
        500: {"model": ErrorResponse, "description": "PDF could not be rendered"},
    },
    summary="Convert PDF to Images",
    description="""
    Render every page of a PDF to a base64-encoded PNG.

    The returned pixel coordinates are the coordinate system used by
    `/images-to-pdf` annotations (origin top-left).

    **Scale:** pages render at `RENDER_SCALE` pixels per PDF point unless the
    `scale` query parameter overrides it (up to `MAX_RENDER_SCALE`).
    """,
)
async def pdf_to_images(
    response: Response,
    pdf: UploadFile | None = File(default=None, description="PDF document to rasterize"),
    scale: float | None = Query(
        default=None,
        gt=0,
        description="Pixels per PDF point (defaults to RENDER_SCALE)",
    ),
) -> PdfToImagesResponse:
    """Rasterize an uploaded PDF.

    Args:
        response: Outgoing response, used to set headers
        pdf: Uploaded PDF file
        scale: Optional rendering scale override

    Returns:
        PdfToImagesResponse with one image per page

    Raises:
        APIError: 400 for missing input, 500 for rendering failures
    """
    if pdf is None:
        raise ClientInputError("No PDF file provided")

    try:
        content = await pdf.read()
    except Exception as e:
        logger.error("Failed to read uploaded file", error=str(e))
        raise ClientInputError("Failed to read uploaded file")

    if not content:
        raise ClientInputError("Empty PDF file provided")

    settings = get_settings()
    try:
        render_scale = settings.resolve_scale(scale)
    except ValueError as e:
        raise ClientInputError("Invalid scale", details=str(e))

    logger.info(
        "Converting PDF to images",
        filename=pdf.filename,
        size_bytes=len(content),
        scale=render_scale,
    )

    try:
        pages = await run_in_threadpool(rasterize_pdf, content, render_scale)
    except ConversionError as e:
        logger.error("PDF conversion failed", error=str(e))
        raise APIError(500, "Failed to convert PDF to images", details=str(e))
    except Exception as e:
        logger.exception("Unexpected error converting PDF to images")
        raise APIError(500, "Failed to convert PDF to images", details=str(e))

    response.headers["X-Page-Count"] = str(len(pages))
    return PdfToImagesResponse.from_pages(pages)


@router.post(
    "/images-to-pdf",
    response_class=Response,
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "Annotated PDF download",
        },
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Processing error"},
    },
    summary="Annotate Images and Build PDF",
    description="""
    Draw text and checkbox annotations onto page images and assemble them
    into a single PDF, one page per image, each page sized to its image.

    **Body:**
    - `images`: base64 PNG strings or `{"page": n, "image": "<base64>"}`
      objects, in page order
    - `annotations`: `{"page", "x", "y", "text", "type", "fontSize",
      "fontFamily", "color", "size"}` records; `type` of `checkbox` or
      `checkmark` draws a checked box, anything else draws text with its
      baseline at `y`

    Annotations for pages beyond the supplied images are ignored.
    """,
)
async def images_to_pdf(payload: Any = Body(default=None)) -> Response:
    """Composite annotations onto images and return the assembled PDF."""
    images, annotations = parse_assembly_request(payload)

    logger.info(
        "Creating PDF from images",
        image_count=len(images),
        annotation_count=len(annotations),
    )

    try:
        image_bytes = [decode_base64_image(image) for image in images]
        pipeline = AnnotationPipeline(temp_dir=get_settings().temp_dir)
        result = await run_in_threadpool(pipeline.process, image_bytes, annotations)
    except ConversionError as e:
        logger.error("PDF creation failed", error=str(e))
        raise APIError(500, "Failed to create PDF from images", details=str(e))
    except Exception as e:
        logger.exception("Unexpected error creating PDF from images")
        raise APIError(500, "Failed to create PDF from images", details=str(e))

    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": 'attachment; filename="output.pdf"',
            "X-Page-Count": str(result.page_count),
            "X-Annotation-Count": str(result.annotation_count),
            "X-Dropped-Annotations": str(result.dropped_annotations),
            "X-Processing-Time-Ms": str(result.processing_time_ms),
        },
    )
