"""API request and response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pdf2imagefill.api.errors import ClientInputError, describe_validation_errors
from pdf2imagefill.pdf.base import PageImage
from pdf2imagefill.pdf.overlay import (
    DEFAULT_CHECKBOX_SIZE,
    DEFAULT_COLOR,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    Annotation,
    CheckboxAnnotation,
    TextAnnotation,
)
from pdf2imagefill.utils.image_utils import encode_base64_image

CHECKBOX_TYPES = ("checkbox", "checkmark")


class PageImagePayload(BaseModel):
    """A rendered page as returned to the caller."""

    page: int = Field(description="Page number (1-indexed)")
    image: str = Field(description="Base64-encoded PNG")
    width: int = Field(description="Width in pixels")
    height: int = Field(description="Height in pixels")


class PdfToImagesResponse(BaseModel):
    """Response from PDF rasterization."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    page_count: int = Field(alias="pageCount", description="Number of pages rendered")
    images: list[PageImagePayload]

    @classmethod
    def from_pages(cls, pages: list[PageImage]) -> "PdfToImagesResponse":
        """Create response from rendered pages.

        Args:
            pages: Rasterizer output

        Returns:
            PdfToImagesResponse instance
        """
        return cls(
            page_count=len(pages),
            images=[
                PageImagePayload(
                    page=page.page_number,
                    image=encode_base64_image(page.image_bytes),
                    width=page.width,
                    height=page.height,
                )
                for page in pages
            ],
        )


class AnnotationRecord(BaseModel):
    """A caller-supplied annotation.

    `type` of "checkbox" or "checkmark" selects a checkbox; anything else is
    text. Optional fields that are missing, null, zero or empty fall back to
    their defaults.
    """

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    page: int
    x: float
    y: float
    text: str | None = None
    type: str | None = None
    font_size: float | None = Field(default=None, alias="fontSize", ge=0)
    font_family: str | None = Field(default=None, alias="fontFamily")
    color: str | None = None
    size: float | None = Field(default=None, ge=0)

    def to_annotation(self) -> Annotation:
        """Convert to the overlay's annotation type."""
        if self.type in CHECKBOX_TYPES:
            return CheckboxAnnotation(
                page=self.page,
                x=self.x,
                y=self.y,
                size=self.size or DEFAULT_CHECKBOX_SIZE,
            )

        return TextAnnotation(
            page=self.page,
            x=self.x,
            y=self.y,
            text=self.text or "",
            font_size=self.font_size or DEFAULT_FONT_SIZE,
            font_family=self.font_family or DEFAULT_FONT_FAMILY,
            color=self.color or DEFAULT_COLOR,
        )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    message: str
    version: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    details: str | None = None


def _image_payload(entry: Any, index: int) -> str:
    """Pull the base64 text out of an image entry."""
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict) and isinstance(entry.get("image"), str):
        return entry["image"]
    raise ClientInputError(
        f"Invalid image at index {index}",
        details="expected a base64 string or an object with an 'image' field",
    )


def parse_assembly_request(payload: Any) -> tuple[list[str], list[Annotation]]:
    """Validate an images-to-PDF request body.

    Args:
        payload: Decoded JSON body

    Returns:
        Tuple of (base64 image payloads in page order, annotations)

    Raises:
        ClientInputError: If `images` or `annotations` is missing or malformed
    """
    body = payload if isinstance(payload, dict) else {}
    images = body.get("images")
    annotations = body.get("annotations")

    if not isinstance(images, list):
        raise ClientInputError("Images array required")
    if not isinstance(annotations, list):
        raise ClientInputError("Annotations array required")
    if not images:
        raise ClientInputError("Images array must not be empty")

    payloads = [_image_payload(entry, index) for index, entry in enumerate(images)]

    parsed = []
    for index, record in enumerate(annotations):
        try:
            parsed.append(AnnotationRecord.model_validate(record).to_annotation())
        except ValidationError as e:
            raise ClientInputError(
                f"Invalid annotation at index {index}",
                details=describe_validation_errors(e.errors()),
            ) from e

    return payloads, parsed
