"""Shared page type and error taxonomy for PDF conversion."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageImage:
    """A single rendered page.

    Attributes:
        page_number: Page number (1-indexed)
        width: Width in pixels
        height: Height in pixels
        image_bytes: PNG-encoded raster
    """

    page_number: int
    width: int
    height: int
    image_bytes: bytes

    def __post_init__(self) -> None:
        """Validate the page."""
        if self.page_number < 1:
            raise ValueError(f"Page number must be 1 or greater, got {self.page_number}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Page dimensions must be positive, got {self.width}x{self.height}")


class ConversionError(Exception):
    """Base exception for PDF and image conversion failures.

    Attributes:
        message: Short description of what failed
        details: Underlying library message, for diagnosing malformed input
    """

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(f"{message}: {details}" if details else message)


class DecodeError(ConversionError):
    """Raised when PDF or image bytes cannot be decoded."""


class AssemblyError(ConversionError):
    """Raised when the output PDF cannot be written or finalized."""
