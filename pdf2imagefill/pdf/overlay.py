"""Annotation overlay for page images.

Annotations are described as an SVG layer sized to the page, rasterized
with PyMuPDF into a transparent layer and alpha-composited onto the page
with Pillow. Coordinates are pixels with the origin at the top-left.
"""

import io
from collections import defaultdict
from dataclasses import dataclass

import fitz  # PyMuPDF
from PIL import Image

from pdf2imagefill.pdf.base import AssemblyError, DecodeError
from pdf2imagefill.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FONT_SIZE = 14
DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_COLOR = "black"
DEFAULT_CHECKBOX_SIZE = 20

CHECKBOX_STROKE = "black"
CHECKBOX_STROKE_WIDTH = 2

# Modes Pillow can write as PNG without conversion
PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16")

_MARKUP_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    "'": "&apos;",
    '"': "&quot;",
}


@dataclass(frozen=True)
class TextAnnotation:
    """Text stamped onto a page.

    Attributes:
        page: Page number (1-indexed)
        x: X coordinate of the text start, in pixels from the left
        y: Y coordinate of the baseline, in pixels from the top
        text: Text to draw
        font_size: Font size in pixels
        font_family: Font family name
        color: Fill color (any SVG color value)
    """

    page: int
    x: float
    y: float
    text: str = ""
    font_size: float = DEFAULT_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    color: str = DEFAULT_COLOR


@dataclass(frozen=True)
class CheckboxAnnotation:
    """A square outline with an inscribed X.

    Attributes:
        page: Page number (1-indexed)
        x: X coordinate of the top-left corner, in pixels
        y: Y coordinate of the top-left corner, in pixels
        size: Side length in pixels
    """

    page: int
    x: float
    y: float
    size: float = DEFAULT_CHECKBOX_SIZE


Annotation = TextAnnotation | CheckboxAnnotation


def escape_markup(text: str) -> str:
    """Escape the five reserved XML characters."""
    return "".join(_MARKUP_ESCAPES.get(char, char) for char in text)


def group_annotations_by_page(
    annotations: list[Annotation],
) -> dict[int, list[Annotation]]:
    """Group annotations by page, keeping input order within each page."""
    grouped: dict[int, list[Annotation]] = defaultdict(list)
    for annotation in annotations:
        grouped[annotation.page].append(annotation)
    return dict(grouped)


def _num(value: float) -> str:
    """Format a coordinate for SVG attributes."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def _checkbox_markup(box: CheckboxAnnotation) -> str:
    x0, y0 = _num(box.x), _num(box.y)
    x1, y1 = _num(box.x + box.size), _num(box.y + box.size)
    stroke = f'stroke="{CHECKBOX_STROKE}" stroke-width="{CHECKBOX_STROKE_WIDTH}"'
    return (
        f'<rect x="{x0}" y="{y0}" width="{_num(box.size)}" height="{_num(box.size)}" '
        f'{stroke} fill="none"/>'
        f'<line x1="{x0}" y1="{y0}" x2="{x1}" y2="{y1}" {stroke}/>'
        f'<line x1="{x1}" y1="{y0}" x2="{x0}" y2="{y1}" {stroke}/>'
    )


def _text_markup(text: TextAnnotation) -> str:
    return (
        f'<text x="{_num(text.x)}" y="{_num(text.y)}" '
        f'font-family="{escape_markup(text.font_family)}" '
        f'font-size="{_num(text.font_size)}" '
        f'fill="{escape_markup(text.color)}">{escape_markup(text.text)}</text>'
    )


def build_overlay_svg(annotations: list[Annotation], width: int, height: int) -> str:
    """Describe a page's annotations as an SVG document.

    Later annotations are drawn on top of earlier ones.

    Args:
        annotations: Annotations for a single page, in render order
        width: Page width in pixels
        height: Page height in pixels

    Returns:
        SVG markup sized exactly to the page
    """
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
    ]

    for annotation in annotations:
        if isinstance(annotation, CheckboxAnnotation):
            parts.append(_checkbox_markup(annotation))
        elif isinstance(annotation, TextAnnotation):
            parts.append(_text_markup(annotation))
        else:
            raise TypeError(f"Unknown annotation type: {type(annotation).__name__}")

    parts.append("</svg>")
    return "".join(parts)


def render_overlay(svg: str, width: int, height: int) -> Image.Image:
    """Rasterize overlay markup into a transparent RGBA layer of the given size.

    Raises:
        AssemblyError: If the markup cannot be rendered
    """
    try:
        doc = fitz.open(stream=svg.encode("utf-8"), filetype="svg")
    except Exception as e:
        raise AssemblyError("Failed to render annotation overlay", str(e)) from e

    try:
        pix = doc[0].get_pixmap(alpha=True)
        # MuPDF samples are premultiplied
        layer = Image.frombytes("RGBA", (pix.width, pix.height), pix.samples, "raw", "RGBa")
    except Exception as e:
        raise AssemblyError("Failed to render annotation overlay", str(e)) from e
    finally:
        doc.close()

    # MuPDF may round the page box; pin the layer to the page size
    if layer.size != (width, height):
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        canvas.paste(layer, (0, 0))
        layer = canvas

    return layer


def composite_annotations(
    image_bytes: bytes,
    annotations: list[Annotation],
) -> tuple[bytes, int, int]:
    """Draw annotations onto a page image.

    Args:
        image_bytes: Encoded page image (PNG or any format Pillow reads)
        annotations: Annotations for this page, in render order

    Returns:
        Tuple of (PNG bytes, width, height)

    Raises:
        DecodeError: If the image cannot be decoded
        AssemblyError: If the overlay cannot be rendered
    """
    try:
        base = Image.open(io.BytesIO(image_bytes))
        base.load()
    except Exception as e:
        raise DecodeError("Failed to decode image", str(e)) from e

    width, height = base.size
    has_alpha = "A" in base.getbands() or "transparency" in base.info

    if annotations:
        svg = build_overlay_svg(annotations, width, height)
        layer = render_overlay(svg, width, height)
        result = Image.alpha_composite(base.convert("RGBA"), layer)
        if not has_alpha:
            result = result.convert("RGB")
    elif base.mode in PNG_MODES:
        result = base
    else:
        result = base.convert("RGBA" if has_alpha else "RGB")

    buffer = io.BytesIO()
    result.save(buffer, format="PNG")

    logger.debug(
        "Composited page",
        width=width,
        height=height,
        annotation_count=len(annotations),
    )
    return buffer.getvalue(), width, height
