"""PDF processing package - Rasterization, annotation overlay and assembly."""

from pdf2imagefill.pdf.assembler import assemble_pdf
from pdf2imagefill.pdf.base import AssemblyError, ConversionError, DecodeError, PageImage
from pdf2imagefill.pdf.overlay import (
    Annotation,
    CheckboxAnnotation,
    TextAnnotation,
    composite_annotations,
)
from pdf2imagefill.pdf.rasterizer import rasterize_pdf

__all__ = [
    "Annotation",
    "AssemblyError",
    "CheckboxAnnotation",
    "ConversionError",
    "DecodeError",
    "PageImage",
    "TextAnnotation",
    "assemble_pdf",
    "composite_annotations",
    "rasterize_pdf",
]
