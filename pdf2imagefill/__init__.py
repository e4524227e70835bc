"""PDF2ImageFill - PDF to page images and back, with pixel-coordinate annotations."""

__version__ = "1.0.0"
