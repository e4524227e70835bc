"""Unit tests for annotation overlays."""

import io
import xml.etree.ElementTree as ET

import pytest
from PIL import Image, ImageOps

from pdf2imagefill.pdf.base import DecodeError
from pdf2imagefill.pdf.overlay import (
    CheckboxAnnotation,
    TextAnnotation,
    build_overlay_svg,
    composite_annotations,
    escape_markup,
    group_annotations_by_page,
)
from tests.conftest import build_png

SVG_NS = "{http://www.w3.org/2000/svg}"


def _parse(svg: str) -> ET.Element:
    return ET.fromstring(svg)


def _open(png: bytes) -> Image.Image:
    return Image.open(io.BytesIO(png))


class TestEscapeMarkup:
    """Tests for markup escaping."""

    def test_escapes_reserved_characters(self):
        assert escape_markup("<a>&\"'") == "&lt;a&gt;&amp;&quot;&apos;"

    def test_plain_text_unchanged(self):
        assert escape_markup("John Doe") == "John Doe"

    def test_ampersand_escaped_once(self):
        assert escape_markup("&lt;") == "&amp;lt;"


class TestGroupAnnotations:
    """Tests for per-page grouping."""

    def test_preserves_input_order_within_page(self):
        """Test that later annotations stay after earlier ones."""
        first = TextAnnotation(page=1, x=500, y=500, text="first")
        second = CheckboxAnnotation(page=2, x=0, y=0)
        third = TextAnnotation(page=1, x=0, y=0, text="third")

        grouped = group_annotations_by_page([first, second, third])

        assert grouped == {1: [first, third], 2: [second]}

    def test_empty(self):
        assert group_annotations_by_page([]) == {}


class TestBuildOverlaySvg:
    """Tests for overlay markup."""

    def test_sized_to_page(self):
        root = _parse(build_overlay_svg([], 640, 480))

        assert root.get("width") == "640"
        assert root.get("height") == "480"
        assert root.get("viewBox") == "0 0 640 480"

    def test_checkbox_square_with_x(self):
        """Test a checkbox at (100,100) size 20 spans to (120,120) with an X."""
        root = _parse(build_overlay_svg([CheckboxAnnotation(page=1, x=100, y=100, size=20)], 300, 300))

        rect = root.find(f"{SVG_NS}rect")
        assert (rect.get("x"), rect.get("y")) == ("100", "100")
        assert (rect.get("width"), rect.get("height")) == ("20", "20")
        assert rect.get("fill") == "none"

        lines = [
            (line.get("x1"), line.get("y1"), line.get("x2"), line.get("y2"))
            for line in root.findall(f"{SVG_NS}line")
        ]
        assert lines == [("100", "100", "120", "120"), ("120", "100", "100", "120")]

    def test_text_placed_on_baseline(self):
        """Test that text y is the baseline coordinate."""
        root = _parse(build_overlay_svg([TextAnnotation(page=1, x=100, y=200, text="John Doe")], 300, 300))

        text = root.find(f"{SVG_NS}text")
        assert (text.get("x"), text.get("y")) == ("100", "200")
        assert text.text == "John Doe"

    def test_text_defaults(self):
        root = _parse(build_overlay_svg([TextAnnotation(page=1, x=0, y=10)], 50, 50))

        text = root.find(f"{SVG_NS}text")
        assert text.get("font-family") == "Arial"
        assert text.get("font-size") == "14"
        assert text.get("fill") == "black"

    def test_reserved_characters_do_not_corrupt_markup(self):
        """Test that reserved characters round-trip as literal text."""
        annotation = TextAnnotation(page=1, x=10, y=20, text="<a>&\"'")

        svg = build_overlay_svg([annotation], 100, 100)
        root = _parse(svg)

        assert "&lt;a&gt;&amp;&quot;&apos;" in svg
        assert root.find(f"{SVG_NS}text").text == "<a>&\"'"
        assert len(list(root)) == 1

    def test_attribute_values_escaped(self):
        """Test that style attributes cannot break out of their quotes."""
        annotation = TextAnnotation(page=1, x=0, y=10, font_family='x" onload="y', color="red")

        root = _parse(build_overlay_svg([annotation], 50, 50))

        text = root.find(f"{SVG_NS}text")
        assert text.get("font-family") == 'x" onload="y'
        assert text.get("onload") is None

    def test_fractional_coordinates(self):
        root = _parse(build_overlay_svg([TextAnnotation(page=1, x=10.5, y=20.25, text="a")], 50, 50))

        text = root.find(f"{SVG_NS}text")
        assert (text.get("x"), text.get("y")) == ("10.5", "20.25")

    def test_render_order_matches_input_order(self):
        annotations = [
            TextAnnotation(page=1, x=0, y=10, text="under"),
            CheckboxAnnotation(page=1, x=0, y=0),
            TextAnnotation(page=1, x=0, y=10, text="over"),
        ]

        root = _parse(build_overlay_svg(annotations, 50, 50))

        tags = [child.tag.replace(SVG_NS, "") for child in root]
        assert tags == ["text", "rect", "line", "line", "text"]


class TestCompositeAnnotations:
    """Tests for drawing overlays onto page images."""

    def test_checkbox_pixels(self, sample_image_bytes):
        """Test that a checkbox outline and X are drawn where requested."""
        png, width, height = composite_annotations(
            sample_image_bytes, [CheckboxAnnotation(page=1, x=100, y=100, size=20)]
        )

        img = _open(png).convert("L")
        assert (width, height) == (300, 300)
        assert img.size == (300, 300)
        assert img.getpixel((110, 110)) < 128  # diagonals cross
        assert img.getpixel((100, 105)) < 128  # left edge
        assert img.getpixel((150, 150)) == 255
        assert img.getpixel((10, 10)) == 255

    def test_text_sits_on_baseline(self, sample_image_bytes):
        """Test that rendered text ends at its baseline and starts at x."""
        png, _, _ = composite_annotations(
            sample_image_bytes,
            [TextAnnotation(page=1, x=100, y=200, text="HELLO", font_size=20)],
        )

        bbox = ImageOps.invert(_open(png).convert("L")).getbbox()
        assert bbox is not None
        left, top, right, bottom = bbox
        assert 98 <= left <= 104
        assert 180 <= top < 200
        assert bottom <= 202

    def test_no_annotations_keeps_image(self, sample_image_bytes):
        png, width, height = composite_annotations(sample_image_bytes, [])

        img = _open(png)
        assert (width, height) == (300, 300)
        assert img.convert("L").getextrema() == (255, 255)

    def test_opaque_input_stays_opaque(self, sample_image_bytes):
        png, _, _ = composite_annotations(sample_image_bytes, [CheckboxAnnotation(page=1, x=0, y=0)])

        assert _open(png).mode == "RGB"

    def test_alpha_input_keeps_alpha(self):
        png, _, _ = composite_annotations(
            build_png(50, 50, color=(255, 255, 255, 0), mode="RGBA"),
            [CheckboxAnnotation(page=1, x=0, y=0)],
        )

        assert _open(png).mode == "RGBA"

    def test_undecodable_image_raises(self):
        with pytest.raises(DecodeError, match="Failed to decode image"):
            composite_annotations(b"not an image", [])
