"""Pytest configuration and fixtures."""

import io

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from pdf2imagefill.config import get_settings
from pdf2imagefill.main import app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point scratch space at a per-test directory."""
    monkeypatch.setenv("TEMP_DIR", str(tmp_path / "scratch"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def scratch_dir(isolated_settings):
    """The temp directory used for PDF assembly."""
    return isolated_settings.temp_dir


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


def build_pdf(sizes: list[tuple[float, float]]) -> bytes:
    """Build a PDF with one page per (width, height) in points."""
    doc = fitz.open()
    for index, (width, height) in enumerate(sizes):
        page = doc.new_page(width=width, height=height)
        page.insert_text((20, 40), f"Page {index + 1}", fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


def build_png(width: int, height: int, color="white", mode: str = "RGB") -> bytes:
    """Build a solid-color PNG."""
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_pdf_bytes():
    """A two-page PDF: 200x300 pt portrait, then 300x200 pt landscape."""
    return build_pdf([(200, 300), (300, 200)])


@pytest.fixture
def sample_image_bytes():
    """A 300x300 white PNG."""
    return build_png(300, 300)
