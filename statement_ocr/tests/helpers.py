"""Shared builders for test documents and fake service responses."""

from io import BytesIO
from types import SimpleNamespace

from PIL import Image

PAGE_COLORS = [(220, 20, 20), (20, 200, 20), (20, 20, 220), (230, 230, 20)]


def make_pdf(page_count: int, size: tuple[int, int] = (200, 100)) -> bytes:
    """Build a PDF whose pages are solid colors from PAGE_COLORS, in order."""
    pages = [Image.new("RGB", size, PAGE_COLORS[i % len(PAGE_COLORS)]) for i in range(page_count)]
    buffer = BytesIO()
    pages[0].save(buffer, format="PDF", save_all=True, append_images=pages[1:], resolution=72.0)
    return buffer.getvalue()


def make_image(fmt: str = "PNG", size: tuple[int, int] = (40, 30)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, (255, 255, 255)).save(buffer, format=fmt)
    return buffer.getvalue()


def llm_response(content: str | None) -> SimpleNamespace:
    """Mimic the shape of a LiteLLM completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
