"""Quote documents — page building, PDF rendering, export pipeline."""

from src.document.builder import build_pages
from src.document.export import build_quote_pages, export_quote_pdf
from src.document.images import ImageFetcher
from src.document.renderer import PdfRenderer, RenderError

__all__ = [
    "build_pages",
    "build_quote_pages",
    "export_quote_pdf",
    "ImageFetcher",
    "PdfRenderer",
    "RenderError",
]
