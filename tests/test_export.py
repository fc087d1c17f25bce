"""Tests for the quote export pipeline.

Covers:
- Successful export: filename, page count, images fetched for the pages
- Each failure kind: not found, store unavailable, malformed, render failed
- Page preview without rendering
- End-to-end with the real renderer
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.document.export import RENDER_FAILED_MESSAGE, build_quote_pages, export_quote_pdf
from src.document.renderer import PdfRenderer, RenderError
from src.models.enums import ExportErrorKind
from src.store.firestore import StoreError
from tests.factories import make_raw_quote


def _make_store(raw=None, error: Exception | None = None) -> AsyncMock:
    store = AsyncMock()
    if error is not None:
        store.get_quote.side_effect = error
    else:
        store.get_quote.return_value = raw
    return store


def _make_renderer(pdf: bytes = b"%PDF-1.4 fake") -> MagicMock:
    renderer = MagicMock(spec=PdfRenderer)
    renderer.render.return_value = pdf
    return renderer


def _make_fetcher() -> AsyncMock:
    fetcher = AsyncMock()
    fetcher.fetch_all.return_value = {}
    return fetcher


class TestExportQuotePdf:
    @pytest.mark.asyncio()
    async def test_success(self, raw_quote) -> None:
        renderer = _make_renderer()
        result = await export_quote_pdf("q1", _make_store(raw_quote), renderer, _make_fetcher())
        assert result.ok is True
        assert result.error is None
        assert result.filename == "SN-2024-001.pdf"
        assert result.pdf == b"%PDF-1.4 fake"
        assert result.page_count == 8
        renderer.render.assert_called_once()

    @pytest.mark.asyncio()
    async def test_fetches_page_images(self, raw_quote) -> None:
        fetcher = _make_fetcher()
        await export_quote_pdf("q1", _make_store(raw_quote), _make_renderer(), fetcher)
        fetcher.fetch_all.assert_awaited_once_with([
            "https://img.test/arusha-1.jpg",
            "https://img.test/serengeti.jpg",
            "https://img.test/lodge.jpg",
        ])

    @pytest.mark.asyncio()
    async def test_filename_from_derived_number(self) -> None:
        raw = make_raw_quote()
        del raw["quoteNumber"]
        result = await export_quote_pdf("abcdefgh1234", _make_store(raw), _make_renderer(), _make_fetcher())
        assert result.filename == "SN-abcdefgh.pdf"

    @pytest.mark.asyncio()
    async def test_not_found(self) -> None:
        renderer = _make_renderer()
        result = await export_quote_pdf("missing", _make_store(None), renderer, _make_fetcher())
        assert result.ok is False
        assert result.error is ExportErrorKind.NOT_FOUND
        assert result.pdf is None
        renderer.render.assert_not_called()

    @pytest.mark.asyncio()
    async def test_store_unavailable(self) -> None:
        store = _make_store(error=StoreError("deadline exceeded"))
        result = await export_quote_pdf("q1", store, _make_renderer(), _make_fetcher())
        assert result.error is ExportErrorKind.STORE_UNAVAILABLE

    @pytest.mark.asyncio()
    async def test_malformed(self) -> None:
        result = await export_quote_pdf("q1", _make_store(["not", "a", "quote"]), _make_renderer(), _make_fetcher())
        assert result.error is ExportErrorKind.MALFORMED_QUOTE

    @pytest.mark.asyncio()
    async def test_render_failed(self, raw_quote) -> None:
        renderer = _make_renderer()
        renderer.render.side_effect = RenderError("boom")
        result = await export_quote_pdf("q1", _make_store(raw_quote), renderer, _make_fetcher())
        assert result.ok is False
        assert result.error is ExportErrorKind.RENDER_FAILED
        assert result.message == RENDER_FAILED_MESSAGE
        assert result.quote_number == "SN-2024-001"

    @pytest.mark.asyncio()
    async def test_real_renderer(self, raw_quote) -> None:
        result = await export_quote_pdf("q1", _make_store(raw_quote), PdfRenderer(), _make_fetcher())
        assert result.ok is True
        assert result.pdf.startswith(b"%PDF")


class TestBuildQuotePages:
    @pytest.mark.asyncio()
    async def test_success(self, raw_quote) -> None:
        result = await build_quote_pages("q1", _make_store(raw_quote))
        assert result.ok is True
        assert result.quote_number == "SN-2024-001"
        assert len(result.pages) == 8

    @pytest.mark.asyncio()
    async def test_not_found(self) -> None:
        result = await build_quote_pages("missing", _make_store(None))
        assert result.error is ExportErrorKind.NOT_FOUND
        assert result.pages == []
