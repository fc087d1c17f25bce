"""Quote export pipeline — load, normalize, build pages, fetch images, render.

Each step either hands its output to the next or stops the pipeline with
an ExportErrorKind. Expected failures never raise out of here: callers get
an ExportResult / PagesResult and pick the presentation themselves.
"""

from __future__ import annotations

import logging

from src.document.builder import build_pages
from src.document.images import ImageFetcher
from src.document.renderer import PdfRenderer, RenderError
from src.models.enums import ExportErrorKind
from src.quotes.normalize import MalformedQuoteError, parse_quote
from src.schemas.export import ExportResult, PagesResult
from src.schemas.pages import image_urls
from src.schemas.quote import Quote
from src.store.firestore import DocumentStore, StoreError

logger = logging.getLogger(__name__)

RENDER_FAILED_MESSAGE = "Export failed, please try again."


class _PipelineStop(Exception):
    """Internal: carries the error kind out of a failed step."""

    def __init__(self, kind: ExportErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


async def _load_quote(quote_id: str, store: DocumentStore) -> Quote:
    try:
        raw = await store.get_quote(quote_id)
    except StoreError as exc:
        raise _PipelineStop(ExportErrorKind.STORE_UNAVAILABLE, "Quote storage is unavailable.") from exc

    if raw is None:
        raise _PipelineStop(ExportErrorKind.NOT_FOUND, f"Quote {quote_id} not found.")

    try:
        return parse_quote(raw, quote_id=quote_id)
    except MalformedQuoteError as exc:
        raise _PipelineStop(ExportErrorKind.MALFORMED_QUOTE, str(exc)) from exc


async def build_quote_pages(quote_id: str, store: DocumentStore) -> PagesResult:
    """Load a quote and return its page descriptors (no rendering)."""
    try:
        quote = await _load_quote(quote_id, store)
    except _PipelineStop as stop:
        logger.info("Page preview for %s stopped: %s", quote_id, stop.kind.value)
        return PagesResult(ok=False, quote_id=quote_id, error=stop.kind, message=stop.message)

    return PagesResult(
        ok=True,
        quote_id=quote_id,
        quote_number=quote.quote_number,
        pages=build_pages(quote),
    )


async def export_quote_pdf(
    quote_id: str,
    store: DocumentStore,
    renderer: PdfRenderer,
    fetcher: ImageFetcher,
) -> ExportResult:
    """Run the full export and return the PDF bytes or the failure kind."""
    try:
        quote = await _load_quote(quote_id, store)
    except _PipelineStop as stop:
        logger.info("Export of %s stopped: %s", quote_id, stop.kind.value)
        return ExportResult(ok=False, quote_id=quote_id, error=stop.kind, message=stop.message)

    pages = build_pages(quote)
    images = await fetcher.fetch_all(image_urls(pages))
    logger.debug("Fetched %d images for quote %s", len(images), quote.quote_number)

    try:
        pdf = renderer.render(pages, images, title=quote.tour_info.tour_title)
    except RenderError:
        logger.error("Render failed for quote %s", quote.quote_number)
        return ExportResult(
            ok=False,
            quote_id=quote_id,
            quote_number=quote.quote_number,
            error=ExportErrorKind.RENDER_FAILED,
            message=RENDER_FAILED_MESSAGE,
        )

    logger.info("Exported quote %s (%d pages, %d bytes)", quote.quote_number, len(pages), len(pdf))
    return ExportResult(
        ok=True,
        quote_id=quote_id,
        quote_number=quote.quote_number,
        filename=f"{quote.quote_number}.pdf",
        pdf=pdf,
        page_count=len(pages),
    )
