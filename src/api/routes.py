"""Public HTTP routes — quote preview/export and tour rate lookups.

Collaborators (store, renderer, image fetcher) are read from ``app.state``
through small dependency functions so tests can swap them in.
"""
# ruff: noqa: B008  Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from src.config import settings
from src.document.export import build_quote_pages, export_quote_pdf
from src.document.images import ImageFetcher
from src.document.renderer import PdfRenderer
from src.models.enums import ExportErrorKind
from src.pricing import (
    current_price,
    current_season,
    generate_rate_calendar,
    paginate_rates,
    season_price_summary,
)
from src.pricing.discounts import to_money
from src.quotes.normalize import MalformedQuoteError, parse_tour
from src.schemas.quote import Tour
from src.store.firestore import DocumentStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_KIND: dict[ExportErrorKind, int] = {
    ExportErrorKind.NOT_FOUND: 404,
    ExportErrorKind.MALFORMED_QUOTE: 422,
    ExportErrorKind.STORE_UNAVAILABLE: 503,
    ExportErrorKind.RENDER_FAILED: 502,
}


# ── Dependencies ─────────────────────────────────────────────────────


def get_store(request: Request) -> DocumentStore:
    """The configured document store; 503 when none is wired."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Document store is not configured")
    return store


def get_renderer(request: Request) -> PdfRenderer:
    renderer = getattr(request.app.state, "renderer", None)
    return renderer or PdfRenderer()


def get_fetcher(request: Request) -> ImageFetcher:
    fetcher = getattr(request.app.state, "fetcher", None)
    return fetcher or ImageFetcher()


async def _load_tour(tour_id: str, store: DocumentStore) -> Tour:
    try:
        raw = await store.get_tour(tour_id)
    except StoreError as exc:
        logger.warning("Tour %s could not be loaded: %s", tour_id, exc)
        raise HTTPException(status_code=503, detail="Tour storage is unavailable") from exc
    if raw is None:
        raise HTTPException(status_code=404, detail=f"Tour {tour_id} not found")
    try:
        return parse_tour(raw)
    except MalformedQuoteError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# ── Quotes ───────────────────────────────────────────────────────────


@router.get("/quotes/{quote_id}/pages", tags=["quotes"])
async def quote_pages(
    quote_id: str,
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    """Page descriptors for a quote, as JSON (preview without rendering)."""
    result = await build_quote_pages(quote_id, store)
    if not result.ok:
        raise HTTPException(status_code=_STATUS_BY_KIND[result.error], detail=result.message)
    return {
        "quote_id": result.quote_id,
        "quote_number": result.quote_number,
        "pages": [page.model_dump(mode="json") for page in result.pages],
    }


@router.get("/quotes/{quote_id}/pdf", tags=["quotes"])
async def quote_pdf(
    quote_id: str,
    store: DocumentStore = Depends(get_store),
    renderer: PdfRenderer = Depends(get_renderer),
    fetcher: ImageFetcher = Depends(get_fetcher),
) -> Response:
    """Export a quote as a downloadable PDF."""
    result = await export_quote_pdf(quote_id, store, renderer, fetcher)
    if not result.ok:
        raise HTTPException(status_code=_STATUS_BY_KIND[result.error], detail=result.message)
    return Response(
        content=result.pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


# ── Tours ────────────────────────────────────────────────────────────


@router.get("/tours/{tour_id}/rates", tags=["tours"])
async def tour_rates(
    tour_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.render.rates_per_page, ge=1, le=100),
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    """Paginated rate calendar for the next year of departures."""
    tour = await _load_tour(tour_id, store)
    rates = generate_rate_calendar(tour.pricing, tour.duration_days)
    rate_page = paginate_rates(rates, page=page, per_page=per_page)
    return {
        "tour_id": tour_id,
        "title": tour.title,
        "duration_days": tour.duration_days,
        **rate_page.model_dump(mode="json", by_alias=True),
    }


@router.get("/tours/{tour_id}/prices", tags=["tours"])
async def tour_prices(
    tour_id: str,
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    """Per-season price ladder plus today's headline price."""
    tour = await _load_tour(tour_id, store)
    today = date.today()
    headline = current_price(tour.pricing, today)
    return {
        "tour_id": tour_id,
        "title": tour.title,
        "current_season": current_season(today).value,
        "current_price": str(to_money(headline)) if headline is not None else None,
        "seasons": [summary.model_dump(mode="json") for summary in season_price_summary(tour.pricing)],
    }
