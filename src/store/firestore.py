"""Document store access — quotes and tour packages live in Firestore.

The Firestore client is injected by the composition root (see main.py);
nothing here connects at import time.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from google.api_core import exceptions as gcp_exceptions

from src.config import settings

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the document store cannot be reached or queried."""


class DocumentStore(Protocol):
    """Read access to stored quote and tour documents."""

    async def get_quote(self, quote_id: str) -> dict[str, Any] | None: ...

    async def get_tour(self, tour_id: str) -> dict[str, Any] | None: ...


class FirestoreStore:
    """DocumentStore backed by an async Firestore client."""

    def __init__(
        self,
        client: Any,
        quotes_collection: str | None = None,
        tours_collection: str | None = None,
    ) -> None:
        self._client = client
        self._quotes = quotes_collection or settings.firebase.quotes_collection
        self._tours = tours_collection or settings.firebase.tours_collection

    async def get_quote(self, quote_id: str) -> dict[str, Any] | None:
        """Fetch a quote document by id; None when it does not exist."""
        return await self._get(self._quotes, quote_id)

    async def get_tour(self, tour_id: str) -> dict[str, Any] | None:
        """Fetch a tour package document by id; None when it does not exist."""
        return await self._get(self._tours, tour_id)

    async def close(self) -> None:
        """Close the client's gRPC transport, if a channel was ever opened."""
        # The async client exposes no close(); its transport is created lazily
        api = getattr(self._client, "_firestore_api_internal", None)
        if api is None:
            return
        await api.transport.close()
        logger.info("Firestore transport closed")

    async def _get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        try:
            snapshot = await self._client.collection(collection).document(doc_id).get()
        except gcp_exceptions.GoogleAPIError as exc:
            logger.warning("Firestore read failed for %s/%s: %s", collection, doc_id, exc)
            raise StoreError(f"Could not read {collection}/{doc_id}") from exc

        if not snapshot.exists:
            logger.info("Document %s/%s not found", collection, doc_id)
            return None
        return snapshot.to_dict()


def create_firestore_client() -> Any:
    """Initialize firebase-admin from settings and return an async Firestore client.

    Called once from the application lifespan.
    """
    import firebase_admin
    from firebase_admin import credentials, firestore_async

    if not firebase_admin._apps:
        cred = credentials.Certificate(settings.firebase.firebase_credentials_path)
        options = {}
        if settings.firebase.firebase_project_id:
            options["projectId"] = settings.firebase.firebase_project_id
        firebase_admin.initialize_app(cred, options or None)
    return firestore_async.client()
