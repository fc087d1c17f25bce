"""Document store adapters."""

from src.store.firestore import DocumentStore, FirestoreStore, StoreError, create_firestore_client

__all__ = ["DocumentStore", "FirestoreStore", "StoreError", "create_firestore_client"]
