# artistconnect/repositories/cart_repo.py
import logging
import uuid

from pydantic import ValidationError
from sqlmodel import Session

from artistconnect.repositories.client_storage_repo import ClientStorageRepository
from artistconnect.schemas.cart import CartLineItem

logger = logging.getLogger(__name__)

# Version of the persisted record layout.
CART_RECORD_VERSION = 0


class CartRepository:
    """
    Persists a client profile's cart under one fixed storage key.

    Record layout (same as the browser-persisted record):

        {"state": {"items": [{"type": ..., "id": ..., "price": 9.99,
                              "quantity": 2, ...}]},
         "version": 0}

    Reads are forgiving: unknown fields are ignored, missing optional
    fields default to None, and a record that cannot be parsed at all is
    treated as an empty cart.
    """

    def __init__(self, storage: ClientStorageRepository, storage_key: str):
        self.storage = storage
        self.storage_key = storage_key

    def load(self, session: Session, profile_id: uuid.UUID) -> list[CartLineItem]:
        try:
            record = self.storage.get_json(session, profile_id, self.storage_key)
        except ValueError:
            logger.warning("Discarding unreadable cart record for profile %s", profile_id)
            return []

        if not isinstance(record, dict):
            return []

        state = record.get("state", record)
        raw_items = state.get("items") if isinstance(state, dict) else None
        if not isinstance(raw_items, list):
            return []

        items: list[CartLineItem] = []
        for raw in raw_items:
            try:
                items.append(CartLineItem.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid cart entry for profile %s: %s", profile_id, e
                )
        return items

    def save(
        self, session: Session, profile_id: uuid.UUID, items: list[CartLineItem]
    ) -> None:
        record = {
            "state": {"items": [it.model_dump(by_alias=True) for it in items]},
            "version": CART_RECORD_VERSION,
        }
        self.storage.set_json(session, profile_id, self.storage_key, record)
