# artistconnect/services/cart_service.py
import logging
import uuid
from decimal import Decimal

from fastapi import Depends
from sqlmodel import Session

from artistconnect.core.client_profile import get_profile_id
from artistconnect.core.config import get_settings
from artistconnect.database import get_session
from artistconnect.repositories.cart_repo import CartRepository
from artistconnect.repositories.client_storage_repo import ClientStorageRepository
from artistconnect.schemas.cart import (
    CartItemRead,
    CartLineItem,
    CartLineItemCreate,
    CartSummary,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class CartStore:
    """
    Pending-purchase state for one client profile.

    Responsibilities:
      - keep at most one line item per id (re-adding bumps quantity)
      - never hold a line item with quantity < 1
      - persist the full collection after every mutation
      - compute count / total from the stored rows only

    The store is the only writer of the cart storage key. It is built per
    request by `get_cart_store` and lives for that request; the persisted
    record is what carries the cart across requests and reloads.
    """

    def __init__(
        self,
        repo: CartRepository,
        session: Session,
        profile_id: uuid.UUID,
    ):
        self.repo = repo
        self.session = session
        self.profile_id = profile_id

        # Insertion-ordered so the rendered cart stays stable.
        self._items: dict[str, CartLineItem] = {}
        for item in repo.load(session, profile_id):
            self._items.setdefault(item.id, item)

    # ---- internal helpers ----

    def _save(self) -> None:
        self.repo.save(self.session, self.profile_id, list(self._items.values()))

    # ---- mutations ----

    def add_item(self, entry: CartLineItemCreate) -> CartLineItem:
        """
        Add one unit of `entry`.

        If the id is already in the cart only its quantity changes; the
        stored name, price and other fields are kept as first added.
        """
        existing = self._items.get(entry.id)
        if existing is not None:
            item = existing.model_copy(update={"quantity": existing.quantity + 1})
        else:
            item = CartLineItem(**dict(entry), quantity=1)

        self._items[item.id] = item
        self._save()
        logger.info(
            "Cart %s: %s %s qty=%s", self.profile_id, item.kind, item.id, item.quantity
        )
        return item

    def remove_item(self, item_id: str) -> None:
        """Remove the item if present; unknown ids are ignored."""
        if self._items.pop(item_id, None) is None:
            return
        self._save()
        logger.info("Cart %s: removed %s", self.profile_id, item_id)

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """
        Set the absolute quantity of an item.

        quantity <= 0 removes the item. Unknown ids are ignored.
        """
        if quantity <= 0:
            self.remove_item(item_id)
            return

        existing = self._items.get(item_id)
        if existing is None:
            return

        self._items[item_id] = existing.model_copy(update={"quantity": quantity})
        self._save()

    def clear_cart(self) -> None:
        self._items.clear()
        self._save()
        logger.info("Cart %s: cleared", self.profile_id)

    # ---- reads ----

    @property
    def items(self) -> list[CartLineItem]:
        return list(self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def kinds(self) -> set[str]:
        return {it.kind for it in self._items.values()}

    def get_cart_item_count(self) -> int:
        return sum(it.quantity for it in self._items.values())

    def get_cart_total(self) -> Decimal:
        return sum((it.line_total for it in self._items.values()), Decimal("0"))

    def summary(self) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with line_total)
          - total_quantity
          - total_price (exact sum of the line totals)
        """
        rows = [
            CartItemRead(
                kind=it.kind,
                id=it.id,
                name=it.name,
                description=it.description,
                price=it.price,
                quantity=it.quantity,
                image_url=it.image_url,
                artist=it.artist,
                subcategory=it.subcategory,
                line_total=it.line_total,
            )
            for it in self._items.values()
        ]
        return CartSummary(
            items=rows,
            total_quantity=self.get_cart_item_count(),
            total_price=self.get_cart_total(),
        )


# ---- single accessor ----

storage_repo = ClientStorageRepository()
cart_repo = CartRepository(storage_repo, settings.CART_STORAGE_KEY)


def get_cart_store(
    session: Session = Depends(get_session),
    profile_id: uuid.UUID = Depends(get_profile_id),
) -> CartStore:
    """
    FastAPI dependency: the cart of the current client profile.

    FastAPI caches dependencies per request, so every consumer in one
    request (router, checkout orchestrator, terminal page) shares the same
    store instance and therefore sees its writes.
    """
    return CartStore(cart_repo, session, profile_id)
