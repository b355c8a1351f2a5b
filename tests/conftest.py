"""Shared pytest fixtures: in-memory client storage, a fake commerce backend, tokens."""
from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

# Settings are read once; set the environment before importing the app.
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from artistconnect.core.commerce_client import CommerceApiError
from artistconnect.models import client_storage as _client_storage_models  # noqa: F401
from artistconnect.repositories.cart_repo import CartRepository
from artistconnect.repositories.client_storage_repo import ClientStorageRepository
from artistconnect.repositories.payment_context_repo import PaymentContextRepository
from artistconnect.schemas.cart import CartLineItemCreate
from artistconnect.services.cart_service import CartStore


@dataclass
class FakeCommerce:
    """Stands in for the Remote Commerce API; records every call."""

    configured: bool = True
    admin: bool = False
    session_response: Any = '{"id": "cs_test_123", "url": "https://checkout.stripe.com/pay/cs_test_123"}'
    status_response: Any = None
    error: CommerceApiError | None = None
    calls: list[tuple[str, tuple]] = field(default_factory=list)

    def _record(self, name: str, *args):
        self.calls.append((name, args))
        if self.error is not None and name not in ("is_stripe_configured", "is_caller_admin"):
            raise self.error

    def called(self, name: str) -> list[tuple]:
        return [args for n, args in self.calls if n == name]

    def is_stripe_configured(self) -> bool:
        self.calls.append(("is_stripe_configured", ()))
        return self.configured

    def is_caller_admin(self) -> bool:
        self.calls.append(("is_caller_admin", ()))
        return self.admin

    def create_checkout_session(self, items, success_url, cancel_url):
        self._record("create_checkout_session", list(items), success_url, cancel_url)
        return self.session_response

    def donate_to_artist(self, artist_id, amount_in_cents, success_url, cancel_url):
        self._record("donate_to_artist", artist_id, amount_in_cents, success_url, cancel_url)
        return self.session_response

    def get_stripe_session_status(self, session_id):
        self._record("get_stripe_session_status", session_id)
        return self.status_response

    def set_stripe_configuration(self, config):
        self._record("set_stripe_configuration", config)
        self.configured = True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage_repo() -> ClientStorageRepository:
    return ClientStorageRepository()


@pytest.fixture
def cart_repo(storage_repo) -> CartRepository:
    return CartRepository(storage_repo, "artist-connect-cart")


@pytest.fixture
def context_repo(storage_repo) -> PaymentContextRepository:
    return PaymentContextRepository(storage_repo, "paymentContext")


@pytest.fixture
def profile_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def make_store(cart_repo, session, profile_id):
    """Build a fresh CartStore over the same persisted storage (a 'reload')."""

    def _make() -> CartStore:
        return CartStore(cart_repo, session, profile_id)

    return _make


@pytest.fixture
def fake_commerce() -> FakeCommerce:
    return FakeCommerce()


def make_entry(
    item_id: str = "prod-1",
    kind: str = "product",
    price: str = "9.99",
    name: str | None = None,
    **extra,
) -> CartLineItemCreate:
    return CartLineItemCreate(
        kind=kind,
        id=item_id,
        name=name or f"Item {item_id}",
        description=f"Description of {item_id}",
        price=Decimal(price),
        **extra,
    )


def make_token(sub: str = "user-123", email: str = "fan@example.com") -> str:
    return jwt.encode(
        {"sub": sub, "email": email},
        os.environ["SUPABASE_JWT_SECRET"],
        algorithm="HS256",
    )
