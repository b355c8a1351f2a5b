# artistconnect/core/commerce_client.py
"""
Remote Commerce API client.

All marketplace state lives in the Supabase project. The storefront only
calls a handful of Postgres RPC functions there:

    is_stripe_configured()                          -> bool
    is_caller_admin()                               -> bool
    create_checkout_session(items, success_url,
                            cancel_url)             -> '{"id": ..., "url": ...}'
    donate_to_artist(artist_id, amount,
                     success_url, cancel_url)       -> '{"id": ..., "url": ...}'
    get_stripe_session_status(session_id)           -> {"completed": {...}}
                                                       | {"failed": {...}}
    set_stripe_configuration(config)                -> void

Transport and application failures surface as `CommerceApiError` so the
services never depend on postgrest / httpx exception types.
"""
import logging
import threading
import time
from typing import Any, Callable, Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from artistconnect.schemas.checkout import CheckoutLineItem, StripeConfigurationUpdate

logger = logging.getLogger(__name__)


class CommerceApiError(Exception):
    """A Remote Commerce API call failed (network or backend error)."""

    def __init__(self, rpc: str, message: str | None):
        super().__init__(message or f"{rpc} failed")
        self.rpc = rpc
        self.message = message


class ConfiguredFlagCache:
    """
    Short-lived cache for the platform-wide "payment provider configured" flag.

    Every cart page asks for it, and it only changes when an admin saves the
    payment settings, which calls `invalidate()`.
    """

    def __init__(self, ttl_seconds: float = 60.0):
        self.ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._value: bool | None = None
        self._expires_at = 0.0

    def get(self, loader: Callable[[], bool]) -> bool:
        with self._lock:
            if self._value is not None and time.monotonic() < self._expires_at:
                return self._value
        value = loader()
        with self._lock:
            self._value = value
            self._expires_at = time.monotonic() + self.ttl_seconds
        return value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._expires_at = 0.0


stripe_configured_cache = ConfiguredFlagCache()


class CommerceClient:
    """
    Thin wrapper over the Supabase RPC endpoints used by checkout.

    Build one per request with the caller's Supabase client (see
    `artistconnect.core.supabase_client.supabase_for_token`).
    """

    def __init__(
        self,
        client: Client,
        configured_cache: ConfiguredFlagCache = stripe_configured_cache,
    ):
        self.client = client
        self.configured_cache = configured_cache

    def _rpc(self, fn: str, params: dict[str, Any] | None = None) -> Any:
        try:
            return self.client.rpc(fn, params or {}).execute().data
        except APIError as e:
            logger.error("Commerce RPC %s rejected: %s", fn, e.message)
            raise CommerceApiError(fn, e.message) from e
        except httpx.HTTPError as e:
            logger.error("Commerce RPC %s transport error: %s", fn, e)
            raise CommerceApiError(fn, None) from e

    # ---- queries ----

    def is_stripe_configured(self) -> bool:
        return self.configured_cache.get(
            lambda: bool(self._rpc("is_stripe_configured"))
        )

    def is_caller_admin(self) -> bool:
        return bool(self._rpc("is_caller_admin"))

    def get_stripe_session_status(self, session_id: str) -> Any:
        return self._rpc("get_stripe_session_status", {"session_id": session_id})

    # ---- commands ----

    def create_checkout_session(
        self,
        items: Sequence[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
    ) -> Any:
        return self._rpc(
            "create_checkout_session",
            {
                "items": [it.model_dump(by_alias=True) for it in items],
                "success_url": success_url,
                "cancel_url": cancel_url,
            },
        )

    def donate_to_artist(
        self,
        artist_id: str,
        amount_in_cents: int,
        success_url: str,
        cancel_url: str,
    ) -> Any:
        return self._rpc(
            "donate_to_artist",
            {
                "artist_id": artist_id,
                "amount": amount_in_cents,
                "success_url": success_url,
                "cancel_url": cancel_url,
            },
        )

    def set_stripe_configuration(self, config: StripeConfigurationUpdate) -> None:
        self._rpc("set_stripe_configuration", {"config": config.model_dump(by_alias=True)})
        self.configured_cache.invalidate()
