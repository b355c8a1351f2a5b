# artistconnect/core/supabase_client.py
from functools import lru_cache
from supabase import ClientOptions, create_client, Client

from artistconnect.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_public() -> Client:
    """
    Create a Supabase client with the anon/public key.

    Use cases:
      - RPC calls made on behalf of a guest (no access token)
      - platform-wide flags such as "is the payment provider configured"

    Note: This client still respects RLS.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def supabase_for_token(access_token: str) -> Client:
    """
    Create a Supabase client that acts as the signed-in caller.

    The caller's access token is sent as the bearer token, so RPC functions
    see `auth.uid()` and enforce their own role checks (admin-only
    configuration, per-user checkout sessions).

    Not cached: one client per request, never shared between callers.
    """
    return create_client(
        settings.SUPABASE_URL,
        settings.SUPABASE_KEY,
        options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
    )
