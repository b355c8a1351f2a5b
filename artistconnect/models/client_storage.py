# artistconnect/models/client_storage.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class ClientStorageEntry(SQLModel, table=True):
    """
    One persisted value for one client profile.

    A client profile is the storefront's notion of a browser profile
    (identified by the profile cookie). Each profile owns a small
    key-value namespace, the same way a browser origin owns its
    localStorage:

      - (profile_id, "artist-connect-cart") -> persisted cart record
      - (profile_id, "paymentContext")      -> pending payment context

    `value` is raw JSON text; the repositories own the format.
    """

    __tablename__ = "client_storage"

    profile_id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Client profile (browser profile) identifier",
    )

    storage_key: str = Field(
        primary_key=True,
        max_length=100,
        description="Fixed namespace key, e.g. 'artist-connect-cart'",
    )

    value: str = Field(
        description="Serialized JSON value",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
