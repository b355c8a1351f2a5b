# artistconnect/repositories/client_storage_repo.py
import json
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session

from artistconnect.models.client_storage import ClientStorageEntry


class ClientStorageRepository:
    """
    Key-value access to a client profile's storage namespace.

    Values are JSON documents. Every write commits immediately so the next
    read (in this or any later request) observes it. Concurrent writers for
    the same key are last-writer-wins.
    """

    def get_raw(
        self, session: Session, profile_id: uuid.UUID, key: str
    ) -> str | None:
        entry = session.get(ClientStorageEntry, (profile_id, key))
        return entry.value if entry else None

    def get_json(self, session: Session, profile_id: uuid.UUID, key: str) -> Any:
        raw = self.get_raw(session, profile_id, key)
        if raw is None:
            return None
        return json.loads(raw)

    def set_json(
        self, session: Session, profile_id: uuid.UUID, key: str, value: Any
    ) -> None:
        raw = json.dumps(value)
        entry = session.get(ClientStorageEntry, (profile_id, key))
        if entry is None:
            entry = ClientStorageEntry(profile_id=profile_id, storage_key=key, value=raw)
        else:
            entry.value = raw
            entry.updated_at = datetime.now(timezone.utc)
        session.add(entry)
        session.commit()

    def remove(self, session: Session, profile_id: uuid.UUID, key: str) -> None:
        entry = session.get(ClientStorageEntry, (profile_id, key))
        if entry is None:
            return
        session.delete(entry)
        session.commit()
