# artistconnect/repositories/payment_context_repo.py
import logging
import uuid

from pydantic import ValidationError
from sqlmodel import Session

from artistconnect.repositories.client_storage_repo import ClientStorageRepository
from artistconnect.schemas.payment import PaymentContext

logger = logging.getLogger(__name__)


class PaymentContextRepository:
    """
    The pending payment context of a client profile.

    Written before the redirect to the payment provider; read back by the
    terminal pages. A context that cannot be parsed reads as None.
    """

    def __init__(self, storage: ClientStorageRepository, storage_key: str):
        self.storage = storage
        self.storage_key = storage_key

    def get(self, session: Session, profile_id: uuid.UUID) -> PaymentContext | None:
        try:
            raw = self.storage.get_json(session, profile_id, self.storage_key)
            if raw is None:
                return None
            return PaymentContext.model_validate(raw)
        except (ValueError, ValidationError) as e:
            logger.error("Failed to parse payment context: %s", e)
            return None

    def set(
        self, session: Session, profile_id: uuid.UUID, context: PaymentContext
    ) -> None:
        self.storage.set_json(
            session,
            profile_id,
            self.storage_key,
            context.model_dump(by_alias=True, exclude_none=True),
        )

    def remove(self, session: Session, profile_id: uuid.UUID) -> None:
        self.storage.remove(session, profile_id, self.storage_key)
