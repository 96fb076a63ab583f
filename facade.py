"""
Backend selection.

Every entity family has a primary (Supabase) store. Only contacts have a
file fallback: the contact form predates the hosted store and has to keep
taking inquiries while Supabase is unreachable. Products and reviews fail
outright.
"""
from datetime import datetime, timezone
from typing import List, Optional

from errors import StoreError
from logger import get_logger
from models import ContactPatch, ContactRecord, ContactReply, ContactRequest, ContactStatus

_logger = get_logger(__name__)

FALLBACK_POLICY = {
    "contacts": True,
    "products": False,
    "reviews": False,
}


class StoreFacade:
    def __init__(self, family: str, primary=None, fallback=None):
        self.family = family
        self.primary = primary
        self.fallback = fallback if FALLBACK_POLICY.get(family, False) else None

    @property
    def configured(self) -> bool:
        return self.primary is not None or self.fallback is not None

    def call(self, operation: str, *args, **kwargs):
        if self.primary is not None:
            try:
                return getattr(self.primary, operation)(*args, **kwargs)
            except StoreError as e:
                if self.fallback is None:
                    raise
                _logger.error(
                    f"Supabase {self.family}.{operation} failed, falling back to file store: {e.__cause__ or e}"
                )
        if self.fallback is None:
            raise StoreError(f"{self.family.capitalize()} store is not configured")
        return getattr(self.fallback, operation)(*args, **kwargs)


class ContactService:
    """Contact operations routed through the facade."""

    def __init__(self, facade: StoreFacade):
        self.facade = facade

    def add(self, payload: ContactRequest) -> ContactRecord:
        return self.facade.call("add", payload)

    def list(
        self,
        status: Optional[ContactStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ContactRecord]:
        return self.facade.call("list", status=status, limit=limit, offset=offset)

    def get(self, contact_id: str) -> Optional[ContactRecord]:
        return self.facade.call("get", contact_id)

    def update(self, contact_id: str, patch: ContactPatch) -> Optional[ContactRecord]:
        return self.facade.call("update", contact_id, patch)

    def reply(self, contact_id: str, message: str) -> Optional[ContactRecord]:
        reply = ContactReply(message=message, replied_at=datetime.now(timezone.utc).isoformat())
        return self.update(contact_id, ContactPatch(reply=reply))

    def set_status(
        self, contact_id: str, status: ContactStatus, notes: Optional[str] = None
    ) -> Optional[ContactRecord]:
        return self.update(contact_id, ContactPatch(status=status, notes=notes))
