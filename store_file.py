"""
File-backed contact store.

Used when Supabase is not configured or fails. The whole document is read and
rewritten on every mutation; there is no locking, so it is only suitable for
the low write volume of the contact form.
"""
import json
import os
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from errors import StoreError
from logger import get_logger
from models import ContactPatch, ContactRecord, ContactRequest, ContactStatus, dump

_logger = get_logger(__name__)


class ContactFile(BaseModel):
    """On-disk document: {"items": [...]}, newest first."""

    items: List[ContactRecord] = []


class FileContactStore:
    def __init__(self, path: str):
        self.path = path

    def _ensure(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.path):
            self._write(ContactFile())
            _logger.info(f"Created contacts file at {self.path}")

    def _read(self) -> ContactFile:
        self._ensure()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return ContactFile.model_validate(json.load(f))
        except (OSError, ValueError, PydanticValidationError) as e:
            _logger.error(f"Failed to read contacts file {self.path}: {e}")
            raise StoreError("Failed to read contacts file") from e

    def _write(self, data: ContactFile) -> None:
        payload: Dict[str, list] = {"items": [dump(item) for item in data.items]}
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
        except OSError as e:
            _logger.error(f"Failed to write contacts file {self.path}: {e}")
            raise StoreError("Failed to write contacts file") from e

    def add(self, payload: ContactRequest) -> ContactRecord:
        now = datetime.now(timezone.utc).isoformat()
        record = ContactRecord(
            id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now,
            status=ContactStatus.new,
            **payload.model_dump(),
        )
        data = self._read()
        data.items.insert(0, record)
        self._write(data)
        return record

    def list(
        self,
        status: Optional[ContactStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ContactRecord]:
        items = self._read().items
        if status:
            items = [i for i in items if i.status == status]
        start = offset or 0
        end = start + limit if limit else None
        return items[start:end]

    def get(self, contact_id: str) -> Optional[ContactRecord]:
        return next((i for i in self._read().items if i.id == contact_id), None)

    def update(self, contact_id: str, patch: ContactPatch) -> Optional[ContactRecord]:
        data = self._read()
        for idx, item in enumerate(data.items):
            if item.id == contact_id:
                changes = patch.model_dump(exclude_none=True)
                changes["updated_at"] = datetime.now(timezone.utc).isoformat()
                updated = ContactRecord.model_validate({**item.model_dump(), **changes})
                data.items[idx] = updated
                self._write(data)
                return updated
        return None
