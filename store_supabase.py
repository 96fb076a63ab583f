"""
Supabase-backed stores for contacts, products and reviews.

Each method issues one PostgREST call (product create/update add a SKU lookup
first) and maps the returned rows through mappers.py. Transport, API and
row-mapping failures surface as StoreError; absence is returned as None.
"""
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError

import mappers
from errors import ConflictError, NotFoundError, StoreError
from logger import get_logger
from models import (
    ContactPatch,
    ContactRecord,
    ContactRequest,
    ContactStatus,
    Product,
    ProductCreate,
    ProductUpdate,
    Review,
    ReviewRequest,
    ReviewStats,
)

_logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
UNIQUE_VIOLATION = "23505"
# PostgREST filter syntax characters that cannot appear inside an or() term
_FILTER_UNSAFE = re.compile(r"[,()\"\\]")
# ilike wildcards; searched for literally
_LIKE_WILDCARD = re.compile(r"([%_])")


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_uuid(value: str) -> bool:
    """Primary keys are uuid columns; anything else cannot match a row."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _execute(query, action: str):
    try:
        return query.execute()
    except APIError as e:
        _logger.error(f"Supabase {action} failed: {e.message} (code={e.code})")
        raise StoreError(f"Failed to {action}") from e
    except httpx.HTTPError as e:
        _logger.error(f"Supabase {action} failed: {e}")
        raise StoreError(f"Failed to {action}") from e


def _map_rows(rows, mapper: Callable[[Dict[str, Any]], Any], action: str) -> list:
    try:
        return [mapper(r) for r in rows or []]
    except (PydanticValidationError, KeyError, TypeError) as e:
        _logger.error(f"Supabase {action} returned an unreadable row: {e}")
        raise StoreError(f"Failed to {action}") from e


def _map_created(res, mapper: Callable[[Dict[str, Any]], Any], action: str):
    if not res.data:
        _logger.error(f"Supabase {action} returned no row")
        raise StoreError(f"Failed to {action}")
    return _map_rows(res.data[:1], mapper, action)[0]


def _paginate(query, limit: Optional[int], offset: Optional[int]):
    if limit:
        query = query.limit(limit)
    if offset:
        query = query.range(offset, offset + (limit or DEFAULT_PAGE_SIZE) - 1)
    return query


class _SupabaseTable:
    table = ""

    def __init__(self, db):
        self.db = db

    def _query(self):
        return self.db.table(self.table)

    def _first(self, query, action: str, mapper: Callable[[Dict[str, Any]], Any]):
        res = _execute(query.limit(1), action)
        rows = _map_rows(res.data[:1], mapper, action) if res.data else []
        return rows[0] if rows else None


# ----------------------- Contacts -----------------------
class SupabaseContactStore(_SupabaseTable):
    table = "contacts"

    def add(self, payload: ContactRequest) -> ContactRecord:
        row = mappers.contact_insert_row(payload, utcnow())
        res = _execute(self._query().insert(row), "insert contact")
        return _map_created(res, mappers.contact_from_row, "insert contact")

    def list(
        self,
        status: Optional[ContactStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ContactRecord]:
        q = self._query().select("*").order("created_at", desc=True)
        if status:
            q = q.eq("status", status.value)
        res = _execute(_paginate(q, limit, offset), "list contacts")
        return _map_rows(res.data, mappers.contact_from_row, "list contacts")

    def get(self, contact_id: str) -> Optional[ContactRecord]:
        if not is_uuid(contact_id):
            return None
        q = self._query().select("*").eq("id", contact_id)
        return self._first(q, "load contact", mappers.contact_from_row)

    def update(self, contact_id: str, patch: ContactPatch) -> Optional[ContactRecord]:
        if not is_uuid(contact_id):
            return None
        update = mappers.contact_patch_row(patch, utcnow())
        res = _execute(self._query().update(update).eq("id", contact_id), "update contact")
        rows = _map_rows(res.data[:1], mappers.contact_from_row, "update contact") if res.data else []
        return rows[0] if rows else None


# ----------------------- Products -----------------------
class SupabaseProductStore(_SupabaseTable):
    table = "products"

    def _list(self, q, action: str) -> List[Product]:
        res = _execute(q.order("created_at", desc=True), action)
        return _map_rows(res.data, mappers.product_from_row, action)

    def list(self) -> List[Product]:
        return self._list(self._query().select("*"), "fetch products")

    def search(self, term: str) -> List[Product]:
        term = _FILTER_UNSAFE.sub(" ", term).strip()
        if not term:
            return self.list()
        pattern = "%" + _LIKE_WILDCARD.sub(r"\\\1", term) + "%"
        expr = ",".join(
            f"{column}.ilike.{pattern}" for column in ("title", "sku", "fits", "category")
        )
        return self._list(self._query().select("*").or_(expr), "search products")

    def by_category(self, category: str) -> List[Product]:
        return self._list(self._query().select("*").eq("category", category), "fetch products")

    def get(self, product_id: str) -> Optional[Product]:
        if not is_uuid(product_id):
            return None
        q = self._query().select("*").eq("id", product_id)
        return self._first(q, "fetch product", mappers.product_from_row)

    def get_by_sku(self, sku: str) -> Optional[Product]:
        q = self._query().select("*").eq("sku", sku)
        return self._first(q, "fetch product", mappers.product_from_row)

    def _sku_taken(self, sku: str) -> ConflictError:
        return ConflictError(f"Product with SKU {sku} already exists")

    def create(self, payload: ProductCreate) -> Product:
        # Check-then-insert is not atomic; the unique index on sku catches the race.
        if self.get_by_sku(payload.sku):
            raise self._sku_taken(payload.sku)
        row = mappers.product_insert_row(payload, utcnow())
        try:
            res = self._query().insert(row).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise self._sku_taken(payload.sku) from e
            _logger.error(f"Supabase create product failed: {e.message} (code={e.code})")
            raise StoreError("Failed to create product") from e
        except httpx.HTTPError as e:
            _logger.error(f"Supabase create product failed: {e}")
            raise StoreError("Failed to create product") from e
        return _map_created(res, mappers.product_from_row, "create product")

    def update(self, product_id: str, payload: ProductUpdate) -> Product:
        existing = self.get(product_id)
        if existing is None:
            raise NotFoundError("Product not found")
        if payload.sku and payload.sku != existing.sku and self.get_by_sku(payload.sku):
            raise self._sku_taken(payload.sku)

        update = mappers.product_patch_row(payload, utcnow())
        try:
            res = self._query().update(update).eq("id", product_id).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise self._sku_taken(payload.sku) from e
            _logger.error(f"Supabase update product failed: {e.message} (code={e.code})")
            raise StoreError("Failed to update product") from e
        except httpx.HTTPError as e:
            _logger.error(f"Supabase update product failed: {e}")
            raise StoreError("Failed to update product") from e
        if not res.data:
            raise NotFoundError("Product not found")
        return _map_rows(res.data[:1], mappers.product_from_row, "update product")[0]

    def delete(self, product_id: str) -> None:
        if not is_uuid(product_id):
            raise NotFoundError("Product not found")
        res = _execute(self._query().delete().eq("id", product_id), "delete product")
        if not res.data:
            raise NotFoundError("Product not found")


# ----------------------- Reviews -----------------------
class SupabaseReviewStore(_SupabaseTable):
    table = "reviews"

    def add(self, payload: ReviewRequest) -> Review:
        row = mappers.review_insert_row(payload, utcnow())
        res = _execute(self._query().insert(row), "insert review")
        return _map_created(res, mappers.review_from_row, "insert review")

    def list(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[Review]:
        q = self._query().select("*").order("created_at", desc=True)
        res = _execute(_paginate(q, limit, offset), "list reviews")
        return _map_rows(res.data, mappers.review_from_row, "list reviews")

    def stats(self) -> ReviewStats:
        res = _execute(self._query().select("*"), "load review stats")
        return compute_review_stats(_map_rows(res.data, mappers.review_from_row, "load review stats"))


def compute_review_stats(reviews: List[Review]) -> ReviewStats:
    """Aggregate ratings; recomputed from scratch on every call."""
    if not reviews:
        return ReviewStats()

    total = len(reviews)
    avg_product = sum(r.product_rating for r in reviews) / total
    avg_delivery = sum(r.delivery_rating for r in reviews) / total
    avg_response = sum(r.response_rating for r in reviews) / total
    overall = (avg_product + avg_delivery + avg_response) / 3

    distribution = {star: 0 for star in range(1, 6)}
    for r in reviews:
        # a sum of three integers over 3 never lands on .5, so round() is exact
        star = round((r.product_rating + r.delivery_rating + r.response_rating) / 3)
        distribution[star] += 1

    return ReviewStats(
        total_reviews=total,
        average_product_rating=round(avg_product, 2),
        average_delivery_rating=round(avg_delivery, 2),
        average_response_rating=round(avg_response, 2),
        overall_rating=round(overall, 2),
        rating_distribution=distribution,
    )
