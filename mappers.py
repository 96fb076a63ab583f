"""
Row <-> domain mapping.

Rows are the snake_case, nullable shape stored in Postgres; records are the
domain models from models.py, where a missing value is absent rather than
None on the wire. Everything here is pure.
"""
from typing import Any, Dict

from models import (
    ContactPatch,
    ContactRecord,
    ContactReply,
    ContactRequest,
    Product,
    ProductCreate,
    ProductUpdate,
    Review,
    ReviewRequest,
)
from schemas import ContactRow, ProductRow, ReviewRow


# ----------------------- Contacts -----------------------
def contact_from_row(row: Dict[str, Any]) -> ContactRecord:
    r = ContactRow.model_validate(row)
    reply = None
    if r.reply_message and r.reply_at:
        reply = ContactReply(message=r.reply_message, replied_at=r.reply_at)
    return ContactRecord(
        id=r.id,
        created_at=r.created_at,
        updated_at=r.updated_at,
        status=r.status,
        name=r.name,
        email=r.email,
        phone=r.phone,
        company=r.company,
        product=r.product,
        quantity=r.quantity,
        message=r.message,
        reply=reply,
        notes=r.notes,
    )


def contact_to_row(record: ContactRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
        "status": record.status.value,
        "name": record.name,
        "email": record.email,
        "phone": record.phone,
        "company": record.company,
        "product": record.product,
        "quantity": record.quantity,
        "message": record.message,
        "reply_message": record.reply.message if record.reply else None,
        "reply_at": record.reply.replied_at if record.reply else None,
        "notes": record.notes,
    }


def contact_insert_row(payload: ContactRequest, now: str) -> Dict[str, Any]:
    """Columns for a new contact; id is assigned by the database."""
    return {
        "status": "new",
        "name": payload.name,
        "email": payload.email,
        "phone": payload.phone,
        "company": payload.company,
        "product": payload.product,
        "quantity": payload.quantity,
        "message": payload.message,
        "created_at": now,
        "updated_at": now,
    }


def contact_patch_row(patch: ContactPatch, now: str) -> Dict[str, Any]:
    update: Dict[str, Any] = {"updated_at": now}
    if patch.status is not None:
        update["status"] = patch.status.value
    if patch.reply is not None:
        update["reply_message"] = patch.reply.message
        update["reply_at"] = patch.reply.replied_at
    if patch.notes is not None:
        update["notes"] = patch.notes
    return update


# ----------------------- Products -----------------------
def product_from_row(row: Dict[str, Any]) -> Product:
    return Product.model_validate(ProductRow.model_validate(row).model_dump())


def product_to_row(product: Product) -> Dict[str, Any]:
    return ProductRow.model_validate(product.model_dump()).model_dump()


def product_insert_row(payload: ProductCreate, now: str) -> Dict[str, Any]:
    row = payload.model_dump()
    row["created_at"] = now
    row["updated_at"] = now
    return row


def product_patch_row(payload: ProductUpdate, now: str) -> Dict[str, Any]:
    update = payload.changes()
    update["updated_at"] = now
    return update


# ----------------------- Reviews -----------------------
def review_from_row(row: Dict[str, Any]) -> Review:
    r = ReviewRow.model_validate(row)
    return Review(
        id=r.id,
        created_at=r.created_at,
        product_rating=r.product_rating,
        delivery_rating=r.delivery_rating,
        response_rating=r.response_rating,
        name=r.name,
        email=r.email,
        phone=r.phone,
        comment=r.comment,
    )


def review_to_row(review: Review) -> Dict[str, Any]:
    return {
        "id": review.id,
        "created_at": review.created_at,
        "product_rating": review.product_rating,
        "delivery_rating": review.delivery_rating,
        "response_rating": review.response_rating,
        "name": review.name,
        "email": review.email,
        "phone": review.phone,
        "comment": review.comment,
    }


def review_insert_row(payload: ReviewRequest, now: str) -> Dict[str, Any]:
    return {
        "product_rating": payload.product_rating,
        "delivery_rating": payload.delivery_rating,
        "response_rating": payload.response_rating,
        "name": payload.name,
        "email": payload.email,
        "phone": payload.phone,
        "comment": payload.comment,
        "created_at": now,
    }
