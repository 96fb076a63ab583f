"""
Database Schemas for the Oil Seals API

Each Pydantic model corresponds to one Postgres table in the hosted Supabase
project (see sql/schema.sql). Table name is the lowercase plural of the class
name without the "Row" suffix. Nullable columns are Optional and default to
None.
"""
from typing import Optional, Union, Literal
from pydantic import BaseModel, Field

ContactStatusValue = Literal["new", "in_progress", "closed", "replied"]


class ContactRow(BaseModel):
    id: str
    created_at: str
    updated_at: str
    status: ContactStatusValue = "new"
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    product: Optional[str] = None
    quantity: Optional[Union[int, float, str]] = None
    message: str
    reply_message: Optional[str] = None
    reply_at: Optional[str] = None
    notes: Optional[str] = None


class ProductRow(BaseModel):
    id: str
    title: str
    size: str
    material: str
    fits: str
    sku: str
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    in_stock: bool = True
    created_at: str
    updated_at: str


class ReviewRow(BaseModel):
    id: str
    created_at: str
    product_rating: int = Field(..., ge=1, le=5)
    delivery_rating: int = Field(..., ge=1, le=5)
    response_rating: int = Field(..., ge=1, le=5)
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    comment: Optional[str] = None
