"""
Domain and wire models.

Contacts and reviews travel as camelCase JSON, products as snake_case (the
catalogue admin was built against the table columns). Optional fields are
dropped from output rather than sent as null.

Request bodies are checked with validate_payload(), which never raises: the
caller gets either the parsed model or a list of field-level violations.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, NamedTuple, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


class ContactStatus(str, Enum):
    new = "new"
    in_progress = "in_progress"
    closed = "closed"
    replied = "replied"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def dump(model: BaseModel) -> dict:
    """Serialize a model for the wire: aliases applied, absent fields omitted."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


# ----------------------- Contacts -----------------------
class ContactRequest(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: Optional[str] = None
    company: Optional[str] = None
    product: Optional[str] = None
    quantity: Optional[Union[int, float, str]] = None
    message: str = Field(..., min_length=10)


class ContactReply(CamelModel):
    message: str
    replied_at: str


class ContactRecord(CamelModel):
    id: str
    created_at: str
    updated_at: str
    status: ContactStatus = ContactStatus.new
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    product: Optional[str] = None
    quantity: Optional[Union[int, float, str]] = None
    message: str
    reply: Optional[ContactReply] = None
    notes: Optional[str] = None


class ContactPatch(BaseModel):
    status: Optional[ContactStatus] = None
    reply: Optional[ContactReply] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def reply_marks_replied(self):
        if self.reply is not None:
            self.status = ContactStatus.replied
        return self


class ReplyRequest(BaseModel):
    message: str = Field(..., min_length=1)


class StatusRequest(BaseModel):
    status: ContactStatus
    notes: Optional[str] = None


class NotifyRequest(BaseModel):
    channel: Literal["email", "sms", "whatsapp"]
    message: str = Field(..., min_length=1)


# ----------------------- Products -----------------------
class ProductCreate(BaseModel):
    title: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    material: str = Field(..., min_length=1)
    fits: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    in_stock: bool = True


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    size: Optional[str] = Field(None, min_length=1)
    material: Optional[str] = Field(None, min_length=1)
    fits: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    in_stock: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class Product(BaseModel):
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


# ----------------------- Reviews -----------------------
class ReviewRequest(CamelModel):
    product_rating: int = Field(..., ge=1, le=5)
    delivery_rating: int = Field(..., ge=1, le=5)
    response_rating: int = Field(..., ge=1, le=5)
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    comment: Optional[str] = None

    @property
    def has_contact_channel(self) -> bool:
        return bool(self.email or self.phone)


class Review(CamelModel):
    id: str
    created_at: str
    product_rating: int
    delivery_rating: int
    response_rating: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    comment: Optional[str] = None


class ReviewStats(CamelModel):
    total_reviews: int = 0
    average_product_rating: float = 0
    average_delivery_rating: float = 0
    average_response_rating: float = 0
    overall_rating: float = 0
    rating_distribution: Dict[int, int] = Field(
        default_factory=lambda: {star: 0 for star in range(1, 6)}
    )


# ----------------------- Validation -----------------------
class ValidationResult(NamedTuple):
    value: Optional[BaseModel]
    errors: Optional[List[Dict[str, str]]]

    @property
    def ok(self) -> bool:
        return self.errors is None


def format_errors(raw_errors) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into [{field, message}] pairs."""
    formatted = []
    for err in raw_errors:
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        formatted.append({"field": field, "message": err.get("msg", "Invalid value")})
    return formatted


def validate_payload(model: Type[BaseModel], data: Any) -> ValidationResult:
    if not isinstance(data, dict):
        return ValidationResult(None, [{"field": "body", "message": "Expected a JSON object"}])
    try:
        return ValidationResult(model.model_validate(data), None)
    except PydanticValidationError as exc:
        return ValidationResult(None, format_errors(exc.errors()))
