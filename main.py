import secrets
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from catalog import seed_products
from config import Settings, get_settings
from database import check_connection, get_database
from errors import AppError, NotFoundError, UnauthorizedError, ValidationError
from facade import ContactService, StoreFacade
from logger import get_logger
from models import (
    ContactRequest,
    ContactStatus,
    NotifyRequest,
    ProductCreate,
    ProductUpdate,
    ReplyRequest,
    ReviewRequest,
    StatusRequest,
    dump,
    format_errors,
    validate_payload,
)
from notify import REPLY_SUBJECT, send_email, send_sms, send_whatsapp
from store_file import FileContactStore
from store_supabase import SupabaseContactStore, SupabaseProductStore, SupabaseReviewStore

_logger = get_logger("api")
START_TIME = time.monotonic()

app = FastAPI(title="SBO Oil Seals API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def response_time(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    response.headers["X-Response-Time"] = f"{elapsed:.0f}ms"
    _logger.debug(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.0f}ms)")
    return response


# ----------------------- Errors -----------------------
@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        _logger.error(f"{request.method} {request.url.path} failed: {exc.__cause__ or exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    err = ValidationError(format_errors(exc.errors()))
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    _logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"ok": False, "error": "Internal server error"})


def validated(model, body: Any, message: Optional[str] = None):
    result = validate_payload(model, body)
    if not result.ok:
        raise ValidationError(result.errors, message)
    return result.value


def mask_email(email: str) -> str:
    """jane@x.com -> j***@x.com, for log lines."""
    local, _, domain = email.partition("@")
    return f"{local[:1]}***@{domain}"


# ----------------------- Dependencies -----------------------
security = HTTPBearer(auto_error=False)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
):
    expected = settings.admin_token
    token = credentials.credentials if credentials else None
    if not expected or not token or not secrets.compare_digest(token.encode(), expected.encode()):
        raise UnauthorizedError()


def get_contacts(db=Depends(get_database), settings: Settings = Depends(get_settings)) -> ContactService:
    primary = SupabaseContactStore(db) if db is not None else None
    return ContactService(StoreFacade("contacts", primary, FileContactStore(settings.contacts_file)))


def get_products(db=Depends(get_database)) -> StoreFacade:
    return StoreFacade("products", SupabaseProductStore(db) if db is not None else None)


def get_reviews(db=Depends(get_database)) -> StoreFacade:
    return StoreFacade("reviews", SupabaseReviewStore(db) if db is not None else None)


# ----------------------- Health -----------------------
@app.get("/")
def root():
    return {"message": "SBO Oil Seals API running"}


@app.get("/api/ping")
def ping(settings: Settings = Depends(get_settings)):
    return {"message": settings.ping_message}


@app.get("/health")
def health(db=Depends(get_database)):
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - START_TIME, 3),
        "database": {
            "configured": db is not None,
            "reachable": check_connection(db),
        },
    }


# ----------------------- Contact form -----------------------
@app.post("/api/contact")
def submit_contact(body: Any = Body(None), contacts: ContactService = Depends(get_contacts)):
    payload = validated(ContactRequest, body, "Invalid contact data provided")
    preview = payload.message[:100] + ("..." if len(payload.message) > 100 else "")
    _logger.info(
        f"New contact request: name={payload.name!r} email={mask_email(payload.email)!r} "
        f"phone={'***' if payload.phone else None} company={payload.company!r} "
        f"product={payload.product!r} quantity={payload.quantity!r} message={preview!r}"
    )
    contacts.add(payload)
    return {"ok": True}


# ----------------------- Admin: contacts -----------------------
@app.get("/api/admin/contacts", dependencies=[Depends(require_admin)])
def list_contacts(
    status: Optional[ContactStatus] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    contacts: ContactService = Depends(get_contacts),
):
    items = contacts.list(status=status, limit=limit, offset=offset)
    return {"items": [dump(i) for i in items]}


@app.get("/api/admin/contacts/{contact_id}", dependencies=[Depends(require_admin)])
def get_contact(contact_id: str, contacts: ContactService = Depends(get_contacts)):
    item = contacts.get(contact_id)
    if item is None:
        raise NotFoundError()
    return {"item": dump(item)}


@app.post("/api/admin/contacts/{contact_id}/reply", dependencies=[Depends(require_admin)])
def reply_contact(contact_id: str, body: Any = Body(None), contacts: ContactService = Depends(get_contacts)):
    payload = validated(ReplyRequest, body)
    if contacts.get(contact_id) is None:
        raise NotFoundError()
    updated = contacts.reply(contact_id, payload.message)
    if updated is None:
        raise NotFoundError()
    return {"ok": True, "item": dump(updated)}


@app.patch("/api/admin/contacts/{contact_id}", dependencies=[Depends(require_admin)])
def update_contact_status(contact_id: str, body: Any = Body(None), contacts: ContactService = Depends(get_contacts)):
    payload = validated(StatusRequest, body)
    updated = contacts.set_status(contact_id, payload.status, payload.notes)
    if updated is None:
        raise NotFoundError()
    return {"ok": True, "item": dump(updated)}


@app.post("/api/admin/contacts/{contact_id}/notify", dependencies=[Depends(require_admin)])
def notify_contact(
    contact_id: str,
    body: Any = Body(None),
    contacts: ContactService = Depends(get_contacts),
    settings: Settings = Depends(get_settings),
):
    payload = validated(NotifyRequest, body)
    item = contacts.get(contact_id)
    if item is None:
        raise NotFoundError()

    if payload.channel == "email":
        if not item.email:
            raise ValidationError([{"field": "channel", "message": "Contact has no email"}], "Contact has no email")
        send_email(settings, item.email, REPLY_SUBJECT, payload.message)
    else:
        if not item.phone:
            raise ValidationError([{"field": "channel", "message": "Contact has no phone"}], "Contact has no phone")
        if payload.channel == "sms":
            send_sms(settings, item.phone, payload.message)
        else:
            send_whatsapp(settings, item.phone, payload.message)
    return {"ok": True}


# ----------------------- Products -----------------------
@app.get("/api/products")
def list_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    products: StoreFacade = Depends(get_products),
):
    if search:
        items = products.call("search", search)
    elif category:
        items = products.call("by_category", category)
    else:
        items = products.call("list")
    return {"products": [dump(p) for p in items], "total": len(items)}


@app.get("/api/products/sku/{sku}")
def get_product_by_sku(sku: str, products: StoreFacade = Depends(get_products)):
    product = products.call("get_by_sku", sku)
    if product is None:
        raise NotFoundError("Product not found")
    return {"product": dump(product)}


@app.get("/api/products/{product_id}")
def get_product(product_id: str, products: StoreFacade = Depends(get_products)):
    product = products.call("get", product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return {"product": dump(product)}


@app.post("/api/products", status_code=201, dependencies=[Depends(require_admin)])
def create_product(body: Any = Body(None), products: StoreFacade = Depends(get_products)):
    payload = validated(ProductCreate, body)
    return {"product": dump(products.call("create", payload))}


@app.put("/api/products/{product_id}", dependencies=[Depends(require_admin)])
def update_product(product_id: str, body: Any = Body(None), products: StoreFacade = Depends(get_products)):
    payload = validated(ProductUpdate, body)
    return {"product": dump(products.call("update", product_id, payload))}


@app.delete("/api/products/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, products: StoreFacade = Depends(get_products)):
    products.call("delete", product_id)
    return Response(status_code=204)


# ----------------------- Reviews -----------------------
@app.get("/api/reviews")
def list_reviews(
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    reviews: StoreFacade = Depends(get_reviews),
):
    return [dump(r) for r in reviews.call("list", limit=limit, offset=offset)]


@app.post("/api/reviews", status_code=201)
def add_review(body: Any = Body(None), reviews: StoreFacade = Depends(get_reviews)):
    payload = validated(ReviewRequest, body)
    if not payload.has_contact_channel:
        raise ValidationError(
            [{"field": "email", "message": "Either email or phone must be provided"}],
            "Either email or phone must be provided",
        )
    return dump(reviews.call("add", payload))


@app.get("/api/reviews/stats")
def review_stats(reviews: StoreFacade = Depends(get_reviews)):
    return dump(reviews.call("stats"))


# ----------------------- Seed Catalogue -----------------------
@app.post("/api/admin/seed", dependencies=[Depends(require_admin)])
def seed(products: StoreFacade = Depends(get_products)):
    created, skipped = 0, 0
    for p in seed_products():
        if products.call("get_by_sku", p["sku"]):
            skipped += 1
            continue
        products.call("create", ProductCreate(**p))
        created += 1
    _logger.info(f"Seeded {created} products ({skipped} already present)")
    return {"seeded": created, "skipped": skipped}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
