# app/api/__init__.py
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.routers import auth, cart, health, orders, payment, products, shipping_addresses, wishlist
from app.api.routers.admin import analytics, discounts, inventory, users
from app.api.routers.admin import orders as admin_orders
from app.utils.logging import get_logger

logger = get_logger(__name__)

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(products.router)
api_router.include_router(cart.router)
api_router.include_router(wishlist.router)
api_router.include_router(shipping_addresses.router)
api_router.include_router(orders.router)
api_router.include_router(payment.router)
api_router.include_router(inventory.router)
api_router.include_router(admin_orders.router)
api_router.include_router(discounts.router)
api_router.include_router(users.router)
api_router.include_router(analytics.router)


def _first_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    field = ".".join(str(part) for part in error.get("loc", ())[1:])
    return f"{field}: {error.get('msg')}" if field else error.get("msg", "Invalid request")


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": _first_error(exc)})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
