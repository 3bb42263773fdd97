# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import settings
from database import init_db
from services.errors import ServiceError
from services.locks import UserLockRegistry

# Routers
from routes.auth import router as auth_router
from routes.cart import router as cart_router
from routes.profile import router as profile_router
from routes.orders import router as orders_router
from routes.products import router as products_router
from routes.categories import router as categories_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# Map typed service failures to HTTP; internal details stay in the log
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    app = FastAPI(title="EasyShop API", version="1.0.0")

    # Shared across requests: serializes checkouts of the same user
    app.state.checkout_locks = UserLockRegistry(timeout=settings.CHECKOUT_LOCK_TIMEOUT_SECONDS)

    origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
        origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)

    # Router registration
    app.include_router(auth_router)
    app.include_router(cart_router)
    app.include_router(profile_router)
    app.include_router(orders_router)
    app.include_router(products_router)
    app.include_router(categories_router)

    @app.get("/")
    def read_root():
        return {"message": "EasyShop API is running"}

    return app


# Initialization
init_db()
app = create_app()
