"""
SNAKE Storefront - Main FastAPI Application

Single entry point for all API routes (Vercel serverless function).
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.errors import ERROR_INTERNAL
from core.logging import get_logger
from core.routers import admin_router, cart_router, products_router, user_router
from core.services.catalog import get_catalog_service

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    yield
    logger.info("Shutting down, closing Printify client")
    await get_catalog_service().close()


app = FastAPI(
    title="SNAKE Storefront",
    description="Print-on-demand storefront API",
    version="1.0.0",
    lifespan=lifespan,
)

# Static frontend is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Device-Id"],
)

app.include_router(products_router)
app.include_router(cart_router)
app.include_router(user_router)
app.include_router(admin_router, prefix="/api/admin")


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    """Unhandled failures answer 500 {"error": message}"""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc) or ERROR_INTERNAL})


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "snake-storefront"}
