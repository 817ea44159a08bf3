"""
Storefront - Main FastAPI Application

Single entry point for catalog and cart routes.
Configuration is validated at startup; a bad SHOPIFY_API_URL or token stops
the app instead of failing on the first request.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront import __version__
from storefront.logging import get_logger
from storefront.routers import cart_router, catalog_router
from storefront.routers.deps import get_config, shutdown

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    logger.info("Storefront starting (cart storage: %s)", config.cart_storage)
    yield
    await shutdown()


app = FastAPI(
    title="Storefront",
    description="Headless storefront: catalog browsing, cart and checkout hand-off",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(catalog_router)
app.include_router(cart_router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": __version__}
