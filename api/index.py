"""
TechMart Storefront - Main FastAPI Application

Exposes the cart engine and access evaluator to the storefront and
back-office frontends.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from techmart import __version__
from techmart.cart import InMemoryCartStorage, RedisCartStorage, configure_cart_registry
from techmart.db import get_supabase, redis_configured, supabase_configured
from techmart.logging import get_logger
from techmart.routers import admin_router, auth_router, cart_router
from techmart.services.catalog import InMemoryCatalog
from techmart.services.repositories import ProductRepository


logger = get_logger(__name__)

CORS_ORIGINS = [o for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",") if o]


async def _build_catalog():
    if supabase_configured():
        return ProductRepository(await get_supabase())
    logger.warning("SUPABASE_URL not set - using empty in-memory catalog")
    return InMemoryCatalog()


def _build_storage():
    if redis_configured():
        return RedisCartStorage()
    logger.warning("UPSTASH_REDIS_REST_URL not set - carts will not survive a restart")
    return InMemoryCartStorage()


@asynccontextmanager
async def lifespan(app: FastAPI):
    catalog = await _build_catalog()
    storage = _build_storage()
    configure_cart_registry(catalog, storage)
    logger.info("Cart registry configured")
    yield


app = FastAPI(title="TechMart Storefront API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cart_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "version": __version__}
