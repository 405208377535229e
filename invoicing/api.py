"""
FastAPI app entry point aggregating per-domain routers under invoicing/routes.
Keep as `uvicorn invoicing.api:app`.
"""
from __future__ import annotations


from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .logs import ensure_log_schema
from .services.config_svc import ensure_config_schema, ensure_default_config, get_config
from .services.invoice_svc import ensure_invoice_schema
from .services.page_cache import page_cache


app = FastAPI(title="invoicing-api", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    ensure_log_schema()
    ensure_config_schema()
    ensure_default_config()
    ensure_invoice_schema()
    page_cache.enabled = get_config()["listing_cache"]


# Include routers (split by business domain)
from .routes import base as base_routes
from .routes import invoices as invoices_routes
from .routes import customers as customers_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(invoices_routes.router)
app.include_router(customers_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
