from fastapi import APIRouter

from .. import __version__
from ..services.page_cache import page_cache

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/version")
def version():
    return {"app": "invoicing-api", "version": __version__}

@router.get("/api/cache/stats")
def cache_stats():
    return page_cache.stats()
