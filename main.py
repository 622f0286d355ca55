"""Roomly Bookings - point d'entrée de l'API"""
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from supabase import Client
import logging

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.db import check_store, get_supabase

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Demandes de location, éligibilité des locataires, cycle de vie et conversations",
    version=settings.VERSION,
    debug=settings.DEBUG
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def connect_store():
    try:
        check_store(get_supabase())
        logger.info("✓ Store Supabase joignable")
    except StoreUnavailable:
        # L'API démarre quand même ; /health signale l'état du store
        logger.error("✗ Store Supabase injoignable au démarrage")


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "payment_confirmation_by": settings.PAYMENT_CONFIRMATION_BY
    }


@app.get("/health")
def health_check(db: Client = Depends(get_supabase)):
    try:
        check_store(db)
    except StoreUnavailable:
        return {"status": "degraded", "store": "unreachable"}
    return {"status": "healthy", "store": "ok"}


app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
