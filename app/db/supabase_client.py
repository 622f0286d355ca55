"""
Connexion au store Supabase (tables rooms, applications, conversations, messages).

Le client est créé une fois par processus puis injecté dans les endpoints
via Depends(get_supabase). Les tests remplacent cette dépendance par un
client en mémoire.
"""
from supabase import create_client, Client
from functools import lru_cache
import logging

from app.core.config import settings
from app.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Client Supabase partagé par tout le processus"""

    _instance: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._instance is None:
            try:
                logger.info(f"🔌 Connexion au store {settings.SUPABASE_URL}...")
                cls._instance = create_client(
                    supabase_url=settings.SUPABASE_URL,
                    supabase_key=settings.SUPABASE_KEY
                )
                logger.info("✅ Client Supabase prêt")
            except Exception as e:
                logger.error(f"❌ Configuration Supabase invalide: {e}")
                raise StoreUnavailable() from e

        return cls._instance


def check_store(db: Client) -> None:
    """
    Vérifie que le store répond (lecture d'une ligne de la table des annonces)

    Raises:
        StoreUnavailable: Store injoignable ou table absente
    """
    try:
        db.table(settings.ROOMS_TABLE).select("id").limit(1).execute()
    except Exception as e:
        logger.error(f"❌ Store injoignable: {e}")
        raise StoreUnavailable() from e


@lru_cache()
def get_supabase_client() -> Client:
    return SupabaseClient.get_client()


def get_supabase() -> Client:
    """Dépendance FastAPI : Depends(get_supabase)"""
    return get_supabase_client()


__all__ = [
    "SupabaseClient",
    "check_store",
    "get_supabase_client",
    "get_supabase",
]
