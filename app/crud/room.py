"""
Lecture des annonces (Rooms)
Les annonces appartiennent au service de catalogue : ce module ne fait que les lire.
"""
from typing import Optional
from supabase import Client
from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.models.room import Room
import logging

logger = logging.getLogger(__name__)


class RoomCRUD:
    def __init__(self, db: Client):
        self.db = db
        self.table = settings.ROOMS_TABLE

    def get_by_id(self, room_id: str) -> Optional[Room]:
        """Récupérer une annonce par ID"""
        try:
            result = self.db.table(self.table)\
                .select("*")\
                .eq("id", room_id)\
                .execute()
        except Exception as e:
            logger.error(f"✗ Erreur récupération chambre {room_id}: {e}")
            raise StoreUnavailable() from e

        if result.data and len(result.data) > 0:
            return Room(**result.data[0])
        return None


def get_room_crud(db: Client) -> RoomCRUD:
    """Factory function pour créer une instance RoomCRUD"""
    return RoomCRUD(db)
