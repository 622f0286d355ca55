"""
Routes API pour les annonces (lecture seule)
"""
from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client
import logging

from app.api.errors import booking_http_error
from app.core.errors import StoreUnavailable
from app.crud import get_room_crud
from app.db import get_supabase
from app.models import Room

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{room_id}", response_model=Room)
def get_room(
    room_id: str,
    db: Client = Depends(get_supabase)
):
    """Récupérer une annonce et ses préférences locataires"""
    try:
        crud = get_room_crud(db)
        room = crud.get_by_id(room_id)

        if not room:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Annonce {room_id} non trouvée"
            )

        return room

    except HTTPException:
        raise
    except StoreUnavailable as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur lors de la récupération de l'annonce {room_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la récupération de l'annonce"
        )
