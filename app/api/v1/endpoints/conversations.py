# app/api/v1/endpoints/conversations.py
"""
Routes API pour les conversations candidat / propriétaire
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List
import logging

from app.api.deps import get_current_actor, get_inbox
from app.api.errors import booking_http_error
from app.core.errors import BookingError
from app.models import Actor, ConversationList, InboxFilter, Message, MessageAdd, MessageView
from app.services import InboxService

router = APIRouter()
logger = logging.getLogger(__name__)


def _list(inbox: InboxService, actor: Actor, as_landlord: bool, bucket: InboxFilter, skip: int, limit: int):
    try:
        return inbox.list_conversations(actor, as_landlord=as_landlord, bucket=bucket, skip=skip, limit=limit)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur récupération conversations de {actor.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la récupération des conversations"
        )


@router.get("/as-applicant", response_model=List[ConversationList])
def list_conversations_as_applicant(
    bucket: InboxFilter = Query(InboxFilter.all, description="all, requests, upcoming, archived, inquiries"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    inbox: InboxService = Depends(get_inbox)
):
    """
    Conversations ouvertes par l'utilisateur (côté candidat)

    Onglets:
    - **requests**: demandes en attente
    - **upcoming**: demandes approuvées ou confirmées
    - **archived**: demandes refusées ou annulées
    - **inquiries**: simples prises de contact
    """
    return _list(inbox, actor, False, bucket, skip, limit)


@router.get("/as-landlord", response_model=List[ConversationList])
def list_conversations_as_landlord(
    bucket: InboxFilter = Query(InboxFilter.all),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    inbox: InboxService = Depends(get_inbox)
):
    """Conversations reçues sur les chambres de l'utilisateur (côté propriétaire)"""
    return _list(inbox, actor, True, bucket, skip, limit)


@router.get("/{conversation_id}/messages", response_model=List[MessageView])
def get_messages(
    conversation_id: str,
    actor: Actor = Depends(get_current_actor),
    inbox: InboxService = Depends(get_inbox)
):
    """
    Messages d'une conversation

    Les cartes de réservation portent le statut courant de la demande et
    les actions disponibles pour l'utilisateur (approve/reject pour le
    propriétaire tant que la demande est en attente).
    """
    try:
        return inbox.get_messages(actor, conversation_id)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur récupération messages {conversation_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la récupération des messages"
        )


@router.post("/{conversation_id}/messages", response_model=Message, status_code=status.HTTP_201_CREATED)
def post_message(
    conversation_id: str,
    message_data: MessageAdd,
    actor: Actor = Depends(get_current_actor),
    inbox: InboxService = Depends(get_inbox)
):
    """Envoyer un message texte"""
    try:
        return inbox.post_message(actor, conversation_id, message_data.text)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur envoi message {conversation_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de l'envoi du message"
        )


@router.patch("/{conversation_id}/read")
def mark_conversation_read(
    conversation_id: str,
    actor: Actor = Depends(get_current_actor),
    inbox: InboxService = Depends(get_inbox)
):
    """Marquer comme lus les messages reçus"""
    try:
        marked = inbox.mark_read(actor, conversation_id)
        return {"message": "Messages marked as read", "marked": marked}

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur lecture conversation {conversation_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors du marquage des messages"
        )
