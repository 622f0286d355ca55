# app/crud/conversation.py
"""
Opérations CRUD pour les conversations et messages
"""

from typing import Optional, List
from supabase import Client
from datetime import datetime, timezone
import logging

from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.models import (
    Conversation, ConversationType, Message, MessageType,
    BookingCard, ApplicationStatus
)

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConversationCRUD:
    """Classe pour gérer les opérations CRUD sur les conversations"""

    def __init__(self, db: Client):
        self.db = db
        self.conversations_table = settings.CONVERSATIONS_TABLE
        self.messages_table = settings.MESSAGES_TABLE

    def find_or_create(
        self,
        room_id: str,
        applicant_id: str,
        landlord_id: str,
        conversation_type: ConversationType
    ) -> Conversation:
        """
        Retrouver la conversation d'un triplet (chambre, candidat, propriétaire) ou la créer

        Args:
            room_id: UUID de la chambre
            applicant_id: UUID du candidat
            landlord_id: UUID du propriétaire
            conversation_type: Type utilisé si la conversation est créée

        Returns:
            Conversation existante ou nouvelle
        """
        try:
            response = self.db.table(self.conversations_table)\
                .select("*")\
                .eq("room_id", room_id)\
                .eq("applicant_id", applicant_id)\
                .eq("landlord_id", landlord_id)\
                .limit(1)\
                .execute()

            if response.data:
                return Conversation(**response.data[0])

            response = self.db.table(self.conversations_table)\
                .insert({
                    "room_id": room_id,
                    "applicant_id": applicant_id,
                    "landlord_id": landlord_id,
                    "conversation_type": conversation_type.value,
                })\
                .execute()
        except Exception as e:
            logger.error(f"Erreur find-or-create conversation (room {room_id}): {e}")
            raise StoreUnavailable() from e

        if not response.data:
            raise StoreUnavailable()

        logger.info(f"Conversation créée: {response.data[0]['id']}")
        return Conversation(**response.data[0])

    def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        """Récupérer une conversation par ID"""
        try:
            response = self.db.table(self.conversations_table)\
                .select("*")\
                .eq("id", conversation_id)\
                .execute()
        except Exception as e:
            logger.error(f"Erreur récupération conversation {conversation_id}: {e}")
            raise StoreUnavailable() from e

        if response.data:
            return Conversation(**response.data[0])
        return None

    def get_for_user(
        self,
        user_id: str,
        as_landlord: bool = False,
        skip: int = 0,
        limit: Optional[int] = 50
    ) -> List[Conversation]:
        """
        Conversations d'un utilisateur, côté candidat ou côté propriétaire

        Args:
            user_id: UUID de l'utilisateur
            as_landlord: True pour les conversations de ses annonces
            skip: Pagination
            limit: Nombre maximum de conversations (None = toutes)

        Returns:
            Conversations triées par activité récente
        """
        column = "landlord_id" if as_landlord else "applicant_id"
        try:
            query = self.db.table(self.conversations_table)\
                .select("*")\
                .eq(column, user_id)\
                .order("updated_at", desc=True)

            if limit is not None:
                query = query.range(skip, skip + limit - 1)

            response = query.execute()
        except Exception as e:
            logger.error(f"Erreur récupération conversations de {user_id}: {e}")
            raise StoreUnavailable() from e

        return [Conversation(**conv) for conv in response.data]

    # ========================================
    # Gestion des messages
    # ========================================

    def _insert_message(self, data: dict) -> Message:
        try:
            response = self.db.table(self.messages_table)\
                .insert(data)\
                .execute()

            if not response.data:
                raise StoreUnavailable()

            message = Message(**response.data[0])

            self.db.table(self.conversations_table)\
                .update({"last_message_id": message.id, "updated_at": _now_iso()})\
                .eq("id", data["conversation_id"])\
                .execute()
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Erreur ajout message: {e}")
            raise StoreUnavailable() from e

        logger.info(f"Message ajouté à conversation {data['conversation_id']}")
        return message

    def add_message(self, conversation_id: str, sender_id: str, text: str) -> Message:
        """
        Ajouter un message texte à une conversation

        Args:
            conversation_id: UUID de la conversation
            sender_id: UUID de l'expéditeur
            text: Contenu du message

        Returns:
            Message créé
        """
        return self._insert_message({
            "conversation_id": conversation_id,
            "sender_id": sender_id,
            "message_type": MessageType.text.value,
            "text": text,
            "read_by": [sender_id],
        })

    def post_booking_card(self, conversation_id: str, sender_id: str, card: BookingCard) -> Message:
        """
        Publier la carte de réservation d'une demande dans la conversation

        Args:
            conversation_id: UUID de la conversation
            sender_id: UUID du candidat
            card: Instantané de la demande

        Returns:
            Message créé
        """
        return self._insert_message({
            "conversation_id": conversation_id,
            "sender_id": sender_id,
            "message_type": MessageType.booking_request.value,
            "application_id": card.application_id,
            "booking_request": card.model_dump(mode="json"),
            "read_by": [sender_id],
        })

    def update_booking_card_status(
        self,
        conversation_id: str,
        application_id: str,
        status: ApplicationStatus
    ) -> Optional[Message]:
        """
        Aligner le statut de la carte de réservation sur celui de la demande

        Idempotent : rejouer la même mise à jour ne change rien.

        Returns:
            Message mis à jour, ou None si aucune carte n'existe pour la demande
        """
        try:
            response = self.db.table(self.messages_table)\
                .select("*")\
                .eq("conversation_id", conversation_id)\
                .eq("application_id", application_id)\
                .eq("message_type", MessageType.booking_request.value)\
                .limit(1)\
                .execute()

            if not response.data:
                logger.warning(f"Aucune carte pour la demande {application_id}")
                return None

            row = response.data[0]
            card = dict(row.get("booking_request") or {})
            card["status"] = status.value

            response = self.db.table(self.messages_table)\
                .update({"booking_request": card})\
                .eq("id", row["id"])\
                .execute()
        except Exception as e:
            logger.error(f"Erreur mise à jour carte {application_id}: {e}")
            raise StoreUnavailable() from e

        logger.info(f"Carte de la demande {application_id} -> {status.value}")
        return Message(**response.data[0]) if response.data else None

    def update_booking_card(self, conversation_id: str, card: BookingCard) -> Optional[Message]:
        """Remplacer l'instantané de la carte (après modification de la demande)"""
        try:
            response = self.db.table(self.messages_table)\
                .update({"booking_request": card.model_dump(mode="json")})\
                .eq("conversation_id", conversation_id)\
                .eq("application_id", card.application_id)\
                .eq("message_type", MessageType.booking_request.value)\
                .execute()
        except Exception as e:
            logger.error(f"Erreur mise à jour carte {card.application_id}: {e}")
            raise StoreUnavailable() from e

        return Message(**response.data[0]) if response.data else None

    def get_messages(
        self,
        conversation_id: str,
        limit: Optional[int] = None
    ) -> List[Message]:
        """
        Récupérer les messages d'une conversation

        Args:
            conversation_id: UUID de la conversation
            limit: Nombre maximum de messages (None = tous)

        Returns:
            Liste des messages triés par date
        """
        try:
            query = self.db.table(self.messages_table)\
                .select("*")\
                .eq("conversation_id", conversation_id)\
                .order("created_at", desc=False)

            if limit:
                query = query.limit(limit)

            response = query.execute()
        except Exception as e:
            logger.error(f"Erreur récupération messages: {e}")
            raise StoreUnavailable() from e

        return [Message(**msg) for msg in response.data]

    def mark_read(self, conversation_id: str, user_id: str) -> int:
        """
        Marquer comme lus les messages reçus par un membre

        Returns:
            Nombre de messages marqués
        """
        try:
            response = self.db.table(self.messages_table)\
                .select("id, read_by")\
                .eq("conversation_id", conversation_id)\
                .neq("sender_id", user_id)\
                .execute()

            marked = 0
            for row in response.data:
                read_by = row.get("read_by") or []
                if user_id in read_by:
                    continue
                self.db.table(self.messages_table)\
                    .update({"read_by": read_by + [user_id]})\
                    .eq("id", row["id"])\
                    .execute()
                marked += 1
        except Exception as e:
            logger.error(f"Erreur lecture conversation {conversation_id}: {e}")
            raise StoreUnavailable() from e

        logger.info(f"{marked} message(s) marqué(s) lu(s) dans {conversation_id}")
        return marked


def get_conversation_crud(db: Client) -> ConversationCRUD:
    """Factory function pour créer une instance ConversationCRUD"""
    return ConversationCRUD(db)
