"""
Boîte de réception : conversations d'un membre, messages et cartes de réservation.

Les cartes sont renvoyées avec le statut courant de la demande liée,
même si la copie stockée dans le message est en retard.
"""
from typing import Dict, List, Optional
import logging

from supabase import Client

from app.core.errors import PermissionDenied
from app.crud import get_application_crud, get_conversation_crud
from app.models import (
    Actor, Application, ApplicationStatus, Conversation, ConversationList,
    InboxFilter, Message, MessageType, MessageView
)
from app.services.booking_card import render_card

logger = logging.getLogger(__name__)


_BUCKET_STATUSES = {
    InboxFilter.requests: {ApplicationStatus.pending},
    InboxFilter.upcoming: {ApplicationStatus.approved, ApplicationStatus.confirmed},
    InboxFilter.archived: {ApplicationStatus.rejected, ApplicationStatus.cancelled},
}


def inbox_bucket(status: Optional[ApplicationStatus]) -> InboxFilter:
    """Onglet d'une conversation selon le statut de sa demande (inquiries si aucune)"""
    if status is None:
        return InboxFilter.inquiries
    for bucket, statuses in _BUCKET_STATUSES.items():
        if status in statuses:
            return bucket
    return InboxFilter.inquiries


class InboxService:
    """Accès aux conversations réservé à leurs deux membres"""

    def __init__(self, db: Client):
        self.conversations = get_conversation_crud(db)
        self.applications = get_application_crud(db)

    def _get_member_conversation(self, actor: Actor, conversation_id: str) -> Conversation:
        conversation = self.conversations.get_by_id(conversation_id)
        if conversation is None or not conversation.has_member(actor.id):
            raise PermissionDenied()
        return conversation

    def list_conversations(
        self,
        actor: Actor,
        as_landlord: bool = False,
        bucket: InboxFilter = InboxFilter.all,
        skip: int = 0,
        limit: int = 50
    ) -> List[ConversationList]:
        """
        Conversations de l'acteur avec le statut de la dernière demande liée

        Args:
            actor: Utilisateur
            as_landlord: Côté propriétaire (sinon côté candidat)
            bucket: Onglet de la boîte de réception

        Avec un onglet, le filtre s'applique avant la pagination : skip/limit
        portent sur les conversations de l'onglet.
        """
        if bucket == InboxFilter.all:
            conversations = self.conversations.get_for_user(
                actor.id, as_landlord=as_landlord, skip=skip, limit=limit
            )
        else:
            conversations = self.conversations.get_for_user(
                actor.id, as_landlord=as_landlord, limit=None
            )

        # Plus anciennes d'abord : la plus récente écrase les précédentes
        latest: Dict[str, Application] = {
            app.conversation_id: app
            for app in self.applications.get_for_conversations([c.id for c in conversations])
        }

        result = []
        for conversation in conversations:
            application = latest.get(conversation.id)
            item = ConversationList(
                **conversation.model_dump(),
                application_id=application.id if application else None,
                application_status=application.status if application else None,
            )
            if bucket == InboxFilter.all or inbox_bucket(item.application_status) == bucket:
                result.append(item)

        if bucket == InboxFilter.all:
            return result
        return result[skip:skip + limit]

    def get_messages(self, actor: Actor, conversation_id: str) -> List[MessageView]:
        """Messages d'une conversation, cartes rendues pour l'acteur"""
        conversation = self._get_member_conversation(actor, conversation_id)
        messages = self.conversations.get_messages(conversation_id)

        statuses = {
            app.id: app.status
            for app in self.applications.get_for_conversations([conversation_id])
        }

        views = []
        for message in messages:
            data = message.model_dump(exclude={"booking_request"})
            card = None
            if message.message_type == MessageType.booking_request and message.booking_request:
                card = render_card(
                    message.booking_request,
                    viewer_id=actor.id,
                    applicant_id=conversation.applicant_id,
                    landlord_id=conversation.landlord_id,
                    live_status=statuses.get(message.booking_request.application_id),
                )
            views.append(MessageView(**data, booking_request=card))
        return views

    def post_message(self, actor: Actor, conversation_id: str, text: str) -> Message:
        """Envoyer un message texte dans une conversation dont l'acteur est membre"""
        self._get_member_conversation(actor, conversation_id)
        return self.conversations.add_message(conversation_id, actor.id, text)

    def mark_read(self, actor: Actor, conversation_id: str) -> int:
        """Marquer comme lus les messages reçus par l'acteur"""
        self._get_member_conversation(actor, conversation_id)
        return self.conversations.mark_read(conversation_id, actor.id)


def get_inbox_service(db: Client) -> InboxService:
    """Factory function pour créer une instance InboxService"""
    return InboxService(db)
