# app/models/conversation.py
"""
Modèles Pydantic pour les conversations entre candidat et propriétaire
Une conversation est rattachée à un triplet (chambre, candidat, propriétaire)
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from enum import Enum

from .application import ApplicationAction, ApplicationStatus, Occupants, ProfileType


class ConversationType(str, Enum):
    """Origine de la conversation"""
    booking = "booking"    # Ouverte par une demande de réservation
    inquiry = "inquiry"    # Ouverte par une prise de contact


class MessageType(str, Enum):
    """Type de message"""
    text = "text"                          # Message texte
    booking_request = "booking_request"    # Carte de réservation


class InboxFilter(str, Enum):
    """Onglets de la boîte de réception"""
    all = "all"
    requests = "requests"      # Demandes en attente
    upcoming = "upcoming"      # Approuvées ou confirmées
    archived = "archived"      # Refusées ou annulées
    inquiries = "inquiries"    # Simples prises de contact


class BookingCard(BaseModel):
    """Résumé d'une demande affiché dans le chat ; le statut reflète celui de la demande"""
    application_id: str
    room_title: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.pending
    full_name: Optional[str] = None
    mobile_number: Optional[str] = None
    profile_type: Optional[ProfileType] = None
    message: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    occupants: Optional[Occupants] = None


class MessageAdd(BaseModel):
    """Modèle pour ajouter un message texte à une conversation"""
    text: str = Field(..., min_length=1, max_length=5000)


class Message(BaseModel):
    """Message complet avec métadonnées"""
    id: str
    conversation_id: str
    sender_id: str
    message_type: MessageType = MessageType.text
    text: Optional[str] = None
    application_id: Optional[str] = None
    booking_request: Optional[BookingCard] = None
    read_by: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Conversation(BaseModel):
    """Modèle complet d'une conversation"""
    id: str
    room_id: str
    applicant_id: str
    landlord_id: str
    conversation_type: ConversationType
    last_message_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def has_member(self, user_id: str) -> bool:
        return user_id in (self.applicant_id, self.landlord_id)


class ConversationList(Conversation):
    """Conversation pour la boîte de réception, avec le statut de la demande liée"""
    application_id: Optional[str] = None
    application_status: Optional[ApplicationStatus] = None


class BookingCardView(BookingCard):
    """Carte telle que vue par un membre : durée, composition et actions disponibles"""
    duration: str = ""
    composition: str = ""
    actions: List[ApplicationAction] = Field(default_factory=list)


class MessageView(Message):
    """Message renvoyé au client ; la carte porte le statut courant de la demande"""
    booking_request: Optional[BookingCardView] = None
