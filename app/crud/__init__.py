# app/crud/__init__.py
"""
Couche CRUD du service de réservation

Modules CRUD:
- Room: Lecture des annonces
- Application: Demandes de location (écritures de statut conditionnelles)
- Conversation: Conversations, messages et cartes de réservation
"""

from .room import RoomCRUD, get_room_crud
from .application import ApplicationCRUD, get_application_crud
from .conversation import ConversationCRUD, get_conversation_crud

__all__ = [
    # Room CRUD
    "RoomCRUD",
    "get_room_crud",

    # Application CRUD
    "ApplicationCRUD",
    "get_application_crud",

    # Conversation CRUD
    "ConversationCRUD",
    "get_conversation_crud",
]
