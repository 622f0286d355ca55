# app/models/__init__.py
"""
Modèles Pydantic du service de réservation

Modules:
- Room : Annonces et préférences locataires (lecture seule)
- Application : Demandes de location et leur cycle de vie
- Conversation : Fils de discussion et cartes de réservation
- User : Identité de l'acteur
"""

# ====================================
# ROOM MODELS
# ====================================
from .room import (
    FamilyStatus,
    AllowedGender,
    TenantPreferences,
    Room
)

# ====================================
# APPLICATION MODELS
# ====================================
from .application import (
    ApplicationKind,
    ApplicationStatus,
    ApplicationAction,
    ProfileType,
    Occupants,
    OccupantComposition,
    ApplicationDraft,
    ApplicationCreate,
    InquiryCreate,
    ApplicationUpdate,
    Application,
    ApplicationList,
    ApplicationCreated,
    InquiryCreated,
    EligibilityResult,
    ApplicationStatistics
)

# ====================================
# CONVERSATION MODELS
# ====================================
from .conversation import (
    ConversationType,
    MessageType,
    InboxFilter,
    BookingCard,
    BookingCardView,
    MessageAdd,
    Message,
    MessageView,
    Conversation,
    ConversationList
)

# ====================================
# USER MODELS
# ====================================
from .user import (
    UserRole,
    Actor
)

# ====================================
# EXPORTS
# ====================================
__all__ = [
    # Room
    "FamilyStatus",
    "AllowedGender",
    "TenantPreferences",
    "Room",

    # Application
    "ApplicationKind",
    "ApplicationStatus",
    "ApplicationAction",
    "ProfileType",
    "Occupants",
    "OccupantComposition",
    "ApplicationDraft",
    "ApplicationCreate",
    "InquiryCreate",
    "ApplicationUpdate",
    "Application",
    "ApplicationList",
    "ApplicationCreated",
    "InquiryCreated",
    "EligibilityResult",
    "ApplicationStatistics",

    # Conversation
    "ConversationType",
    "MessageType",
    "InboxFilter",
    "BookingCard",
    "BookingCardView",
    "MessageAdd",
    "Message",
    "MessageView",
    "Conversation",
    "ConversationList",

    # User
    "UserRole",
    "Actor",
]
