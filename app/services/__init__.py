"""
Services métier

- eligibility : validation pure des brouillons de demande
- lifecycle : machine à états des demandes de réservation
- booking_card : rendu de la carte de réservation du chat
- inbox : conversations et messages
"""

from .eligibility import validate_eligibility, validate_submission
from .lifecycle import ApplicationLifecycle, TransitionEvent, get_application_lifecycle
from .inbox import InboxService, get_inbox_service, inbox_bucket

__all__ = [
    "validate_eligibility",
    "validate_submission",
    "ApplicationLifecycle",
    "TransitionEvent",
    "get_application_lifecycle",
    "InboxService",
    "get_inbox_service",
    "inbox_bucket",
]
