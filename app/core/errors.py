"""
Exceptions métier du cycle de vie des demandes de réservation

Chaque exception porte un message destiné à l'utilisateur final.
Les endpoints les convertissent en HTTPException (un seul message par erreur).
"""
from enum import Enum
from typing import Optional


class SubmissionErrorCode(str, Enum):
    """Raisons pour lesquelles une demande ne peut pas être soumise"""
    family_only = "FamilyOnly"
    bachelors_only = "BachelorsOnly"
    composition_mismatch = "CompositionMismatch"
    no_females_allowed = "NoFemalesAllowed"
    no_males_allowed = "NoMalesAllowed"
    missing_field = "MissingField"
    invalid_date_range = "InvalidDateRange"
    own_room = "OwnRoom"


PERMISSION_DENIED_MESSAGE = "You are not allowed to perform this action."
STALE_STATE_MESSAGE = "This request is no longer in a state that allows this action."
RETRY_MESSAGE = "Something went wrong, please try again."


class BookingError(Exception):
    """Classe de base de toutes les erreurs métier"""

    message: str = "An error occurred."

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class SubmissionError(BookingError):
    """Erreur de validation locale : la demande est bloquée avant tout appel au store"""

    def __init__(self, code: SubmissionErrorCode, message: str):
        self.code = code
        super().__init__(message)


class PermissionDenied(BookingError):
    """L'acteur ne possède pas la ressource (ou elle n'existe pas, on ne distingue pas)"""

    message = PERMISSION_DENIED_MESSAGE


class InvalidTransition(BookingError):
    """Transition impossible depuis le statut actuel, ou par cet acteur"""

    message = STALE_STATE_MESSAGE


class NotEditable(BookingError):
    """Modification d'une demande qui n'est plus en attente"""

    message = STALE_STATE_MESSAGE


class StoreUnavailable(BookingError):
    """Échec de transport vers le store (Supabase)"""

    message = RETRY_MESSAGE
