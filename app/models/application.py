# app/models/application.py
"""
Modèles Pydantic pour les demandes de location (applications)
Une application est soit une simple prise de contact (inquiry),
soit une demande de réservation complète (request) soumise au cycle de vie.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, FrozenSet
from datetime import date, datetime
from enum import Enum


# ==========================================
# ENUMS
# ==========================================

class ApplicationKind(str, Enum):
    """Nature de la demande"""
    inquiry = "inquiry"    # Message seul, sans cycle de vie
    request = "request"    # Demande complète (occupants + dates)


class ApplicationStatus(str, Enum):
    """Statut d'une demande de réservation (partagé avec la carte du chat)"""
    pending = "pending"        # En attente du propriétaire
    approved = "approved"      # Acceptée, paiement attendu
    rejected = "rejected"      # Refusée par le propriétaire
    confirmed = "confirmed"    # Paiement confirmé
    cancelled = "cancelled"    # Annulée par le candidat

    @classmethod
    def terminal_statuses(cls) -> FrozenSet["ApplicationStatus"]:
        """Statuts à partir desquels plus aucune transition n'est possible"""
        return frozenset({cls.rejected, cls.cancelled, cls.confirmed})

    @classmethod
    def valid_transitions(cls) -> Dict["ApplicationStatus", FrozenSet["ApplicationStatus"]]:
        """Transitions autorisées en une étape"""
        return {
            cls.pending: frozenset({cls.approved, cls.rejected, cls.cancelled}),
            cls.approved: frozenset({cls.confirmed, cls.cancelled}),
            cls.rejected: frozenset(),
            cls.cancelled: frozenset(),
            cls.confirmed: frozenset(),
        }

    @property
    def is_terminal(self) -> bool:
        return self in self.terminal_statuses()


class ApplicationAction(str, Enum):
    """Actions déclenchables sur une demande"""
    approve = "approve"
    reject = "reject"
    cancel = "cancel"
    confirm_payment = "confirm-payment"


class ProfileType(str, Enum):
    """Profil du candidat"""
    STUDENT = "Student"
    WORKING_PROFESSIONAL = "WorkingProfessional"
    FAMILY = "Family"


# ==========================================
# OCCUPANTS
# ==========================================

class Occupants(BaseModel):
    """Occupants déclarés dans une demande"""
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)
    males: int = Field(0, ge=0)
    females: int = Field(0, ge=0)


class OccupantComposition(Occupants):
    """Occupants + profil : tout ce qui compte pour l'éligibilité"""
    profile_type: ProfileType = ProfileType.STUDENT


# ==========================================
# MODÈLES PYDANTIC
# ==========================================

class ApplicationDraft(BaseModel):
    """
    Demande de réservation en cours de saisie.

    Les champs obligatoires à la soumission (nom, téléphone, dates) restent
    optionnels ici : leur absence est signalée par validate_submission.
    """
    room_id: str = Field(..., min_length=1)
    full_name: Optional[str] = Field(None, max_length=100)
    mobile_number: Optional[str] = Field(None, max_length=20)
    profile_type: ProfileType = ProfileType.STUDENT
    occupants: Occupants = Field(default_factory=Occupants)
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    message: Optional[str] = Field(None, max_length=500)

    @field_validator("full_name", "mobile_number")
    @classmethod
    def strip_blank(cls, v: Optional[str]) -> Optional[str]:
        """Un champ composé uniquement d'espaces est considéré comme absent"""
        if v is None:
            return v
        v = v.strip()
        return v or None

    @property
    def composition(self) -> OccupantComposition:
        return OccupantComposition(profile_type=self.profile_type, **self.occupants.model_dump())


class ApplicationCreate(ApplicationDraft):
    """Modèle pour soumettre une demande de réservation"""
    pass


class InquiryCreate(BaseModel):
    """Modèle pour une simple prise de contact"""
    room_id: str = Field(..., min_length=1)
    message: Optional[str] = Field(None, max_length=500)


class ApplicationUpdate(BaseModel):
    """Modification d'une demande en attente (tous les champs optionnels)"""
    full_name: Optional[str] = Field(None, max_length=100)
    mobile_number: Optional[str] = Field(None, max_length=20)
    profile_type: Optional[ProfileType] = None
    occupants: Optional[Occupants] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    message: Optional[str] = Field(None, max_length=500)


class Application(BaseModel):
    """Modèle complet d'une demande avec métadonnées"""
    id: str
    kind: ApplicationKind = ApplicationKind.request
    status: Optional[ApplicationStatus] = None  # None pour une inquiry
    applicant_id: str
    landlord_id: str
    room_id: str
    conversation_id: Optional[str] = None

    full_name: Optional[str] = None
    mobile_number: Optional[str] = None
    profile_type: Optional[ProfileType] = None
    occupants: Optional[Occupants] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    message: Optional[str] = None

    is_updated: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def to_draft(self) -> ApplicationDraft:
        """Reconstruit le brouillon correspondant (pour revalider une modification)"""
        return ApplicationDraft(
            room_id=self.room_id,
            full_name=self.full_name,
            mobile_number=self.mobile_number,
            profile_type=self.profile_type or ProfileType.STUDENT,
            occupants=self.occupants or Occupants(),
            check_in_date=self.check_in_date,
            check_out_date=self.check_out_date,
            message=self.message,
        )


class ApplicationList(BaseModel):
    """Modèle simplifié pour lister les demandes"""
    id: str
    kind: ApplicationKind
    status: Optional[ApplicationStatus]
    room_id: str
    applicant_id: str
    landlord_id: str
    conversation_id: Optional[str] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    is_updated: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationCreated(BaseModel):
    """Réponse à la soumission d'une demande"""
    application: Application
    conversation_id: str


class InquiryCreated(BaseModel):
    """Réponse à une prise de contact"""
    conversation_id: str


class EligibilityResult(BaseModel):
    """Résultat de la vérification d'éligibilité d'un brouillon"""
    valid: bool
    code: Optional[str] = None
    message: Optional[str] = None


class ApplicationStatistics(BaseModel):
    """Compteurs par statut (onglets « Mes demandes »)"""
    total: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
