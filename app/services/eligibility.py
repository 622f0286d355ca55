"""
Validation d'éligibilité d'une demande de réservation.

Fonctions pures : aucune écriture, aucune exception pour un brouillon
inéligible. Elles sont appelées à chaque modification du formulaire
(endpoint /applications/eligibility) puis à la soumission.
"""
from typing import Optional

from app.core.errors import SubmissionError, SubmissionErrorCode
from app.models.application import ApplicationDraft, OccupantComposition, ProfileType
from app.models.room import AllowedGender, FamilyStatus, TenantPreferences


def _error(code: SubmissionErrorCode, message: str) -> SubmissionError:
    return SubmissionError(code, message)


def validate_eligibility(
    preferences: TenantPreferences,
    draft: OccupantComposition,
) -> Optional[SubmissionError]:
    """
    Vérifie qu'une composition d'occupants respecte les préférences d'une annonce.

    Les règles de statut familial passent avant celles de composition et
    de genre : un refus « familles uniquement » est remonté même si la
    composition est par ailleurs incohérente.

    Args:
        preferences: Préférences locataires de l'annonce
        draft: Profil et occupants du brouillon

    Returns:
        None si le brouillon est éligible, sinon l'erreur (non levée)
    """
    is_family = draft.profile_type == ProfileType.FAMILY

    if preferences.family_status == FamilyStatus.FAMILY and not is_family:
        return _error(
            SubmissionErrorCode.family_only,
            "Sorry, this property is available for families only."
        )
    if preferences.family_status == FamilyStatus.BACHELORS and is_family:
        return _error(
            SubmissionErrorCode.bachelors_only,
            "Sorry, this property is available for bachelors only."
        )

    # Les familles ne déclarent pas de répartition par genre
    if is_family:
        return None

    if draft.males + draft.females != draft.adults:
        return _error(
            SubmissionErrorCode.composition_mismatch,
            f"Total males and females must be {draft.adults}."
        )
    if preferences.allowed_gender == AllowedGender.MALE and draft.females > 0:
        return _error(SubmissionErrorCode.no_females_allowed, "Sorry, no females allowed.")
    if preferences.allowed_gender == AllowedGender.FEMALE and draft.males > 0:
        return _error(SubmissionErrorCode.no_males_allowed, "Sorry, no males allowed.")

    return None


def validate_submission(
    preferences: TenantPreferences,
    draft: ApplicationDraft,
) -> Optional[SubmissionError]:
    """
    Contrôles complets avant soumission d'une demande.

    Ordre : éligibilité, champs obligatoires, puis cohérence des dates.
    Seule la première erreur est renvoyée (un message par action).
    """
    error = validate_eligibility(preferences, draft.composition)
    if error is not None:
        return error

    if not (draft.full_name and draft.mobile_number and draft.check_in_date and draft.check_out_date):
        return _error(
            SubmissionErrorCode.missing_field,
            "Please fill all required fields, including check-in and check-out dates."
        )
    if draft.check_out_date <= draft.check_in_date:
        return _error(
            SubmissionErrorCode.invalid_date_range,
            "Check-out date must be after the check-in date."
        )
    return None


def check_not_own_room(actor_id: str, landlord_id: str) -> Optional[SubmissionError]:
    """Un propriétaire ne peut pas candidater sur sa propre chambre"""
    if actor_id == landlord_id:
        return _error(SubmissionErrorCode.own_room, "You cannot apply to your own room.")
    return None
