# app/api/v1/endpoints/applications.py
"""
Routes API pour les demandes de location
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
import logging

from app.api.deps import get_current_actor, get_lifecycle
from app.api.errors import booking_http_error
from app.core.errors import BookingError
from app.models import (
    Actor, Application, ApplicationAction, ApplicationCreate, ApplicationCreated,
    ApplicationList, ApplicationStatistics, ApplicationStatus, ApplicationUpdate,
    EligibilityResult, InquiryCreate, InquiryCreated
)
from app.services import ApplicationLifecycle

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/eligibility", response_model=EligibilityResult)
def check_eligibility(
    draft: ApplicationCreate,
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Vérifier l'éligibilité d'un brouillon (appelé à chaque modification du formulaire)

    - **profile_type**: Student, WorkingProfessional ou Family
    - **occupants**: adultes, enfants, hommes, femmes

    Ne crée rien ; la soumission reste bloquée tant que **valid** est faux.
    """
    try:
        error = lifecycle.check_eligibility(draft)
        if error is None:
            return EligibilityResult(valid=True)
        return EligibilityResult(valid=False, code=error.code.value, message=error.message)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur vérification éligibilité: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la vérification d'éligibilité"
        )


@router.post("/", response_model=ApplicationCreated, status_code=status.HTTP_201_CREATED)
def create_application(
    draft: ApplicationCreate,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Soumettre une demande de réservation

    - **room_id**: Chambre visée
    - **full_name / mobile_number**: Contact du candidat (obligatoires)
    - **check_in_date / check_out_date**: Dates du séjour (départ après arrivée)
    - **occupants**: Composition, contrôlée contre les préférences de l'annonce

    Crée la demande en statut **pending**, ouvre (ou retrouve) la conversation
    avec le propriétaire et y publie la carte de réservation.
    """
    try:
        application, conversation_id = lifecycle.submit_request(actor, draft)
        return ApplicationCreated(application=application, conversation_id=conversation_id)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur création demande: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la création de la demande"
        )


@router.post("/inquiry", response_model=InquiryCreated, status_code=status.HTTP_201_CREATED)
def create_inquiry(
    inquiry: InquiryCreate,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Contacter le propriétaire d'une chambre sans demande de réservation
    """
    try:
        conversation_id = lifecycle.create_inquiry(actor, inquiry)
        return InquiryCreated(conversation_id=conversation_id)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur création prise de contact: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la prise de contact"
        )


@router.get("/applicant", response_model=List[ApplicationList])
def list_my_applications(
    skip: int = Query(0, ge=0, description="Nombre d'éléments à sauter"),
    limit: int = Query(20, ge=1, le=100, description="Nombre maximum d'éléments"),
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status", description="Filtrer par statut"),
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """Demandes envoyées par l'utilisateur, plus récentes d'abord"""
    try:
        return lifecycle.list_for_applicant(actor, status=status_filter, skip=skip, limit=limit)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur récupération demandes candidat {actor.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la récupération des demandes"
        )


@router.get("/applicant/statistics", response_model=ApplicationStatistics)
def get_my_statistics(
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Compteurs des demandes de l'utilisateur

    Retourne le total et la répartition par statut
    (pending, approved, rejected, confirmed, cancelled)
    """
    try:
        return lifecycle.statistics(actor)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur calcul statistiques {actor.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors du calcul des statistiques"
        )


@router.get("/landlord", response_model=List[ApplicationList])
def list_received_applications(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """Demandes reçues sur les chambres de l'utilisateur"""
    try:
        return lifecycle.list_for_landlord(actor, status=status_filter, skip=skip, limit=limit)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur récupération demandes propriétaire {actor.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la récupération des demandes"
        )


@router.get("/{application_id}", response_model=Application)
def get_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Récupérer une demande (candidat ou propriétaire uniquement)

    À rappeler après un refus 409 pour afficher le statut à jour.
    """
    try:
        return lifecycle.fetch(actor, application_id)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur récupération demande {application_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la récupération de la demande"
        )


@router.patch("/{application_id}", response_model=Application)
def update_application(
    application_id: str,
    patch: ApplicationUpdate,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Modifier une demande encore en attente

    Seuls les champs fournis sont modifiés ; la demande est revalidée
    puis marquée comme mise à jour.
    """
    if not patch.model_dump(exclude_unset=True):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Aucune donnée à mettre à jour"
        )
    try:
        return lifecycle.edit(actor, application_id, patch)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur modification demande {application_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la modification de la demande"
        )


def _run_transition(
    lifecycle: ApplicationLifecycle,
    actor: Actor,
    application_id: str,
    action: ApplicationAction
) -> Application:
    try:
        return lifecycle.transition(actor, application_id, action)

    except BookingError as e:
        raise booking_http_error(e)
    except Exception as e:
        logger.error(f"Erreur {action.value} demande {application_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur lors de la mise à jour du statut"
        )


@router.patch("/{application_id}/approve", response_model=Application)
def approve_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """Accepter une demande en attente (propriétaire)"""
    return _run_transition(lifecycle, actor, application_id, ApplicationAction.approve)


@router.patch("/{application_id}/reject", response_model=Application)
def reject_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """Refuser une demande en attente (propriétaire)"""
    return _run_transition(lifecycle, actor, application_id, ApplicationAction.reject)


@router.patch("/{application_id}/cancel", response_model=Application)
def cancel_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """Annuler une demande en attente ou approuvée (candidat)"""
    return _run_transition(lifecycle, actor, application_id, ApplicationAction.cancel)


@router.patch("/{application_id}/confirm-payment", response_model=Application)
def confirm_payment(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ApplicationLifecycle = Depends(get_lifecycle)
):
    """
    Confirmer le paiement d'une demande approuvée

    La partie autorisée dépend de PAYMENT_CONFIRMATION_BY (propriétaire par défaut).
    """
    return _run_transition(lifecycle, actor, application_id, ApplicationAction.confirm_payment)
