"""
Dépendances communes des endpoints (identité de l'acteur, services)
"""
from fastapi import Depends, Header, HTTPException, status
from supabase import Client
import logging

from app.db import get_supabase
from app.models import Actor, UserRole
from app.services import (
    ApplicationLifecycle, InboxService, TransitionEvent,
    get_application_lifecycle, get_inbox_service
)

logger = logging.getLogger(__name__)


def get_current_actor(
    x_user_id: str = Header(..., description="ID de l'utilisateur qui agit"),
    x_user_role: UserRole = Header(UserRole.STUDENT, description="Rôle actif (student, landlord, admin)")
) -> Actor:
    """
    Identité fournie explicitement par l'appelant.

    L'authentification est assurée en amont (passerelle) ; ici on ne fait
    que construire l'Actor utilisé par les contrôles de propriété.
    """
    if not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity"
        )
    return Actor(id=x_user_id.strip(), role=x_user_role)


def log_transition(event: TransitionEvent) -> None:
    """Abonné par défaut : trace chaque transition pour les consommateurs en aval"""
    logger.info(
        f"📣 Transition {event.application_id}: {event.previous_status.value} -> "
        f"{event.status.value} ({event.action.value} par {event.actor_id})"
    )


def get_lifecycle(db: Client = Depends(get_supabase)) -> ApplicationLifecycle:
    lifecycle = get_application_lifecycle(db)
    lifecycle.subscribe(log_transition)
    return lifecycle


def get_inbox(db: Client = Depends(get_supabase)) -> InboxService:
    return get_inbox_service(db)
