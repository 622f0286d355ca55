"""
Cycle de vie des demandes de réservation.

    pending  -> approved | rejected | cancelled
    approved -> confirmed | cancelled
    rejected, cancelled, confirmed : terminaux

Chaque changement de statut est écrit par check-and-set sur le statut lu :
si le candidat et le propriétaire agissent en même temps, le premier
arrivé au store gagne et l'autre reçoit InvalidTransition (il doit
recharger la demande, pas rejouer l'action).
Aucun état local n'est modifié avant la confirmation du store.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple
import logging

from supabase import Client

from app.core.config import settings
from app.core.errors import (
    InvalidTransition, NotEditable, PermissionDenied, StoreUnavailable
)
from app.crud import get_application_crud, get_conversation_crud, get_room_crud
from app.models import (
    Actor, Application, ApplicationAction, ApplicationCreate, ApplicationKind,
    ApplicationList, ApplicationStatistics, ApplicationStatus, ApplicationUpdate,
    BookingCard, ConversationType, InquiryCreate, Room
)
from app.services.eligibility import (
    check_not_own_room, validate_eligibility, validate_submission
)

logger = logging.getLogger(__name__)


class Party(str, Enum):
    """Partie autorisée à déclencher une action"""
    landlord = "landlord"
    applicant = "applicant"
    either = "either"


@dataclass(frozen=True)
class TransitionRule:
    sources: FrozenSet[ApplicationStatus]
    target: ApplicationStatus
    party: Party


def transition_rules(payment_confirmation_by: str = "landlord") -> Dict[ApplicationAction, TransitionRule]:
    """Table des transitions ; la confirmation du paiement dépend de la configuration"""
    return {
        ApplicationAction.approve: TransitionRule(
            frozenset({ApplicationStatus.pending}), ApplicationStatus.approved, Party.landlord
        ),
        ApplicationAction.reject: TransitionRule(
            frozenset({ApplicationStatus.pending}), ApplicationStatus.rejected, Party.landlord
        ),
        ApplicationAction.cancel: TransitionRule(
            frozenset({ApplicationStatus.pending, ApplicationStatus.approved}),
            ApplicationStatus.cancelled,
            Party.applicant
        ),
        ApplicationAction.confirm_payment: TransitionRule(
            frozenset({ApplicationStatus.approved}),
            ApplicationStatus.confirmed,
            Party(payment_confirmation_by)
        ),
    }


@dataclass(frozen=True)
class TransitionEvent:
    """Émis après chaque transition validée par le store (livraison au moins une fois)"""
    application_id: str
    conversation_id: Optional[str]
    action: ApplicationAction
    previous_status: ApplicationStatus
    status: ApplicationStatus
    actor_id: str


TransitionSubscriber = Callable[[TransitionEvent], None]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _booking_card(application: Application, room_title: Optional[str]) -> BookingCard:
    return BookingCard(
        application_id=application.id,
        room_title=room_title,
        status=application.status or ApplicationStatus.pending,
        full_name=application.full_name,
        mobile_number=application.mobile_number,
        profile_type=application.profile_type,
        message=application.message,
        check_in_date=application.check_in_date,
        check_out_date=application.check_out_date,
        occupants=application.occupants,
    )


class ApplicationLifecycle:
    """
    Contrôleur du cycle de vie d'une demande.

    Fonctionnalités :
    - Soumission d'une demande (validation, conversation, carte de réservation)
    - Prise de contact simple (inquiry)
    - Transitions approve / reject / cancel / confirm-payment
    - Modification d'une demande en attente
    - Listes et compteurs pour les tableaux de bord
    """

    def __init__(self, db: Client, payment_confirmation_by: Optional[str] = None):
        """
        Args:
            db: Client Supabase
            payment_confirmation_by: landlord, applicant ou either (défaut : configuration)
        """
        self.applications = get_application_crud(db)
        self.conversations = get_conversation_crud(db)
        self.rooms = get_room_crud(db)
        self.rules = transition_rules(payment_confirmation_by or settings.PAYMENT_CONFIRMATION_BY)
        self._subscribers: List[TransitionSubscriber] = []

    def subscribe(self, callback: TransitionSubscriber) -> None:
        """Enregistrer un consommateur des événements de transition"""
        self._subscribers.append(callback)

    # ========================================================================
    # LECTURE
    # ========================================================================

    def _get_room(self, room_id: str) -> Room:
        room = self.rooms.get_by_id(room_id)
        if room is None:
            raise PermissionDenied()
        return room

    def fetch(self, actor: Actor, application_id: str) -> Application:
        """
        Récupérer une demande visible par l'acteur

        Raises:
            PermissionDenied: Demande inexistante ou l'acteur n'en est pas partie
        """
        application = self.applications.get_by_id(application_id)
        if application is None or actor.id not in (application.applicant_id, application.landlord_id):
            raise PermissionDenied()
        return application

    def check_eligibility(self, draft: ApplicationCreate):
        """Éligibilité d'un brouillon vis-à-vis des préférences de la chambre visée"""
        room = self._get_room(draft.room_id)
        return validate_eligibility(room.tenant_preferences, draft.composition)

    def list_for_applicant(
        self,
        actor: Actor,
        status: Optional[ApplicationStatus] = None,
        skip: int = 0,
        limit: int = 20
    ) -> List[ApplicationList]:
        return self.applications.get_all(
            skip=skip, limit=limit, applicant_id=actor.id,
            status=status, kind=ApplicationKind.request
        )

    def list_for_landlord(
        self,
        actor: Actor,
        status: Optional[ApplicationStatus] = None,
        skip: int = 0,
        limit: int = 20
    ) -> List[ApplicationList]:
        return self.applications.get_all(
            skip=skip, limit=limit, landlord_id=actor.id,
            status=status, kind=ApplicationKind.request
        )

    def statistics(self, actor: Actor) -> ApplicationStatistics:
        return self.applications.get_statistics(actor.id)

    # ========================================================================
    # CRÉATION
    # ========================================================================

    def submit_request(self, actor: Actor, draft: ApplicationCreate) -> Tuple[Application, str]:
        """
        Soumettre une demande de réservation.

        Toutes les validations ont lieu avant le premier appel d'écriture.
        La conversation est retrouvée ou créée avant l'insertion de la demande ;
        si l'insertion échoue, elle reste en place et sera réutilisée au
        prochain essai. Une fois la demande écrite, la publication de la carte
        dans le chat ne fait plus échouer la soumission.

        Returns:
            (demande créée en statut pending, ID de la conversation)

        Raises:
            SubmissionError: Brouillon refusé (aucune écriture)
            PermissionDenied: Chambre inconnue
            StoreUnavailable: La demande n'a pas pu être écrite
        """
        room = self._get_room(draft.room_id)

        error = check_not_own_room(actor.id, room.landlord_id) \
            or validate_submission(room.tenant_preferences, draft)
        if error is not None:
            logger.info(f"Demande refusée pour la chambre {room.id}: {error.code.value}")
            raise error

        conversation = self.conversations.find_or_create(
            room.id, actor.id, room.landlord_id, ConversationType.booking
        )

        data = draft.model_dump(mode="json")
        data.update({
            "kind": ApplicationKind.request.value,
            "status": ApplicationStatus.pending.value,
            "applicant_id": actor.id,
            "landlord_id": room.landlord_id,
            "conversation_id": conversation.id,
            "is_updated": False,
        })
        application = self.applications.create(data)

        try:
            self.conversations.post_booking_card(
                conversation.id, actor.id, _booking_card(application, room.title)
            )
        except StoreUnavailable:
            logger.exception(f"❌ Carte de réservation non publiée pour {application.id}")

        logger.info(f"✅ Demande {application.id} soumise (conversation {conversation.id})")
        return application, conversation.id

    def create_inquiry(self, actor: Actor, inquiry: InquiryCreate) -> str:
        """
        Prise de contact : une conversation et un message texte, sans cycle de vie

        Returns:
            ID de la conversation
        """
        room = self._get_room(inquiry.room_id)

        error = check_not_own_room(actor.id, room.landlord_id)
        if error is not None:
            raise error

        conversation = self.conversations.find_or_create(
            room.id, actor.id, room.landlord_id, ConversationType.inquiry
        )
        self.applications.create({
            "kind": ApplicationKind.inquiry.value,
            "status": None,
            "room_id": room.id,
            "applicant_id": actor.id,
            "landlord_id": room.landlord_id,
            "conversation_id": conversation.id,
            "message": inquiry.message,
            "is_updated": False,
        })
        if inquiry.message:
            self.conversations.add_message(conversation.id, actor.id, inquiry.message)

        logger.info(f"Prise de contact pour la chambre {room.id} (conversation {conversation.id})")
        return conversation.id

    # ========================================================================
    # TRANSITIONS
    # ========================================================================

    def _may_act(self, actor: Actor, application: Application, party: Party) -> bool:
        is_landlord = actor.id == application.landlord_id
        is_applicant = actor.id == application.applicant_id
        if party == Party.landlord:
            return is_landlord
        if party == Party.applicant:
            return is_applicant
        return is_landlord or is_applicant

    def allowed_actions(self, actor: Actor, application: Application) -> List[ApplicationAction]:
        """Actions que l'acteur peut déclencher sur la demande dans son statut actuel"""
        if application.kind != ApplicationKind.request or application.status is None:
            return []
        return [
            action for action, rule in self.rules.items()
            if application.status in rule.sources and self._may_act(actor, application, rule.party)
        ]

    def transition(self, actor: Actor, application_id: str, action: ApplicationAction) -> Application:
        """
        Appliquer une action à une demande

        Args:
            actor: Utilisateur qui agit
            application_id: UUID de la demande
            action: approve, reject, cancel ou confirm-payment

        Returns:
            Demande dans son nouveau statut

        Raises:
            PermissionDenied: Demande inexistante ou étrangère à l'acteur
            InvalidTransition: Statut incompatible, acteur non habilité, ou course perdue
            StoreUnavailable: Échec du store (rien n'a changé)
        """
        application = self.fetch(actor, application_id)
        rule = self.rules[action]

        if application.kind != ApplicationKind.request or application.status is None:
            logger.warning(f"⚠️ {action.value} refusé: {application_id} n'est pas une demande de réservation")
            raise InvalidTransition()
        if not self._may_act(actor, application, rule.party):
            logger.warning(f"⚠️ {action.value} refusé: {actor.id} non habilité sur {application_id}")
            raise InvalidTransition()
        if application.status not in rule.sources:
            logger.warning(
                f"⚠️ {action.value} refusé: {application_id} est '{application.status.value}'"
            )
            raise InvalidTransition()

        updated = self.applications.compare_and_set(
            application_id,
            application.status,
            {"status": rule.target.value, "updated_at": _now_iso()}
        )
        if updated is None:
            raise InvalidTransition()

        logger.info(
            f"✅ Demande {application_id}: {application.status.value} -> {rule.target.value}"
        )
        self._propagate(
            TransitionEvent(
                application_id=updated.id,
                conversation_id=updated.conversation_id,
                action=action,
                previous_status=application.status,
                status=rule.target,
                actor_id=actor.id,
            ),
            updated
        )
        return updated

    def approve(self, actor: Actor, application_id: str) -> Application:
        return self.transition(actor, application_id, ApplicationAction.approve)

    def reject(self, actor: Actor, application_id: str) -> Application:
        return self.transition(actor, application_id, ApplicationAction.reject)

    def cancel(self, actor: Actor, application_id: str) -> Application:
        return self.transition(actor, application_id, ApplicationAction.cancel)

    def confirm_payment(self, actor: Actor, application_id: str) -> Application:
        return self.transition(actor, application_id, ApplicationAction.confirm_payment)

    def _system_text(self, event: TransitionEvent, application: Application) -> Optional[str]:
        if event.action not in (ApplicationAction.approve, ApplicationAction.reject):
            return None
        room = self.rooms.get_by_id(application.room_id)
        title = room.title if room else "this room"
        if event.action == ApplicationAction.approve:
            return f'Your booking request for "{title}" has been approved.'
        return f'Unfortunately, your booking request for "{title}" has been declined.'

    def _propagate(self, event: TransitionEvent, application: Application) -> None:
        """
        Effets de bord après une transition validée : carte du chat, message
        système, abonnés. La demande fait foi ; un échec ici est journalisé
        et ne remet pas en cause la transition.
        """
        if event.conversation_id:
            try:
                self.conversations.update_booking_card_status(
                    event.conversation_id, event.application_id, event.status
                )
                text = self._system_text(event, application)
                if text:
                    self.conversations.add_message(event.conversation_id, application.landlord_id, text)
            except StoreUnavailable:
                logger.exception(f"❌ Propagation au chat échouée pour {event.application_id}")

        for callback in self._subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(f"❌ Abonné en échec pour l'événement {event.application_id}")

    # ========================================================================
    # MODIFICATION
    # ========================================================================

    def edit(self, actor: Actor, application_id: str, patch: ApplicationUpdate) -> Application:
        """
        Modifier une demande encore en attente

        Les champs fournis sont fusionnés puis revalidés contre les
        préférences actuelles de la chambre ; la demande est marquée is_updated.

        Raises:
            PermissionDenied: Demande inexistante ou étrangère à l'acteur
            InvalidTransition: L'acteur n'est pas le candidat
            NotEditable: La demande n'est plus en attente
            SubmissionError: La version modifiée n'est pas soumissible
        """
        application = self.fetch(actor, application_id)

        if actor.id != application.applicant_id:
            logger.warning(f"⚠️ Modification refusée: {actor.id} n'est pas le candidat de {application_id}")
            raise InvalidTransition()
        if application.kind != ApplicationKind.request or application.status != ApplicationStatus.pending:
            raise NotEditable()

        changes = patch.model_dump(exclude_unset=True)
        merged = ApplicationCreate(**{**application.to_draft().model_dump(), **changes})

        room = self._get_room(application.room_id)
        error = validate_submission(room.tenant_preferences, merged)
        if error is not None:
            raise error

        data = merged.model_dump(mode="json", exclude={"room_id"})
        data.update({"is_updated": True, "updated_at": _now_iso()})

        updated = self.applications.compare_and_set(application_id, ApplicationStatus.pending, data)
        if updated is None:
            raise NotEditable()

        logger.info(f"✅ Demande {application_id} modifiée par le candidat")

        if updated.conversation_id:
            try:
                self.conversations.update_booking_card(
                    updated.conversation_id, _booking_card(updated, room.title)
                )
                self.conversations.add_message(
                    updated.conversation_id,
                    actor.id,
                    "The booking application for this room has been updated by the student."
                )
            except StoreUnavailable:
                logger.exception(f"❌ Propagation au chat échouée pour {application_id}")

        return updated


def get_application_lifecycle(db: Client) -> ApplicationLifecycle:
    """Factory function pour créer une instance ApplicationLifecycle"""
    return ApplicationLifecycle(db)
