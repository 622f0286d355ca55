# app/crud/application.py
"""
Opérations CRUD pour les demandes de location (applications)

Les changements de statut sont des écritures conditionnelles
(check-and-set sur le statut attendu) : si une autre action est passée
avant, aucune ligne n'est modifiée et l'appelant en est informé.
"""

from typing import Optional, List, Dict, Any
from supabase import Client
import logging

from app.core.config import settings
from app.core.errors import StoreUnavailable
from app.models import (
    Application, ApplicationList, ApplicationKind,
    ApplicationStatus, ApplicationStatistics
)

logger = logging.getLogger(__name__)


class ApplicationCRUD:
    """Classe pour gérer les opérations CRUD sur les demandes"""

    def __init__(self, db: Client):
        self.db = db
        self.table_name = settings.APPLICATIONS_TABLE

    def create(self, data: Dict[str, Any]) -> Application:
        """
        Créer une nouvelle demande

        Args:
            data: Colonnes de la demande (sérialisables en JSON)

        Returns:
            Demande créée avec son ID

        Raises:
            StoreUnavailable: Si l'insertion échoue
        """
        try:
            response = self.db.table(self.table_name).insert(data).execute()
        except Exception as e:
            logger.error(f"Erreur création demande: {e}")
            raise StoreUnavailable() from e

        if not response.data:
            logger.error("Aucune donnée retournée après insertion de la demande")
            raise StoreUnavailable()

        logger.info(f"Demande créée avec succès: {response.data[0]['id']}")
        return Application(**response.data[0])

    def get_by_id(self, application_id: str) -> Optional[Application]:
        """
        Récupérer une demande par son ID

        Args:
            application_id: UUID de la demande

        Returns:
            Demande trouvée ou None
        """
        try:
            response = self.db.table(self.table_name)\
                .select("*")\
                .eq("id", application_id)\
                .execute()
        except Exception as e:
            logger.error(f"Erreur récupération demande {application_id}: {e}")
            raise StoreUnavailable() from e

        if response.data:
            return Application(**response.data[0])
        return None

    def get_all(
        self,
        skip: int = 0,
        limit: int = 20,
        applicant_id: Optional[str] = None,
        landlord_id: Optional[str] = None,
        status: Optional[ApplicationStatus] = None,
        kind: Optional[ApplicationKind] = None
    ) -> List[ApplicationList]:
        """
        Récupérer les demandes avec filtres optionnels, plus récentes d'abord

        Args:
            skip: Nombre d'éléments à sauter (pagination)
            limit: Nombre maximum d'éléments à retourner
            applicant_id: Filtrer par candidat
            landlord_id: Filtrer par propriétaire
            status: Filtrer par statut
            kind: Filtrer par nature (inquiry / request)

        Returns:
            Liste des demandes
        """
        try:
            query = self.db.table(self.table_name).select("*")

            if applicant_id:
                query = query.eq("applicant_id", applicant_id)
            if landlord_id:
                query = query.eq("landlord_id", landlord_id)
            if status:
                query = query.eq("status", status.value)
            if kind:
                query = query.eq("kind", kind.value)

            query = query.order("created_at", desc=True)
            query = query.range(skip, skip + limit - 1)

            response = query.execute()
        except Exception as e:
            logger.error(f"Erreur récupération liste demandes: {e}")
            raise StoreUnavailable() from e

        return [ApplicationList(**row) for row in response.data]

    def get_for_conversations(self, conversation_ids: List[str]) -> List[Application]:
        """Demandes (type request) rattachées à un ensemble de conversations, plus anciennes d'abord"""
        if not conversation_ids:
            return []
        try:
            response = self.db.table(self.table_name)\
                .select("*")\
                .in_("conversation_id", conversation_ids)\
                .eq("kind", ApplicationKind.request.value)\
                .order("created_at", desc=False)\
                .execute()
        except Exception as e:
            logger.error(f"Erreur récupération demandes par conversation: {e}")
            raise StoreUnavailable() from e

        return [Application(**row) for row in response.data]

    def compare_and_set(
        self,
        application_id: str,
        expected_status: ApplicationStatus,
        changes: Dict[str, Any]
    ) -> Optional[Application]:
        """
        Mettre à jour une demande seulement si son statut est encore celui attendu

        Args:
            application_id: UUID de la demande
            expected_status: Statut lu avant la décision
            changes: Colonnes à écrire

        Returns:
            Demande mise à jour, ou None si le statut a changé entre-temps
        """
        try:
            response = self.db.table(self.table_name)\
                .update(changes)\
                .eq("id", application_id)\
                .eq("status", expected_status.value)\
                .execute()
        except Exception as e:
            logger.error(f"Erreur mise à jour demande {application_id}: {e}")
            raise StoreUnavailable() from e

        if not response.data:
            logger.warning(
                f"Demande {application_id} n'est plus '{expected_status.value}', mise à jour ignorée"
            )
            return None

        logger.info(f"Demande {application_id} mise à jour")
        return Application(**response.data[0])

    def get_statistics(self, applicant_id: str) -> ApplicationStatistics:
        """
        Compteurs par statut des demandes d'un candidat

        Args:
            applicant_id: UUID du candidat

        Returns:
            Total et répartition par statut
        """
        try:
            response = self.db.table(self.table_name)\
                .select("status")\
                .eq("applicant_id", applicant_id)\
                .eq("kind", ApplicationKind.request.value)\
                .execute()
        except Exception as e:
            logger.error(f"Erreur calcul statistiques {applicant_id}: {e}")
            raise StoreUnavailable() from e

        by_status = {s.value: 0 for s in ApplicationStatus}
        for row in response.data:
            if row.get("status") in by_status:
                by_status[row["status"]] += 1

        return ApplicationStatistics(total=len(response.data), by_status=by_status)


def get_application_crud(db: Client) -> ApplicationCRUD:
    """Factory function pour créer une instance ApplicationCRUD"""
    return ApplicationCRUD(db)
