"""Rendu de la carte de réservation affichée dans le chat"""
import calendar
from datetime import date
from typing import List, Optional

from app.models.application import ApplicationAction, ApplicationStatus, Occupants
from app.models.conversation import BookingCard, BookingCardView


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def describe_duration(check_in: Optional[date], check_out: Optional[date]) -> str:
    """Durée du séjour en années, mois et jours ("1 Year, 2 Months, 3 Days")"""
    if not check_in or not check_out or check_out <= check_in:
        return ""

    years = check_out.year - check_in.year
    months = check_out.month - check_in.month
    days = check_out.day - check_in.day
    if days < 0:
        months -= 1
        # Emprunt sur le mois précédant la date de départ
        prev_year, prev_month = (check_out.year, check_out.month - 1) if check_out.month > 1 \
            else (check_out.year - 1, 12)
        days += calendar.monthrange(prev_year, prev_month)[1]
    if months < 0:
        years -= 1
        months += 12

    parts = []
    if years > 0:
        parts.append(_plural(years, "Year"))
    if months > 0:
        parts.append(_plural(months, "Month"))
    if days > 0:
        parts.append(_plural(days, "Day"))
    return ", ".join(parts)


def describe_composition(occupants: Optional[Occupants]) -> str:
    """Répartition hommes/femmes ("2 Males, 1 Female"), vide si non renseignée"""
    if occupants is None:
        return ""
    males = _plural(occupants.males, "Male")
    females = _plural(occupants.females, "Female")
    if occupants.males > 0 and occupants.females > 0:
        return f"{males}, {females}"
    if occupants.males > 0:
        return males
    if occupants.females > 0:
        return females
    return ""


def card_actions(
    status: Optional[ApplicationStatus],
    viewer_id: str,
    applicant_id: str,
    landlord_id: str,
) -> List[ApplicationAction]:
    """
    Boutons proposés au membre qui regarde la carte.

    Le propriétaire voit approuver/refuser tant que la demande est en attente ;
    le candidat peut annuler tant qu'elle est en attente ou approuvée.
    """
    if status is None:
        return []
    if viewer_id == landlord_id and status == ApplicationStatus.pending:
        return [ApplicationAction.approve, ApplicationAction.reject]
    if viewer_id == applicant_id and status in (ApplicationStatus.pending, ApplicationStatus.approved):
        return [ApplicationAction.cancel]
    return []


def render_card(
    card: BookingCard,
    viewer_id: str,
    applicant_id: str,
    landlord_id: str,
    live_status: Optional[ApplicationStatus] = None,
) -> BookingCardView:
    """Construit la vue de la carte ; live_status prime sur le statut recopié dans le message"""
    status = live_status or card.status
    data = card.model_dump()
    data["status"] = status
    return BookingCardView(
        **data,
        duration=describe_duration(card.check_in_date, card.check_out_date),
        composition=describe_composition(card.occupants),
        actions=card_actions(status, viewer_id, applicant_id, landlord_id),
    )
