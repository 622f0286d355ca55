# tests/test_eligibility.py
"""
Tests de la validation d'éligibilité
Exécuter: pytest tests/test_eligibility.py -v
"""
import itertools
from datetime import date

import pytest

from app.core.errors import SubmissionErrorCode
from app.models import (
    AllowedGender, ApplicationDraft, FamilyStatus, OccupantComposition,
    ProfileType, TenantPreferences
)
from app.services.eligibility import (
    check_not_own_room, validate_eligibility, validate_submission
)


def prefs(family_status="Any", allowed_gender="Any"):
    return TenantPreferences(family_status=family_status, allowed_gender=allowed_gender)


def composition(profile_type="Student", adults=1, males=0, females=0, children=0):
    return OccupantComposition(
        profile_type=profile_type, adults=adults, males=males, females=females, children=children
    )


def draft(**overrides):
    data = {
        "room_id": "room-1",
        "full_name": "Asha Patil",
        "mobile_number": "9876543210",
        "profile_type": "Student",
        "occupants": {"adults": 1, "males": 0, "females": 1},
        "check_in_date": date(2025, 3, 1),
        "check_out_date": date(2025, 4, 1),
    }
    data.update(overrides)
    return ApplicationDraft(**data)


def test_bachelors_female_only_rejects_males():
    """Annonce célibataires/femmes : un homme dans le groupe est refusé"""
    error = validate_eligibility(
        prefs("Bachelors", "Female"),
        composition("Student", adults=2, males=1, females=1)
    )
    assert error.code == SubmissionErrorCode.no_males_allowed
    assert error.message == "Sorry, no males allowed."


def test_family_draft_skips_composition_and_gender():
    """Une famille n'a pas à détailler hommes/femmes"""
    error = validate_eligibility(
        prefs("Any", "Any"),
        composition("Family", adults=3, males=1, females=2)
    )
    assert error is None


def test_family_only_rejects_every_non_family_profile():
    """Annonce familles : tout profil non familial est refusé, quelle que soit la composition"""
    for profile, gender in itertools.product(
        [ProfileType.STUDENT, ProfileType.WORKING_PROFESSIONAL],
        list(AllowedGender)
    ):
        for adults, males, females in [(1, 1, 0), (2, 0, 0), (3, 2, 2)]:
            error = validate_eligibility(
                prefs(FamilyStatus.FAMILY, gender),
                composition(profile, adults=adults, males=males, females=females)
            )
            assert error.code == SubmissionErrorCode.family_only


def test_family_status_checked_before_composition():
    """Le refus « familles uniquement » passe avant une composition incohérente"""
    error = validate_eligibility(prefs("Family"), composition("Student", adults=2, males=0, females=0))
    assert error.code == SubmissionErrorCode.family_only
    assert "families only" in error.message


def test_bachelors_only_rejects_family():
    error = validate_eligibility(prefs("Bachelors"), composition("Family", adults=2))
    assert error.code == SubmissionErrorCode.bachelors_only
    assert "bachelors only" in error.message


def test_family_allowed_on_family_listing():
    assert validate_eligibility(prefs("Family", "Male"), composition("Family", adults=2, females=2)) is None


def test_composition_mismatch_message_mentions_adults():
    error = validate_eligibility(prefs(), composition("Student", adults=3, males=1, females=1))
    assert error.code == SubmissionErrorCode.composition_mismatch
    assert error.message == "Total males and females must be 3."


def test_male_only_rejects_females():
    error = validate_eligibility(prefs("Any", "Male"), composition(adults=2, males=1, females=1))
    assert error.code == SubmissionErrorCode.no_females_allowed


def test_composition_checked_before_gender():
    """Composition incohérente signalée avant la règle de genre"""
    error = validate_eligibility(prefs("Any", "Male"), composition(adults=3, males=0, females=1))
    assert error.code == SubmissionErrorCode.composition_mismatch


@pytest.mark.parametrize("family_status", ["Any", "Bachelors"])
def test_non_family_pass_rule(family_status):
    """Non-famille : valide ssi hommes + femmes == adultes et le genre est autorisé"""
    for gender in AllowedGender:
        for adults in range(1, 4):
            for males in range(0, 4):
                for females in range(0, 4):
                    expected = males + females == adults and (
                        gender == AllowedGender.ANY
                        or (gender == AllowedGender.MALE and females == 0)
                        or (gender == AllowedGender.FEMALE and males == 0)
                    )
                    error = validate_eligibility(
                        prefs(family_status, gender),
                        composition("WorkingProfessional", adults=adults, males=males, females=females)
                    )
                    assert (error is None) == expected


def test_validate_is_pure_and_repeatable():
    """Deux appels identiques donnent le même résultat et ne modifient pas les entrées"""
    p = prefs("Bachelors", "Female")
    c = composition(adults=2, males=1, females=1)
    before = (p.model_dump(), c.model_dump())

    first = validate_eligibility(p, c)
    second = validate_eligibility(p, c)

    assert (first.code, first.message) == (second.code, second.message)
    assert (p.model_dump(), c.model_dump()) == before


def test_submission_same_day_dates_blocked():
    """Arrivée et départ le même jour : InvalidDateRange"""
    error = validate_submission(
        prefs(),
        draft(check_in_date=date(2025, 3, 1), check_out_date=date(2025, 3, 1))
    )
    assert error.code == SubmissionErrorCode.invalid_date_range


def test_submission_missing_fields():
    for field in ["full_name", "mobile_number", "check_in_date", "check_out_date"]:
        error = validate_submission(prefs(), draft(**{field: None}))
        assert error.code == SubmissionErrorCode.missing_field


def test_submission_blank_name_counts_as_missing():
    error = validate_submission(prefs(), draft(full_name="   "))
    assert error.code == SubmissionErrorCode.missing_field


def test_submission_reports_eligibility_first():
    """Le motif d'éligibilité affiché par le formulaire reste celui remonté"""
    error = validate_submission(prefs("Family"), draft(full_name=None))
    assert error.code == SubmissionErrorCode.family_only


def test_submission_valid_draft():
    assert validate_submission(prefs("Bachelors", "Female"), draft()) is None


def test_own_room_check():
    assert check_not_own_room("landlord-1", "landlord-1").code == SubmissionErrorCode.own_room
    assert check_not_own_room("student-1", "landlord-1") is None
