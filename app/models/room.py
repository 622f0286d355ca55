# app/models/room.py
"""
Modèles Pydantic des annonces (lecture seule) et de leurs préférences locataires
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum


class FamilyStatus(str, Enum):
    ANY = "Any"
    BACHELORS = "Bachelors"
    FAMILY = "Family"


class AllowedGender(str, Enum):
    ANY = "Any"
    MALE = "Male"
    FEMALE = "Female"


class TenantPreferences(BaseModel):
    """Préférences locataires d'une annonce (lecture seule pour les candidats)"""
    family_status: FamilyStatus = FamilyStatus.ANY
    allowed_gender: AllowedGender = AllowedGender.ANY


class Room(BaseModel):
    """Annonce de chambre, telle que lue depuis le store"""
    id: str
    landlord_id: str
    title: str = Field(..., min_length=1, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    tenant_preferences: TenantPreferences = Field(default_factory=TenantPreferences)
    is_available: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("tenant_preferences", mode="before")
    @classmethod
    def default_preferences(cls, v):
        """Une annonce sans préférences accepte tout le monde"""
        return v if v is not None else {}

    class Config:
        from_attributes = True
