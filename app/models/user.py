# app/models/user.py
from pydantic import BaseModel, Field, ConfigDict
from enum import Enum


class UserRole(str, Enum):
    """Rôles utilisateurs"""
    STUDENT = "student"
    LANDLORD = "landlord"
    ADMIN = "admin"


class Actor(BaseModel):
    """
    Identité de l'utilisateur qui agit.

    Fournie explicitement par l'appelant : les autorisations se basent
    sur l'identifiant (propriété de la ressource), pas sur le rôle actif.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    role: UserRole = UserRole.STUDENT
