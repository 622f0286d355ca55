"""Configuration du service de réservation"""
from pydantic_settings import BaseSettings
from typing import List, Literal


class Settings(BaseSettings):
    """Paramètres de configuration"""

    # Application
    APP_NAME: str = "Roomly Bookings"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS - URLs autorisées
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:3000"

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Tables
    ROOMS_TABLE: str = "rooms"
    APPLICATIONS_TABLE: str = "applications"
    CONVERSATIONS_TABLE: str = "conversations"
    MESSAGES_TABLE: str = "messages"

    # Qui peut confirmer le paiement d'une demande approuvée
    PAYMENT_CONFIRMATION_BY: Literal["landlord", "applicant", "either"] = "landlord"

    @property
    def cors_origins_list(self) -> List[str]:
        """Transforme CORS_ORIGINS en liste"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


# Instance globale
settings = Settings()
