"""Router API principal v1"""
from fastapi import APIRouter
from app.api.v1.endpoints import applications, conversations, rooms

# Créer le router principal
api_router = APIRouter()

# ==================== ROOMS ====================
api_router.include_router(
    rooms.router,
    prefix="/rooms",
    tags=["Rooms"]
)

# ==================== APPLICATIONS ====================
api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["Applications"]
)

# ==================== CONVERSATIONS ====================
api_router.include_router(
    conversations.router,
    prefix="/conversations",
    tags=["Conversations"]
)
