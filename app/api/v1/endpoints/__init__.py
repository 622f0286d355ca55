"""Endpoints API"""
from app.api.v1.endpoints import rooms
from app.api.v1.endpoints import applications
from app.api.v1.endpoints import conversations

__all__ = ["rooms", "applications", "conversations"]
