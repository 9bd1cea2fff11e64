"""Application services wrapping the engine and storage"""
from gamedo.services.game_service import GameService

__all__ = ["GameService"]
