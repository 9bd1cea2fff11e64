"""Pydantic data models"""
from gamedo.models.achievement import (
    AchievementCriteria,
    AchievementDefinition,
    AchievementRecord,
    CriteriaType,
    Rarity,
)
from gamedo.models.progress import Progress, StreakInfo, TransitionResult
from gamedo.models.task import Priority, Task

__all__ = [
    "AchievementCriteria",
    "AchievementDefinition",
    "AchievementRecord",
    "CriteriaType",
    "Rarity",
    "Progress",
    "StreakInfo",
    "TransitionResult",
    "Priority",
    "Task",
]
