"""User progress and transition result models"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gamedo.models.achievement import AchievementRecord


class Progress(BaseModel):
    """Persisted progression state of the single local user"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    level: int = Field(default=1, ge=1)
    total_xp: int = Field(default=0, ge=0, alias="totalXP")
    current_streak: int = Field(default=0, ge=0, alias="currentStreak")
    longest_streak: int = Field(default=0, ge=0, alias="longestStreak")
    last_completion_date: Optional[str] = Field(default=None, alias="lastCompletionDate")
    achievements: tuple[AchievementRecord, ...] = ()
    theme: str = "default"
    avatar: str = "gamer"

    @field_validator("achievements")
    @classmethod
    def unique_achievement_ids(cls, v: tuple[AchievementRecord, ...]) -> tuple[AchievementRecord, ...]:
        """Drop repeated ids, keeping the first unlock"""
        seen = set()
        unique = []
        for record in v:
            if record.id not in seen:
                seen.add(record.id)
                unique.append(record)
        return tuple(unique)

    @property
    def achievement_ids(self) -> frozenset[str]:
        return frozenset(a.id for a in self.achievements)


class StreakInfo(BaseModel):
    """Derived streak state"""
    model_config = ConfigDict(frozen=True)

    current_streak: int = 0
    longest_streak: int = 0
    history: tuple[date, ...] = ()


class TransitionResult(BaseModel):
    """What happened on one task transition, for notification consumers"""
    model_config = ConfigDict(frozen=True)

    xp_gained: int = 0
    level_up: bool = False
    new_level: int = 1
    previous_level: int = 1
    new_achievements: tuple[AchievementRecord, ...] = ()
    achievement_xp: int = 0
    streak_milestone_reached: Optional[int] = None
