"""Achievement models for gamification"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Rarity(str, Enum):
    """Presentation weighting of an achievement"""
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class CriteriaType(str, Enum):
    """Condition kinds an achievement can be unlocked by"""
    COMPLETION_COUNT = "completion_count"
    STREAK = "streak"
    PRIORITY_COUNT = "priority_count"
    CATEGORY_COUNT = "category_count"
    COMPLETED_BEFORE_HOUR = "completed_before_hour"
    COMPLETED_FROM_HOUR = "completed_from_hour"
    COMPLETED_TODAY = "completed_today"
    ALL_CREATED_TODAY_COMPLETED = "all_created_today_completed"


class AchievementCriteria(BaseModel):
    """Condition kind plus its threshold parameters

    value is a count for *_count/streak kinds and an hour (0-23) for the
    time-of-day kinds. category holds the task category or priority the
    count is restricted to.
    """
    model_config = ConfigDict(frozen=True)

    type: CriteriaType
    value: int = 1
    category: Optional[str] = None


class AchievementDefinition(BaseModel):
    """Static catalog entry"""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    icon: str
    points: int = Field(ge=0)
    category: str
    rarity: Rarity
    criteria: AchievementCriteria


class AchievementRecord(BaseModel):
    """Unlocked achievement, snapshotted from its definition at unlock time"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    description: str
    icon: str
    points: int = Field(ge=0)
    category: str = "General"
    rarity: Rarity = Rarity.COMMON
    unlocked_at: datetime = Field(alias="unlockedAt")
