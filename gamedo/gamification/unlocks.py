"""
Theme and Avatar Unlocks

Cosmetics are gated by a requirement type plus threshold:
- level: progress.level >= value
- streak: progress.current_streak >= value
- tasks: completed task count >= value
- achievement: achievement id value is unlocked

Thresholds use the same ">= value" comparison as achievement conditions.
"""

from typing import Dict, List, Optional, Union
from enum import Enum

from pydantic import BaseModel, ConfigDict

from gamedo.models.progress import Progress


class RequirementType(str, Enum):
    LEVEL = "level"
    STREAK = "streak"
    TASKS = "tasks"
    ACHIEVEMENT = "achievement"


class UnlockRequirement(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: RequirementType
    value: Union[int, str]


class Theme(BaseModel):
    """Color theme; colors are opaque to the engine"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    primary: str
    secondary: str
    unlock_requirement: Optional[UnlockRequirement] = None


class Avatar(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    emoji: str
    name: str
    unlock_level: int = 1


THEMES: Dict[str, Theme] = {
    "default": Theme(
        id="default", name="Rose Garden",
        description="The classic GameDo theme with vibrant rose colors",
        primary="#be123c", secondary="#ec4899",
    ),
    "ocean": Theme(
        id="ocean", name="Ocean Breeze",
        description="Cool blues and teals for a calming experience",
        primary="#0891b2", secondary="#06b6d4",
        unlock_requirement=UnlockRequirement(type=RequirementType.LEVEL, value=5),
    ),
    "forest": Theme(
        id="forest", name="Forest Path",
        description="Natural greens for productivity in harmony with nature",
        primary="#059669", secondary="#10b981",
        unlock_requirement=UnlockRequirement(type=RequirementType.STREAK, value=7),
    ),
    "sunset": Theme(
        id="sunset", name="Sunset Glow",
        description="Warm oranges and yellows for energetic productivity",
        primary="#ea580c", secondary="#f59e0b",
        unlock_requirement=UnlockRequirement(type=RequirementType.TASKS, value=50),
    ),
    "midnight": Theme(
        id="midnight", name="Midnight Purple",
        description="Deep purples for the night owls",
        primary="#7c3aed", secondary="#a855f7",
        unlock_requirement=UnlockRequirement(type=RequirementType.ACHIEVEMENT, value="night-owl"),
    ),
    "champion": Theme(
        id="champion", name="Champion Gold",
        description="Luxurious gold theme for true achievers",
        primary="#d97706", secondary="#f59e0b",
        unlock_requirement=UnlockRequirement(type=RequirementType.LEVEL, value=10),
    ),
}

AVATARS: List[Avatar] = [
    Avatar(id="gamer", emoji="🎮", name="Gamer", unlock_level=1),
    Avatar(id="rocket", emoji="🚀", name="Rocket", unlock_level=3),
    Avatar(id="star", emoji="⭐", name="Star", unlock_level=5),
    Avatar(id="crown", emoji="👑", name="Crown", unlock_level=7),
    Avatar(id="diamond", emoji="💎", name="Diamond", unlock_level=10),
    Avatar(id="trophy", emoji="🏆", name="Trophy", unlock_level=15),
    Avatar(id="fire", emoji="🔥", name="Fire", unlock_level=20),
    Avatar(id="lightning", emoji="⚡", name="Lightning", unlock_level=25),
]


def requirement_met(
    requirement: Optional[UnlockRequirement],
    progress: Progress,
    completed_tasks: int
) -> bool:
    """Check a single unlock requirement; no requirement means unlocked"""
    if requirement is None:
        return True

    if requirement.type == RequirementType.LEVEL:
        return progress.level >= int(requirement.value)
    elif requirement.type == RequirementType.STREAK:
        return progress.current_streak >= int(requirement.value)
    elif requirement.type == RequirementType.TASKS:
        return completed_tasks >= int(requirement.value)
    elif requirement.type == RequirementType.ACHIEVEMENT:
        return str(requirement.value) in progress.achievement_ids

    return False


def is_theme_unlocked(theme_id: str, progress: Progress, completed_tasks: int) -> bool:
    theme = THEMES.get(theme_id)
    if theme is None:
        return False
    return requirement_met(theme.unlock_requirement, progress, completed_tasks)


def get_available_themes(progress: Progress, completed_tasks: int) -> List[Theme]:
    """Themes the user may select, in catalog order"""
    return [
        theme for theme in THEMES.values()
        if requirement_met(theme.unlock_requirement, progress, completed_tasks)
    ]


def get_available_avatars(level: int) -> List[Avatar]:
    """Avatars unlocked at the given level"""
    return [avatar for avatar in AVATARS if level >= avatar.unlock_level]
