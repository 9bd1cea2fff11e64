"""
Progression engine for GameDo

This package implements the pure gamification core:
- XP and leveling system
- Daily streak tracking
- Achievement catalog and evaluation
- Task completion orchestration
- Theme/avatar unlocks and statistics
"""

from gamedo.gamification.xp_system import xp_for_task, level_for_xp, xp_threshold, calculate_level_from_xp
from gamedo.gamification.streak_system import compute_streak, completion_days
from gamedo.gamification.achievement_system import check_for_new_achievements, ACHIEVEMENT_CATALOG
from gamedo.gamification.progression import (
    apply_task_completion,
    revert_task_completion,
    toggle_task_completion,
)

__all__ = [
    "xp_for_task",
    "level_for_xp",
    "xp_threshold",
    "calculate_level_from_xp",
    "compute_streak",
    "completion_days",
    "check_for_new_achievements",
    "ACHIEVEMENT_CATALOG",
    "apply_task_completion",
    "revert_task_completion",
    "toggle_task_completion",
]
