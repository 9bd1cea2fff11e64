"""
XP and Leveling System

Converts completed tasks into XP and resolves levels from cumulative XP.

Leveling Curve (quadratic):
- level = floor(sqrt(total_xp / 100)) + 1
- XP needed to reach level L = (L - 1)^2 * 100
- Level 2 at 100 XP, level 3 at 400 XP, level 4 at 900 XP, ...

XP Award Rules:
- Task completion: floor(task points * priority multiplier)
- Priority multipliers: low 1.0, medium 1.5, high 2.0
- Achievement unlocks: the achievement's point reward
"""

import math
from typing import Dict

from gamedo.models.task import Priority, Task

XP_PER_LEVEL_UNIT = 100

PRIORITY_MULTIPLIERS: Dict[Priority, float] = {
    Priority.LOW: 1.0,
    Priority.MEDIUM: 1.5,
    Priority.HIGH: 2.0,
}


def xp_for_task(task: Task) -> int:
    """
    XP awarded for completing a task

    Args:
        task: Validated task; priority must be a Priority member

    Returns:
        Non-negative XP amount
    """
    return math.floor(task.points * PRIORITY_MULTIPLIERS[Priority(task.priority)])


def level_for_xp(total_xp: int) -> int:
    """Level reached with total_xp cumulative XP (always >= 1)"""
    if total_xp <= 0:
        return 1
    return math.isqrt(total_xp // XP_PER_LEVEL_UNIT) + 1


def xp_threshold(level: int) -> int:
    """Cumulative XP required to reach level"""
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")
    return (level - 1) ** 2 * XP_PER_LEVEL_UNIT


def calculate_level_from_xp(total_xp: int) -> Dict[str, int]:
    """
    Calculate level and progress toward the next level

    Returns:
        {
            'current_level': int,
            'xp_in_current_level': int,
            'xp_to_next_level': int,
            'total_xp_for_next_level': int,
            'progress_percentage': int (0-100)
        }
    """
    total_xp = max(0, total_xp)
    level = level_for_xp(total_xp)
    level_start = xp_threshold(level)
    next_level_at = xp_threshold(level + 1)
    span = next_level_at - level_start

    xp_in_level = total_xp - level_start

    return {
        "current_level": level,
        "xp_in_current_level": xp_in_level,
        "xp_to_next_level": next_level_at - total_xp,
        "total_xp_for_next_level": next_level_at,
        "progress_percentage": int(xp_in_level * 100 / span),
    }
