"""
Achievement System

Evaluates a static catalog of achievement definitions against the task
history and progress snapshot.

Categories:
- Getting Started (first task, first day)
- Streaks (3/7/30/100 consecutive days)
- Productivity (10/50/100/500 completed tasks)
- Priority (high-priority completions)
- Categories (Work, Health, Learning completions)
- Special (early bird, night owl, perfectionist)

An achievement is returned at most once: ids already unlocked are skipped
before their condition is evaluated. Conditions themselves stay pure and may
be re-evaluated at any time.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from gamedo.models.achievement import (
    AchievementCriteria,
    AchievementDefinition,
    AchievementRecord,
    CriteriaType,
    Rarity,
)
from gamedo.models.progress import Progress
from gamedo.models.task import Priority, Task
from gamedo.utils.datetime_helpers import local_day, local_hour

logger = logging.getLogger(__name__)


def _definition(id, title, description, icon, points, category, rarity, criteria_type, value=1, criteria_category=None):
    return AchievementDefinition(
        id=id,
        title=title,
        description=description,
        icon=icon,
        points=points,
        category=category,
        rarity=rarity,
        criteria=AchievementCriteria(type=criteria_type, value=value, category=criteria_category),
    )


ACHIEVEMENT_CATALOG: tuple[AchievementDefinition, ...] = (
    # Getting Started
    _definition("first-task", "Getting Started", "Complete your first task", "🎯", 10,
                "Getting Started", Rarity.COMMON, CriteriaType.COMPLETION_COUNT, 1),
    _definition("first-day", "Day One", "Complete your first day of tasks", "🌅", 15,
                "Getting Started", Rarity.COMMON, CriteriaType.COMPLETED_TODAY, 1),

    # Streaks
    _definition("streak-3", "3-Day Warrior", "Complete tasks for 3 days in a row", "🔥", 25,
                "Streaks", Rarity.COMMON, CriteriaType.STREAK, 3),
    _definition("streak-7", "Week Champion", "Complete tasks for 7 days in a row", "👑", 50,
                "Streaks", Rarity.RARE, CriteriaType.STREAK, 7),
    _definition("streak-30", "Monthly Master", "Complete tasks for 30 days in a row", "💎", 200,
                "Streaks", Rarity.EPIC, CriteriaType.STREAK, 30),
    _definition("streak-100", "Century Legend", "Complete tasks for 100 days in a row", "🌟", 1000,
                "Streaks", Rarity.LEGENDARY, CriteriaType.STREAK, 100),

    # Task counts
    _definition("task-10", "Getting Things Done", "Complete 10 tasks", "✅", 30,
                "Productivity", Rarity.COMMON, CriteriaType.COMPLETION_COUNT, 10),
    _definition("task-50", "Task Master", "Complete 50 tasks", "⭐", 100,
                "Productivity", Rarity.RARE, CriteriaType.COMPLETION_COUNT, 50),
    _definition("task-100", "Productivity Pro", "Complete 100 tasks", "🏆", 250,
                "Productivity", Rarity.EPIC, CriteriaType.COMPLETION_COUNT, 100),
    _definition("task-500", "Task Titan", "Complete 500 tasks", "🚀", 1000,
                "Productivity", Rarity.LEGENDARY, CriteriaType.COMPLETION_COUNT, 500),

    # Priority
    _definition("high-priority-5", "Priority Focused", "Complete 5 high-priority tasks", "🎯", 25,
                "Priority", Rarity.COMMON, CriteriaType.PRIORITY_COUNT, 5, Priority.HIGH.value),
    _definition("high-priority-25", "Priority Pro", "Complete 25 high-priority tasks", "🚀", 75,
                "Priority", Rarity.RARE, CriteriaType.PRIORITY_COUNT, 25, Priority.HIGH.value),

    # Categories
    _definition("work-specialist", "Work Specialist", "Complete 20 work tasks", "💼", 50,
                "Categories", Rarity.RARE, CriteriaType.CATEGORY_COUNT, 20, "Work"),
    _definition("health-guru", "Health Guru", "Complete 15 health tasks", "💪", 50,
                "Categories", Rarity.RARE, CriteriaType.CATEGORY_COUNT, 15, "Health"),
    _definition("learning-enthusiast", "Learning Enthusiast", "Complete 25 learning tasks", "📚", 75,
                "Categories", Rarity.RARE, CriteriaType.CATEGORY_COUNT, 25, "Learning"),

    # Special
    _definition("early-bird", "Early Bird", "Complete a task before 8 AM", "🌅", 20,
                "Special", Rarity.COMMON, CriteriaType.COMPLETED_BEFORE_HOUR, 8),
    _definition("night-owl", "Night Owl", "Complete a task after 10 PM", "🦉", 20,
                "Special", Rarity.COMMON, CriteriaType.COMPLETED_FROM_HOUR, 22),
    _definition("perfectionist", "Perfectionist", "Complete all tasks in a day", "💯", 100,
                "Special", Rarity.EPIC, CriteriaType.ALL_CREATED_TODAY_COMPLETED, 1),
)

_CATALOG_BY_ID: Dict[str, AchievementDefinition] = {d.id: d for d in ACHIEVEMENT_CATALOG}


def get_definition(achievement_id: str) -> Optional[AchievementDefinition]:
    """Look up a catalog definition by id"""
    return _CATALOG_BY_ID.get(achievement_id)


def check_for_new_achievements(
    tasks: Sequence[Task],
    progress: Progress,
    already_unlocked: Iterable[AchievementRecord],
    *,
    now: datetime,
    catalog: Sequence[AchievementDefinition] = ACHIEVEMENT_CATALOG
) -> List[AchievementRecord]:
    """
    Check which catalog achievements became satisfied

    Args:
        tasks: Full task collection after the transition
        progress: Progress snapshot carrying the post-transition streak/XP/level
        already_unlocked: Achievements the user already holds
        now: Current time from the injected clock; also the unlock timestamp
        catalog: Definitions to evaluate, in declaration order

    Returns:
        Newly unlocked achievements in catalog order
    """
    unlocked_ids = {record.id for record in already_unlocked}
    newly_unlocked: List[AchievementRecord] = []

    for definition in catalog:
        # Skip if already unlocked
        if definition.id in unlocked_ids:
            continue

        if not is_satisfied(definition.criteria, tasks, progress, now=now):
            continue

        record = AchievementRecord(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            points=definition.points,
            category=definition.category,
            rarity=definition.rarity,
            unlocked_at=now,
        )
        newly_unlocked.append(record)
        unlocked_ids.add(definition.id)

        logger.info(f"Unlocked achievement: {definition.id} ({definition.title}) +{definition.points} XP")

    return newly_unlocked


def is_satisfied(
    criteria: AchievementCriteria,
    tasks: Sequence[Task],
    progress: Progress,
    *,
    now: datetime
) -> bool:
    """Evaluate one achievement condition"""
    tz = now.tzinfo
    criteria_type = criteria.type

    if criteria_type == CriteriaType.COMPLETION_COUNT:
        return _count_completed(tasks) >= criteria.value

    elif criteria_type == CriteriaType.STREAK:
        return progress.current_streak >= criteria.value

    elif criteria_type == CriteriaType.PRIORITY_COUNT:
        return _count_completed(tasks, priority=criteria.category) >= criteria.value

    elif criteria_type == CriteriaType.CATEGORY_COUNT:
        return _count_completed(tasks, category=criteria.category) >= criteria.value

    elif criteria_type == CriteriaType.COMPLETED_BEFORE_HOUR:
        return any(local_hour(t.completed_at, tz) < criteria.value for t in _completed(tasks))

    elif criteria_type == CriteriaType.COMPLETED_FROM_HOUR:
        return any(local_hour(t.completed_at, tz) >= criteria.value for t in _completed(tasks))

    elif criteria_type == CriteriaType.COMPLETED_TODAY:
        today = local_day(now, tz)
        return sum(1 for t in _completed(tasks) if local_day(t.completed_at, tz) == today) >= criteria.value

    elif criteria_type == CriteriaType.ALL_CREATED_TODAY_COMPLETED:
        # Re-evaluated on every call; adding a task today can make this false again
        today = local_day(now, tz)
        created_today = [t for t in tasks if local_day(t.created_at, tz) == today]
        return len(created_today) > 0 and all(t.completed for t in created_today)

    logger.warning(f"Unknown achievement criteria type: {criteria_type}")
    return False


def get_achievement_progress(
    definition: AchievementDefinition,
    tasks: Sequence[Task],
    progress: Progress,
    *,
    now: datetime
) -> Dict[str, object]:
    """
    Calculate progress toward an achievement

    Returns:
        {
            'current': int,
            'required': int,
            'percentage': int,
            'description': str
        }
    """
    criteria = definition.criteria
    criteria_type = criteria.type
    required = criteria.value

    if criteria_type == CriteriaType.COMPLETION_COUNT:
        current = _count_completed(tasks)
    elif criteria_type == CriteriaType.STREAK:
        current = progress.current_streak
    elif criteria_type == CriteriaType.PRIORITY_COUNT:
        current = _count_completed(tasks, priority=criteria.category)
    elif criteria_type == CriteriaType.CATEGORY_COUNT:
        current = _count_completed(tasks, category=criteria.category)
    else:
        # One-off conditions are either met or not
        required = 1
        current = 1 if is_satisfied(criteria, tasks, progress, now=now) else 0

    current = min(current, required)
    percentage = min(100, int(current / required * 100)) if required > 0 else 0

    return {
        "current": current,
        "required": required,
        "percentage": percentage,
        "description": f"{current}/{required}",
    }


def get_locked_achievements(
    tasks: Sequence[Task],
    progress: Progress,
    *,
    now: datetime
) -> List[Dict[str, object]]:
    """
    Locked achievements with progress, closest to completion first

    Returns:
        List of {'id', 'title', 'description', 'icon', 'points', 'rarity', 'progress'}
    """
    unlocked_ids = progress.achievement_ids
    locked = []

    for definition in ACHIEVEMENT_CATALOG:
        if definition.id in unlocked_ids:
            continue
        locked.append({
            "id": definition.id,
            "title": definition.title,
            "description": definition.description,
            "icon": definition.icon,
            "points": definition.points,
            "rarity": definition.rarity.value,
            "progress": get_achievement_progress(definition, tasks, progress, now=now),
        })

    # Stable sort keeps catalog order among equals
    locked.sort(key=lambda x: x["progress"]["percentage"], reverse=True)
    return locked


# ============================================
# Helper Functions for Achievement Criteria
# ============================================

def _completed(tasks: Iterable[Task]) -> List[Task]:
    return [t for t in tasks if t.completed and t.completed_at is not None]


def _count_completed(
    tasks: Iterable[Task],
    priority: Optional[str] = None,
    category: Optional[str] = None
) -> int:
    """Count completed tasks, optionally restricted to a priority or category"""
    count = 0
    for task in tasks:
        if not task.completed:
            continue
        if priority is not None and task.priority != Priority(priority):
            continue
        if category is not None and task.category != category:
            continue
        count += 1
    return count
