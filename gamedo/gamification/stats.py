"""
Task Statistics

Summary figures over the task history: completion rate, per-category counts,
average completions per active day, most productive weekday, today's tasks,
and level progress.
"""

from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from gamedo.gamification.streak_system import completion_days
from gamedo.gamification.xp_system import calculate_level_from_xp
from gamedo.models.progress import Progress
from gamedo.models.task import Task
from gamedo.utils.datetime_helpers import local_day

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class GameStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    tasks_completed: int
    total_tasks: int
    completion_rate: float
    average_tasks_per_day: float
    most_productive_day: Optional[str]
    categories_used: List[str]
    category_counts: Dict[str, int]
    top_category: Optional[str]
    tasks_today: int
    completed_today: int
    level_progress: Dict[str, int]


def calculate_stats(tasks: Sequence[Task], progress: Progress, *, now: datetime) -> GameStats:
    """
    Summarize the task history

    Args:
        tasks: Full task collection
        progress: Current progress record (for level progress)
        now: Current time from the injected clock

    Returns:
        GameStats snapshot
    """
    tz = now.tzinfo
    today = local_day(now, tz)

    completed = [t for t in tasks if t.completed and t.completed_at is not None]
    total = len(tasks)
    completion_rate = round(len(completed) / total * 100, 1) if total else 0.0

    active_days = completion_days(completed, tz)
    average_per_day = round(len(completed) / len(active_days), 2) if active_days else 0.0

    weekday_counts = Counter(local_day(t.completed_at, tz).weekday() for t in completed)
    most_productive_day = None
    if weekday_counts:
        # Ties go to the earlier weekday
        best = max(sorted(weekday_counts), key=lambda d: weekday_counts[d])
        most_productive_day = WEEKDAY_NAMES[best]

    category_counts = Counter(t.category for t in tasks)
    top_category = None
    if category_counts:
        top_category = max(category_counts, key=lambda c: category_counts[c])

    tasks_today = [t for t in tasks if local_day(t.created_at, tz) == today]

    return GameStats(
        tasks_completed=len(completed),
        total_tasks=total,
        completion_rate=completion_rate,
        average_tasks_per_day=average_per_day,
        most_productive_day=most_productive_day,
        categories_used=sorted(category_counts),
        category_counts=dict(category_counts),
        top_category=top_category,
        tasks_today=len(tasks_today),
        completed_today=sum(1 for t in completed if local_day(t.completed_at, tz) == today),
        level_progress=calculate_level_from_xp(progress.total_xp),
    )
