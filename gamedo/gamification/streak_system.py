"""
Daily Streak Tracking System

A streak is the number of consecutive calendar days with at least one
completed task. Streaks are derived from the task history on demand; the
only persisted hint is Progress.last_completion_date, used to keep a streak
alive on a day that has no completions yet.

Rules:
- Several completions on one day count once
- A run continues across a gap of exactly one day, any other gap restarts it
- Current streak: the run ending today, or the run ending yesterday while the
  last recorded completion was yesterday (grace period); otherwise 0
- Longest streak never drops below the current streak
"""

from datetime import date, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from gamedo.models.progress import StreakInfo
from gamedo.models.task import Task
from gamedo.utils.datetime_helpers import days_between, local_day, parse_date_string

logger = logging.getLogger(__name__)

# Streak day -> bonus shown by milestone displays
STREAK_MILESTONES: Dict[int, int] = {
    3: 25,
    7: 50,
    14: 100,
    30: 200,
    60: 400,
    100: 1000,
}


def completion_days(tasks: Iterable[Task], tz: Optional[tzinfo] = None) -> List[date]:
    """Distinct calendar days with a completed task, ascending"""
    days = {
        local_day(task.completed_at, tz)
        for task in tasks
        if task.completed and task.completed_at is not None
    }
    return sorted(days)


def _runs(days: List[date]) -> List[Tuple[date, int]]:
    """Consecutive-day runs as (last day, length), in order"""
    runs: List[Tuple[date, int]] = []
    run_length = 0
    previous: Optional[date] = None

    for day in days:
        if previous is not None and days_between(previous, day) == 1:
            run_length += 1
        else:
            if previous is not None:
                runs.append((previous, run_length))
            run_length = 1
        previous = day

    if previous is not None:
        runs.append((previous, run_length))

    return runs


def compute_streak(
    tasks: Iterable[Task],
    last_completion_date: Optional[str] = None,
    *,
    today: date,
    tz: Optional[tzinfo] = None
) -> StreakInfo:
    """
    Derive current and longest streak from the task history

    Args:
        tasks: Full task collection (incomplete tasks are ignored)
        last_completion_date: Progress.last_completion_date day marker
        today: Current calendar day from the injected clock
        tz: Timezone completion timestamps are bucketed in

    Returns:
        StreakInfo with current_streak, longest_streak and the sorted
        distinct completion days
    """
    days = completion_days(tasks, tz)
    if not days:
        return StreakInfo()

    runs = _runs(days)
    longest = max(length for _, length in runs)
    last_day, last_run = runs[-1]

    yesterday = today - timedelta(days=1)
    current = 0

    if last_day == today:
        current = last_run
    elif last_day == yesterday and parse_date_string(last_completion_date) == yesterday:
        # Grace period: the user still has today to extend the run
        current = last_run

    return StreakInfo(
        current_streak=current,
        longest_streak=max(longest, current),
        history=tuple(days),
    )


def get_streak_milestone_reward(streak: int) -> int:
    """Bonus attached to a streak milestone, 0 when streak is not one"""
    return STREAK_MILESTONES.get(streak, 0)


def next_streak_milestone(current_streak: int) -> Optional[int]:
    """Smallest milestone above current_streak, None past the last one"""
    for days in sorted(STREAK_MILESTONES):
        if days > current_streak:
            return days
    return None
