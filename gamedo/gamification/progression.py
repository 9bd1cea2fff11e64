"""
Progression Orchestrator

Applies one task transition to the progress record:

Completion (incomplete -> complete):
1. XP for the task
2. Provisional total XP and level
3. Streak recomputed from the updated history; last completion set to today
4. Achievements evaluated against the post-update snapshot
5. Achievement points added, level re-resolved from the final total
6. level_up compared against the level before the transition

Revert (complete -> incomplete) awards and removes nothing; it moves the
last completion date back to the latest remaining completion day and
recomputes the streak from the remaining history.

Functions here never mutate their inputs and never perform I/O. Callers must
serialize transitions against one progress record.
"""

from datetime import datetime
from typing import List, Sequence, Tuple
import logging

from gamedo.exceptions import InvalidTransitionError, TaskNotFoundError
from gamedo.gamification.achievement_system import check_for_new_achievements
from gamedo.gamification.streak_system import completion_days, compute_streak, get_streak_milestone_reward
from gamedo.gamification.xp_system import level_for_xp, xp_for_task
from gamedo.models.progress import Progress, TransitionResult
from gamedo.models.task import Task
from gamedo.utils.datetime_helpers import local_day, to_date_string

logger = logging.getLogger(__name__)


def _find_task(tasks: Sequence[Task], task_id: str) -> int:
    for index, task in enumerate(tasks):
        if task.id == task_id:
            return index
    raise TaskNotFoundError(task_id, operation="find_task")


def apply_task_completion(
    tasks: Sequence[Task],
    task_id: str,
    progress: Progress,
    *,
    now: datetime
) -> Tuple[List[Task], Progress, TransitionResult]:
    """
    Complete a task and fold the rewards into a new progress snapshot

    Args:
        tasks: Current task collection (the task must be incomplete)
        task_id: Task being completed
        progress: Progress before the transition
        now: Current time from the injected clock

    Returns:
        (updated tasks, new progress, transition result)

    Raises:
        TaskNotFoundError: task_id is not in tasks
        InvalidTransitionError: task is already completed
    """
    index = _find_task(tasks, task_id)
    task = tasks[index]
    if task.completed:
        raise InvalidTransitionError(task_id, "task is already completed", operation="apply_task_completion")

    tz = now.tzinfo
    today = local_day(now, tz)

    # 1-2. Task XP and provisional level
    xp_gained = xp_for_task(task)
    provisional_xp = progress.total_xp + xp_gained
    provisional_level = level_for_xp(provisional_xp)

    # 3. Streak from the updated history
    updated_tasks = list(tasks)
    updated_tasks[index] = task.mark_completed(now)
    streak = compute_streak(updated_tasks, progress.last_completion_date, today=today, tz=tz)

    provisional = progress.model_copy(update={
        "total_xp": provisional_xp,
        "level": provisional_level,
        "current_streak": streak.current_streak,
        "longest_streak": max(progress.longest_streak, streak.longest_streak),
        "last_completion_date": to_date_string(today),
    })

    # 4. Achievements see the post-update streak/XP/level
    new_achievements = check_for_new_achievements(
        updated_tasks, provisional, progress.achievements, now=now
    )

    # 5. Achievement bonus XP can push the level further
    achievement_xp = sum(a.points for a in new_achievements)
    final_xp = provisional_xp + achievement_xp
    final_level = level_for_xp(final_xp)

    new_progress = provisional.model_copy(update={
        "total_xp": final_xp,
        "level": final_level,
        "achievements": progress.achievements + tuple(new_achievements),
    })

    # 6. Compare against the pre-transition level
    level_up = final_level > progress.level

    # A milestone counts once: the recorded best must not have reached it yet
    milestone = None
    if streak.current_streak > progress.longest_streak and get_streak_milestone_reward(streak.current_streak):
        milestone = streak.current_streak

    result = TransitionResult(
        xp_gained=xp_gained,
        level_up=level_up,
        new_level=final_level,
        previous_level=progress.level,
        new_achievements=tuple(new_achievements),
        achievement_xp=achievement_xp,
        streak_milestone_reached=milestone,
    )

    logger.info(
        f"Completed task {task_id}: +{xp_gained} XP, +{achievement_xp} achievement XP. "
        f"Total: {final_xp} XP, Level: {final_level}, Streak: {streak.current_streak}"
    )

    if level_up:
        logger.info(f"Leveled up from {progress.level} to {final_level}!")

    return updated_tasks, new_progress, result


def revert_task_completion(
    tasks: Sequence[Task],
    task_id: str,
    progress: Progress,
    *,
    now: datetime
) -> Tuple[List[Task], Progress]:
    """
    Mark a completed task incomplete again

    XP and achievements are kept. last_completion_date moves to the latest
    remaining completion day and the streak is recomputed without the task;
    longest_streak keeps its recorded maximum. Level is re-resolved from XP.

    Raises:
        TaskNotFoundError: task_id is not in tasks
        InvalidTransitionError: task is not completed
    """
    index = _find_task(tasks, task_id)
    task = tasks[index]
    if not task.completed:
        raise InvalidTransitionError(task_id, "task is not completed", operation="revert_task_completion")

    tz = now.tzinfo
    updated_tasks = list(tasks)
    updated_tasks[index] = task.mark_incomplete()

    remaining_days = completion_days(updated_tasks, tz)
    last_completion_date = to_date_string(remaining_days[-1]) if remaining_days else None

    streak = compute_streak(
        updated_tasks, last_completion_date, today=local_day(now, tz), tz=tz
    )

    new_progress = progress.model_copy(update={
        "last_completion_date": last_completion_date,
        "level": level_for_xp(progress.total_xp),
        "current_streak": streak.current_streak,
        "longest_streak": max(progress.longest_streak, streak.longest_streak),
    })

    logger.info(f"Reverted completion of task {task_id}. Streak: {streak.current_streak}")

    return updated_tasks, new_progress


def toggle_task_completion(
    tasks: Sequence[Task],
    task_id: str,
    progress: Progress,
    *,
    now: datetime
) -> Tuple[List[Task], Progress, TransitionResult]:
    """
    Flip a task's completed flag

    Completing goes through apply_task_completion(); un-completing returns an
    empty result carrying the unchanged level.
    """
    task = tasks[_find_task(tasks, task_id)]

    if not task.completed:
        return apply_task_completion(tasks, task_id, progress, now=now)

    updated_tasks, new_progress = revert_task_completion(tasks, task_id, progress, now=now)
    result = TransitionResult(
        new_level=new_progress.level,
        previous_level=progress.level,
    )
    return updated_tasks, new_progress, result
