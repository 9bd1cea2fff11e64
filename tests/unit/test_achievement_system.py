"""Unit tests for Achievement System (gamedo/gamification/achievement_system.py)"""
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from gamedo.gamification.achievement_system import (
    ACHIEVEMENT_CATALOG,
    check_for_new_achievements,
    get_achievement_progress,
    get_definition,
    get_locked_achievements,
    is_satisfied,
)
from gamedo.models.achievement import AchievementRecord, Rarity
from gamedo.models.progress import Progress
from gamedo.models.task import Priority
from tests.factories import FIXED_NOW, build_task, completed_on_days


def unlocked(*ids):
    """Achievement records for already-held ids"""
    records = []
    for achievement_id in ids:
        definition = get_definition(achievement_id)
        records.append(AchievementRecord(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            icon=definition.icon,
            points=definition.points,
            category=definition.category,
            rarity=definition.rarity,
            unlocked_at=FIXED_NOW - timedelta(days=30),
        ))
    return tuple(records)


def new_ids(tasks, progress=None, now=FIXED_NOW):
    progress = progress or Progress()
    return [a.id for a in check_for_new_achievements(tasks, progress, progress.achievements, now=now)]


# ============================================================================
# Catalog Tests
# ============================================================================

def test_catalog_ids_are_unique():
    ids = [d.id for d in ACHIEVEMENT_CATALOG]

    assert len(ids) == len(set(ids))


def test_catalog_point_rewards():
    assert get_definition("first-task").points == 10
    assert get_definition("streak-7").points == 50
    assert get_definition("task-500").points == 1000
    assert get_definition("perfectionist").rarity == Rarity.EPIC


def test_get_definition_unknown_id():
    assert get_definition("does-not-exist") is None


# ============================================================================
# Unlock Tests
# ============================================================================

def test_no_achievements_without_completions():
    tasks = [build_task("open")]

    assert new_ids(tasks) == []


def test_first_completion_unlocks_first_task_and_first_day():
    tasks = completed_on_days([0])

    assert new_ids(tasks) == ["first-task", "first-day"]


def test_new_achievements_snapshot_definition():
    records = check_for_new_achievements(completed_on_days([0]), Progress(), (), now=FIXED_NOW)

    first = records[0]
    assert first.title == "Getting Started"
    assert first.points == 10
    assert first.unlocked_at == FIXED_NOW


def test_already_unlocked_achievements_are_skipped():
    tasks = completed_on_days([0])
    progress = Progress(achievements=unlocked("first-task", "first-day"))

    assert new_ids(tasks, progress) == []


def test_first_day_requires_completion_today():
    """Completion yesterday still unlocks first-task but not first-day"""
    tasks = completed_on_days([1])

    assert new_ids(tasks) == ["first-task"]


def test_tenth_completion_unlocks_task_10():
    progress = Progress(achievements=unlocked("first-task", "first-day"))

    assert new_ids(completed_on_days([0] * 9), progress) == []
    assert new_ids(completed_on_days([0] * 10), progress) == ["task-10"]


def test_streak_achievements_use_progress_streak():
    tasks = completed_on_days([0])
    progress = Progress(current_streak=7, achievements=unlocked("first-task", "first-day"))

    assert new_ids(tasks, progress) == ["streak-3", "streak-7"]


def test_high_priority_count():
    tasks = completed_on_days([1] * 5, priority=Priority.HIGH)
    progress = Progress(achievements=unlocked("first-task"))

    assert new_ids(tasks, progress) == ["high-priority-5"]


def test_priority_count_ignores_other_priorities():
    tasks = completed_on_days([1] * 4, priority=Priority.HIGH) + completed_on_days([1] * 3, priority=Priority.LOW)
    progress = Progress(achievements=unlocked("first-task"))

    assert new_ids(tasks, progress) == []


def test_category_count_unlocks_specialist():
    tasks = completed_on_days([1] * 20, category="Work")
    progress = Progress(achievements=unlocked("first-task", "task-10"))

    assert new_ids(tasks, progress) == ["work-specialist"]


def test_early_bird_before_eight():
    tasks = [build_task("early", completed_at=datetime(2026, 10, 18, 7, 59, tzinfo=timezone.utc))]
    progress = Progress(achievements=unlocked("first-task"))

    assert new_ids(tasks, progress) == ["early-bird"]


def test_early_bird_not_at_eight():
    tasks = [build_task("eight", completed_at=datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc))]
    progress = Progress(achievements=unlocked("first-task"))

    assert new_ids(tasks, progress) == []


def test_night_owl_from_ten_pm():
    tasks = [build_task("late", completed_at=datetime(2026, 10, 18, 22, 0, tzinfo=timezone.utc))]
    progress = Progress(achievements=unlocked("first-task"))

    assert new_ids(tasks, progress) == ["night-owl"]


def test_time_of_day_uses_clock_timezone():
    """06:30 UTC is 08:30 in Berlin (CEST), so no early bird there"""
    tasks = [build_task("t", completed_at=datetime(2026, 10, 18, 6, 30, tzinfo=timezone.utc))]
    progress = Progress(achievements=unlocked("first-task"))
    berlin_now = FIXED_NOW.astimezone(ZoneInfo("Europe/Berlin"))

    assert new_ids(tasks, progress, now=FIXED_NOW) == ["early-bird"]
    assert new_ids(tasks, progress, now=berlin_now) == []


# ============================================================================
# Perfectionist Tests
# ============================================================================

def test_perfectionist_when_all_tasks_created_today_are_done():
    created = FIXED_NOW - timedelta(hours=2)
    tasks = [
        build_task("a", created_at=created, completed_at=FIXED_NOW),
        build_task("b", created_at=created, completed_at=FIXED_NOW),
    ]
    progress = Progress(achievements=unlocked("first-task", "first-day"))

    assert new_ids(tasks, progress) == ["perfectionist"]


def test_perfectionist_is_not_monotonic():
    """Adding an open task created today makes the condition false again"""
    created = FIXED_NOW - timedelta(hours=2)
    done = build_task("a", created_at=created, completed_at=FIXED_NOW)
    definition = get_definition("perfectionist")

    assert is_satisfied(definition.criteria, [done], Progress(), now=FIXED_NOW)

    tasks = [done, build_task("b", created_at=created)]
    assert not is_satisfied(definition.criteria, tasks, Progress(), now=FIXED_NOW)


def test_perfectionist_needs_tasks_created_today():
    definition = get_definition("perfectionist")

    assert not is_satisfied(definition.criteria, completed_on_days([0]), Progress(), now=FIXED_NOW)


# ============================================================================
# Progress Display Tests
# ============================================================================

def test_get_achievement_progress_counts():
    progress_info = get_achievement_progress(
        get_definition("task-10"), completed_on_days([1] * 4), Progress(), now=FIXED_NOW
    )

    assert progress_info == {
        "current": 4,
        "required": 10,
        "percentage": 40,
        "description": "4/10",
    }


def test_get_achievement_progress_caps_at_required():
    progress_info = get_achievement_progress(
        get_definition("streak-3"), [], Progress(current_streak=12), now=FIXED_NOW
    )

    assert progress_info["current"] == 3
    assert progress_info["percentage"] == 100


def test_get_achievement_progress_one_off_condition():
    progress_info = get_achievement_progress(
        get_definition("night-owl"), completed_on_days([0]), Progress(), now=FIXED_NOW
    )

    assert progress_info["required"] == 1
    assert progress_info["current"] == 0


def test_get_locked_achievements_excludes_unlocked_and_sorts():
    tasks = completed_on_days([1] * 5)
    progress = Progress(current_streak=1, achievements=unlocked("first-task"))

    locked = get_locked_achievements(tasks, progress, now=FIXED_NOW)
    ids = [entry["id"] for entry in locked]
    percentages = [entry["progress"]["percentage"] for entry in locked]

    assert "first-task" not in ids
    assert len(locked) == len(ACHIEVEMENT_CATALOG) - 1
    assert percentages == sorted(percentages, reverse=True)
