"""Integration tests for GameService against a real LocalStore"""
import asyncio
import pytest

from gamedo.exceptions import StorageError, TaskNotFoundError, ValidationError
from gamedo.services.game_service import GameService
from gamedo.storage.local_store import PROGRESS_KEY, LocalStore
from tests.factories import FIXED_NOW


class FailingProgressStore(LocalStore):
    """LocalStore whose progress writes can be switched to fail"""

    fail_progress = False

    async def save_progress(self, progress):
        if self.fail_progress:
            raise StorageError(message="disk full", key=PROGRESS_KEY, operation="save_progress")
        await super().save_progress(progress)


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "data")


@pytest.fixture
def service(store):
    return GameService(store, clock=lambda: FIXED_NOW)


# ============================================================================
# Task Lifecycle Tests
# ============================================================================

@pytest.mark.asyncio
async def test_load_empty_store(service):
    await service.load()

    assert service.tasks == []
    assert service.progress.level == 1


@pytest.mark.asyncio
async def test_add_task_persists(service, store):
    task = await service.add_task({"title": "Write tests", "priority": "high"})

    assert task.created_at == FIXED_NOW
    assert await store.load_tasks() == [task]


@pytest.mark.asyncio
async def test_add_invalid_task_raises(service):
    with pytest.raises(ValidationError):
        await service.add_task({"title": ""})

    assert service.tasks == []


@pytest.mark.asyncio
async def test_toggle_awards_xp_and_survives_reload(service, store):
    task = await service.add_task({"title": "Stretch", "priority": "medium", "points": 10})

    result = await service.toggle_task(task.id)

    assert result.xp_gained == 15
    assert [a.id for a in result.new_achievements] == ["first-task", "first-day"]

    reloaded = GameService(store, clock=lambda: FIXED_NOW)
    await reloaded.load()
    assert reloaded.progress.total_xp == 40
    assert reloaded.tasks[0].completed
    assert reloaded.progress.achievement_ids == {"first-task", "first-day"}


@pytest.mark.asyncio
async def test_toggle_twice_keeps_xp(service):
    task = await service.add_task({"title": "Read"})
    await service.toggle_task(task.id)
    xp = service.progress.total_xp

    result = await service.toggle_task(task.id)

    assert result.xp_gained == 0
    assert not service.tasks[0].completed
    assert service.progress.total_xp == xp


@pytest.mark.asyncio
async def test_concurrent_toggles_are_serialized(service):
    first = await service.add_task({"title": "A", "priority": "low"})
    second = await service.add_task({"title": "B", "priority": "low"})

    results = await asyncio.gather(service.toggle_task(first.id), service.toggle_task(second.id))

    gained = sum(r.xp_gained + r.achievement_xp for r in results)
    assert service.progress.total_xp == gained
    assert all(t.completed for t in service.tasks)
    assert service.completed_count() == 2


@pytest.mark.asyncio
async def test_update_task_fields(service):
    task = await service.add_task({"title": "Old", "category": "Work"})

    updated = await service.update_task(task.id, {"title": " New ", "points": 30, "completed": True})

    assert updated.title == "New"
    assert updated.points == 30
    assert updated.category == "Work"
    assert updated.completed is False
    assert service.tasks == [updated]


@pytest.mark.asyncio
async def test_update_task_invalid_field(service):
    task = await service.add_task({"title": "Old"})

    with pytest.raises(ValidationError) as exc_info:
        await service.update_task(task.id, {"priority": "urgent"})

    assert exc_info.value.field == "priority"
    assert service.tasks[0].priority == task.priority


@pytest.mark.asyncio
async def test_delete_task_keeps_progress(service):
    task = await service.add_task({"title": "Gone"})
    await service.toggle_task(task.id)
    progress = service.progress

    await service.delete_task(task.id)

    assert service.tasks == []
    assert service.progress == progress


@pytest.mark.asyncio
async def test_unknown_task_operations_raise(service):
    with pytest.raises(TaskNotFoundError):
        await service.delete_task("missing")
    with pytest.raises(TaskNotFoundError):
        await service.toggle_task("missing")
    with pytest.raises(TaskNotFoundError):
        await service.update_task("missing", {"title": "x"})


@pytest.mark.asyncio
async def test_failed_save_leaves_state_unchanged(tmp_path):
    store = FailingProgressStore(tmp_path / "data")
    service = GameService(store, clock=lambda: FIXED_NOW)
    task = await service.add_task({"title": "Unsaved"})
    store.fail_progress = True

    with pytest.raises(StorageError):
        await service.toggle_task(task.id)

    assert service.tasks == [task]
    assert not service.tasks[0].completed
    assert service.progress.total_xp == 0
    assert service.progress.achievements == ()


# ============================================================================
# Customization Tests
# ============================================================================

@pytest.mark.asyncio
async def test_set_locked_theme_raises(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.set_theme("champion")

    assert exc_info.value.field == "theme"
    assert service.progress.theme == "default"


@pytest.mark.asyncio
async def test_set_unlocked_theme(service, store):
    progress = await service.set_theme("default")

    assert progress.theme == "default"
    assert (await store.load_progress()).theme == "default"


@pytest.mark.asyncio
async def test_set_avatar(service):
    with pytest.raises(ValidationError):
        await service.set_avatar("rocket")

    progress = await service.set_avatar("gamer")
    assert progress.avatar == "gamer"


# ============================================================================
# Backup & Reset Tests
# ============================================================================

@pytest.mark.asyncio
async def test_export_and_import_restore_state(service, store, tmp_path):
    task = await service.add_task({"title": "Backup me"})
    await service.toggle_task(task.id)
    path = await service.export_data(tmp_path / "backups")
    snapshot_tasks, snapshot_progress = service.tasks, service.progress

    await service.clear_all_data()
    assert service.tasks == []

    data = await service.import_data(path)

    assert data.tasks == snapshot_tasks
    assert service.tasks == snapshot_tasks
    assert service.progress == snapshot_progress
    assert await store.load_progress() == snapshot_progress


@pytest.mark.asyncio
async def test_failed_import_keeps_current_state(tmp_path):
    store = FailingProgressStore(tmp_path / "data")
    service = GameService(store, clock=lambda: FIXED_NOW)
    task = await service.add_task({"title": "Backed up"})
    await service.toggle_task(task.id)
    path = await service.export_data(tmp_path / "backups")
    await service.clear_all_data()
    store.fail_progress = True

    with pytest.raises(StorageError):
        await service.import_data(path)

    assert service.tasks == []
    assert service.progress.total_xp == 0


@pytest.mark.asyncio
async def test_clear_all_data_resets_achievements(service, store):
    task = await service.add_task({"title": "Reset"})
    await service.toggle_task(task.id)

    await service.clear_all_data()

    assert service.progress.achievements == ()
    assert await store.load_progress() is None
