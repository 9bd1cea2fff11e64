"""Integration tests for JSON file persistence (gamedo/storage/local_store.py)"""
import pytest

from gamedo.exceptions import ImportFormatError, StorageError
from gamedo.gamification.achievement_system import check_for_new_achievements
from gamedo.models.progress import Progress
from gamedo.storage.local_store import PROGRESS_KEY, TASKS_KEY, LocalStore
from tests.factories import FIXED_NOW, build_task, completed_on_days


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "data")


@pytest.mark.asyncio
async def test_load_from_empty_store(store):
    assert await store.load_tasks() == []
    assert await store.load_progress() is None


@pytest.mark.asyncio
async def test_tasks_round_trip_with_timestamps(store):
    tasks = completed_on_days([0, 3]) + [build_task("open")]

    await store.save_tasks(tasks)
    loaded = await store.load_tasks()

    assert loaded == tasks
    assert loaded[0].completed_at == FIXED_NOW


@pytest.mark.asyncio
async def test_progress_round_trip_with_achievements(store):
    tasks = completed_on_days([0])
    records = check_for_new_achievements(tasks, Progress(), (), now=FIXED_NOW)
    progress = Progress(
        level=2,
        total_xp=140,
        current_streak=1,
        longest_streak=4,
        last_completion_date="Mon Oct 19 2026",
        achievements=tuple(records),
        theme="ocean",
    )

    await store.save_progress(progress)

    assert await store.load_progress() == progress


@pytest.mark.asyncio
async def test_save_leaves_no_temp_files(store):
    await store.save_tasks([build_task("t1")])

    files = sorted(p.name for p in store.data_path.iterdir())
    assert files == [f"{TASKS_KEY}.json"]


@pytest.mark.asyncio
async def test_corrupt_tasks_file_raises_import_format_error(store):
    store.data_path.mkdir(parents=True)
    (store.data_path / f"{TASKS_KEY}.json").write_text("{broken", encoding="utf-8")

    with pytest.raises(ImportFormatError) as exc_info:
        await store.load_tasks()

    assert exc_info.value.key == TASKS_KEY


@pytest.mark.asyncio
async def test_invalid_progress_record_raises(store):
    store.data_path.mkdir(parents=True)
    (store.data_path / f"{PROGRESS_KEY}.json").write_text('{"level": 0}', encoding="utf-8")

    with pytest.raises(StorageError):
        await store.load_progress()


@pytest.mark.asyncio
async def test_clear_all(store):
    await store.save_tasks([build_task("t1")])
    await store.save_progress(Progress())

    await store.clear_all()

    assert await store.load_tasks() == []
    assert await store.load_progress() is None


@pytest.mark.asyncio
async def test_storage_info(store):
    empty = await store.get_storage_info()
    assert empty == {"tasks_size": 0, "progress_size": 0, "total_size": 0}

    await store.save_tasks([build_task("t1")])
    await store.save_progress(Progress())
    info = await store.get_storage_info()

    assert info["tasks_size"] > 0
    assert info["progress_size"] > 0
    assert info["total_size"] == info["tasks_size"] + info["progress_size"]
