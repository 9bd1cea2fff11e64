"""Local key-value persistence for tasks and progress

Each key is stored as one JSON file under the data directory. Datetimes are
written as ISO 8601 and restored exactly on load.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter

from gamedo.config import DATA_PATH
from gamedo.exceptions import wrap_storage_exception
from gamedo.models.progress import Progress
from gamedo.models.task import Task

logger = logging.getLogger(__name__)

TASKS_KEY = "gamedo-tasks"
PROGRESS_KEY = "gamedo-progress"

_task_list = TypeAdapter(List[Task])


class LocalStore:
    """Persist the task collection and progress record as JSON files"""

    def __init__(self, data_path: Path = DATA_PATH):
        self.data_path = Path(data_path)

    def _path(self, key: str) -> Path:
        return self.data_path / f"{key}.json"

    async def _write(self, key: str, payload: bytes, operation: str) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_bytes(payload)
            tmp.replace(path)
        except OSError as e:
            raise wrap_storage_exception(e, operation=operation, key=key)
        logger.debug(f"Wrote {len(payload)} bytes to {path}")

    async def _read(self, key: str, operation: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise wrap_storage_exception(e, operation=operation, key=key)

    async def save_tasks(self, tasks: List[Task]) -> None:
        """Save the full task collection"""
        await self._write(TASKS_KEY, _task_list.dump_json(list(tasks)), "save_tasks")
        logger.info(f"Saved {len(tasks)} tasks")

    async def load_tasks(self) -> List[Task]:
        """Load the task collection; missing data yields an empty list"""
        raw = await self._read(TASKS_KEY, "load_tasks")
        if raw is None:
            return []
        try:
            return _task_list.validate_json(raw)
        except ValueError as e:
            raise wrap_storage_exception(e, operation="load_tasks", key=TASKS_KEY)

    async def save_progress(self, progress: Progress) -> None:
        """Save the progress record"""
        await self._write(PROGRESS_KEY, progress.model_dump_json().encode("utf-8"), "save_progress")
        logger.info(f"Saved progress (level {progress.level}, {progress.total_xp} XP)")

    async def load_progress(self) -> Optional[Progress]:
        """Load the progress record; None when nothing was saved yet"""
        raw = await self._read(PROGRESS_KEY, "load_progress")
        if raw is None:
            return None
        try:
            return Progress.model_validate_json(raw)
        except ValueError as e:
            raise wrap_storage_exception(e, operation="load_progress", key=PROGRESS_KEY)

    async def clear_all(self) -> None:
        """Remove all stored keys"""
        for key in (TASKS_KEY, PROGRESS_KEY):
            try:
                self._path(key).unlink(missing_ok=True)
            except OSError as e:
                raise wrap_storage_exception(e, operation="clear_all", key=key)
        logger.info("Cleared all stored data")

    async def get_storage_info(self) -> Dict[str, Any]:
        """Byte sizes of the stored keys"""
        sizes = {}
        for name, key in (("tasks_size", TASKS_KEY), ("progress_size", PROGRESS_KEY)):
            path = self._path(key)
            sizes[name] = path.stat().st_size if path.exists() else 0
        sizes["total_size"] = sizes["tasks_size"] + sizes["progress_size"]
        return sizes
