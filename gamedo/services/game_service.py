"""
GameService - task tracker session logic

Owns the read-modify-write cycle around the pure progression engine:
load tasks/progress from the store, apply one transition, save both back.
Transitions on one service instance are serialized by an asyncio lock so
two completions can never read the same stale progress.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List

from gamedo.exceptions import TaskNotFoundError, ValidationError
from gamedo.gamification.progression import toggle_task_completion
from gamedo.gamification.unlocks import get_available_avatars, is_theme_unlocked
from gamedo.models.progress import Progress, TransitionResult
from gamedo.models.task import Task
from gamedo.storage.export import GameData, export_to_file, import_from_file
from gamedo.storage.local_store import LocalStore
from gamedo.utils.datetime_helpers import now_in_timezone
from gamedo.validators import TaskInput, create_task, validate_task_input

logger = logging.getLogger(__name__)


class GameService:
    """
    Service for the single local user's tasks and progress.

    Responsibilities:
    - Loading and saving state through LocalStore
    - Task creation, edits and deletion
    - Completion toggling through the progression engine
    - Theme/avatar selection gated by unlocks
    - Backup export/import and full reset
    """

    def __init__(self, store: LocalStore, clock: Callable[[], datetime] = now_in_timezone):
        """
        Initialize GameService.

        Args:
            store: Persistence collaborator
            clock: Source of the current time; the only clock the service reads
        """
        self.store = store
        self.clock = clock
        self.tasks: List[Task] = []
        self.progress: Progress = Progress()
        self._lock = asyncio.Lock()
        logger.debug("GameService initialized")

    async def load(self) -> None:
        """Load persisted state, falling back to a fresh progress record"""
        async with self._lock:
            self.tasks = await self.store.load_tasks()
            self.progress = await self.store.load_progress() or Progress()
        logger.info(f"Loaded {len(self.tasks)} tasks, level {self.progress.level}")

    async def _save(self, tasks: List[Task], progress: Progress) -> None:
        """Persist a new state, then adopt it; a failed save leaves memory unchanged"""
        await self.store.save_tasks(tasks)
        await self.store.save_progress(progress)
        self.tasks, self.progress = tasks, progress

    def _index(self, task_id: str) -> int:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        raise TaskNotFoundError(task_id, operation="game_service")

    async def add_task(self, data: Dict[str, Any]) -> Task:
        """Validate input and append a new task"""
        async with self._lock:
            task = create_task(data, now=self.clock())
            await self._save(self.tasks + [task], self.progress)
        return task

    async def update_task(self, task_id: str, updates: Dict[str, Any]) -> Task:
        """
        Edit a task's descriptive fields

        Completion state is changed only through toggle_task().
        """
        async with self._lock:
            index = self._index(task_id)
            current = self.tasks[index]
            merged = {
                "title": current.title,
                "description": current.description,
                "priority": current.priority,
                "category": current.category,
                "points": current.points,
                **{k: v for k, v in updates.items() if k in TaskInput.model_fields},
            }
            validated = validate_task_input(merged, operation="update_task")
            task = current.model_copy(update={
                "title": validated.title,
                "description": validated.description,
                "priority": validated.priority,
                "category": validated.category,
                "points": validated.points,
            })
            await self._save(self.tasks[:index] + [task] + self.tasks[index + 1:], self.progress)
        return task

    async def delete_task(self, task_id: str) -> None:
        """Remove a task; earned XP and achievements are kept"""
        async with self._lock:
            index = self._index(task_id)
            await self._save(self.tasks[:index] + self.tasks[index + 1:], self.progress)
        logger.info(f"Deleted task {task_id}")

    async def toggle_task(self, task_id: str) -> TransitionResult:
        """
        Complete or un-complete a task and persist the outcome.

        Returns:
            TransitionResult for notification/animation consumers
        """
        async with self._lock:
            tasks, progress, result = toggle_task_completion(
                self.tasks, task_id, self.progress, now=self.clock()
            )
            await self._save(tasks, progress)
        return result

    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    async def set_theme(self, theme_id: str) -> Progress:
        """Select a theme the user has unlocked"""
        async with self._lock:
            if not is_theme_unlocked(theme_id, self.progress, self.completed_count()):
                raise ValidationError(
                    message=f"Theme '{theme_id}' is locked or unknown",
                    field="theme",
                    value=theme_id,
                    operation="set_theme"
                )
            progress = self.progress.model_copy(update={"theme": theme_id})
            await self.store.save_progress(progress)
            self.progress = progress
        return self.progress

    async def set_avatar(self, avatar_id: str) -> Progress:
        """Select an avatar unlocked at the current level"""
        async with self._lock:
            available = {a.id for a in get_available_avatars(self.progress.level)}
            if avatar_id not in available:
                raise ValidationError(
                    message=f"Avatar '{avatar_id}' is locked or unknown",
                    field="avatar",
                    value=avatar_id,
                    operation="set_avatar"
                )
            progress = self.progress.model_copy(update={"avatar": avatar_id})
            await self.store.save_progress(progress)
            self.progress = progress
        return self.progress

    async def export_data(self, directory: Path) -> Path:
        """Write a backup of the current state"""
        async with self._lock:
            return await export_to_file(self.tasks, self.progress, directory, now=self.clock())

    async def import_data(self, path: Path) -> GameData:
        """Replace the current state with a backup"""
        async with self._lock:
            data = await import_from_file(path)
            await self._save(list(data.tasks), data.progress)
        logger.info(f"Imported {len(data.tasks)} tasks from {path}")
        return data

    async def clear_all_data(self) -> None:
        """Reset tasks and progress; the only path that removes achievements"""
        async with self._lock:
            await self.store.clear_all()
            self.tasks = []
            self.progress = Progress()
        logger.info("Cleared all data")
