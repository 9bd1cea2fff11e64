"""Backup export and import

A backup document holds {tasks, progress, export_date, version}. Import
rejects documents missing either tasks or progress and restores every
timestamp before handing data back to the engine. Documents written by the
earlier app versions (camelCase keys) are accepted as well.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from gamedo.config import EXPORT_FORMAT_VERSION
from gamedo.exceptions import ImportFormatError, wrap_storage_exception
from gamedo.models.progress import Progress
from gamedo.models.task import Task

logger = logging.getLogger(__name__)


class GameData(BaseModel):
    """Backup document"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tasks: List[Task]
    progress: Progress
    # Older documents carry no export date
    export_date: Optional[datetime] = Field(default=None, alias="exportDate")
    version: str = EXPORT_FORMAT_VERSION


def build_export(tasks: List[Task], progress: Progress, *, now: datetime) -> GameData:
    """Assemble a backup document stamped with now"""
    return GameData(
        tasks=list(tasks),
        progress=progress,
        export_date=now,
        version=EXPORT_FORMAT_VERSION,
    )


def backup_filename(export_date: datetime) -> str:
    return f"gamedo-backup-{export_date.date().isoformat()}.json"


def serialize_export(data: GameData) -> str:
    return data.model_dump_json(indent=2)


def parse_import(text: Union[str, bytes]) -> GameData:
    """
    Parse and validate a backup document

    Raises:
        ImportFormatError: Document is not JSON, lacks tasks/progress, or
            contains malformed records
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportFormatError(
            message=f"Backup is not valid JSON: {e}",
            operation="parse_import",
            cause=e
        )

    if not isinstance(document, dict):
        raise ImportFormatError(message="Backup must be a JSON object", operation="parse_import")
    if document.get("tasks") is None:
        raise ImportFormatError(message="Backup is missing tasks", operation="parse_import")
    if document.get("progress") is None:
        raise ImportFormatError(message="Backup is missing progress", operation="parse_import")

    try:
        data = GameData.model_validate(document)
    except ValueError as e:
        raise wrap_storage_exception(e, operation="parse_import")

    logger.info(f"Parsed backup v{data.version} with {len(data.tasks)} tasks")
    return data


async def export_to_file(
    tasks: List[Task],
    progress: Progress,
    directory: Path,
    *,
    now: datetime
) -> Path:
    """Write a backup document into directory and return its path"""
    data = build_export(tasks, progress, now=now)
    path = Path(directory) / backup_filename(now)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(serialize_export(data), encoding="utf-8")
    except OSError as e:
        raise wrap_storage_exception(e, operation="export_to_file", key=str(path))

    logger.info(f"Exported {len(data.tasks)} tasks to {path}")
    return path


async def import_from_file(path: Path) -> GameData:
    """Read and validate a backup document from disk"""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise wrap_storage_exception(e, operation="import_from_file", key=str(path))
    return parse_import(text)
