"""Persistence and backup collaborators (the engine itself performs no I/O)"""
from gamedo.storage.local_store import LocalStore, TASKS_KEY, PROGRESS_KEY
from gamedo.storage.export import GameData, build_export, parse_import, export_to_file, import_from_file

__all__ = [
    "LocalStore",
    "TASKS_KEY",
    "PROGRESS_KEY",
    "GameData",
    "build_export",
    "parse_import",
    "export_to_file",
    "import_from_file",
]
