"""Task models"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Priority(str, Enum):
    """Task priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """A tracked task

    completed_at is set if and only if completed is true.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: str = "Personal"
    points: int = Field(default=10, ge=0)
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")

    @model_validator(mode="after")
    def check_completion_timestamp(self) -> "Task":
        """Keep completed and completed_at in step"""
        if self.completed and self.completed_at is None:
            raise ValueError("completed task must have completed_at")
        if not self.completed and self.completed_at is not None:
            raise ValueError("incomplete task must not have completed_at")
        return self

    def mark_completed(self, at: datetime) -> "Task":
        """Return a completed copy of this task"""
        return self.model_validate({**self.model_dump(), "completed": True, "completed_at": at})

    def mark_incomplete(self) -> "Task":
        """Return an incomplete copy of this task"""
        return self.model_validate({**self.model_dump(), "completed": False, "completed_at": None})
