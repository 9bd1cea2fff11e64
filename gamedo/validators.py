"""
Centralized Pydantic Input Validation Layer

Task input is validated here, before it reaches the progression engine. The
engine assumes validated tasks and does not re-check them.

Validation Categories:
1. Task Input - title/description length, known priority, point range
2. Task Creation - builds a Task with a fresh id and creation timestamp
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from gamedo.exceptions import ValidationError
from gamedo.models.task import Priority, Task

logger = logging.getLogger(__name__)


# ============================================================================
# TASK INPUT VALIDATION
# ============================================================================

class TaskInput(BaseModel):
    """
    Validate user-supplied task fields

    Constraints:
    - Title: 1-200 characters, whitespace trimmed
    - Description: optional, max 1000 characters
    - Priority: low, medium or high
    - Category: non-empty
    - Points: 0-1000
    """
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    priority: Priority = Priority.MEDIUM
    category: str = Field(default="Personal", min_length=1, max_length=50)
    points: int = Field(default=10, ge=0, le=1000)

    @field_validator('title', 'category')
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Trim whitespace and reject blank values"""
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("cannot be only whitespace")
        return trimmed

    @field_validator('description')
    @classmethod
    def empty_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        trimmed = v.strip()
        return trimmed or None


# ============================================================================
# TASK CREATION
# ============================================================================

def validate_task_input(data: dict, operation: str = "validate_task_input") -> TaskInput:
    """
    Validate raw task fields

    Raises:
        ValidationError: Describing the first invalid field
    """
    try:
        return TaskInput(**data)
    except PydanticValidationError as e:
        first_error = e.errors()[0]
        loc = first_error.get('loc') or ('input',)
        field = str(loc[0])
        raise ValidationError(
            message=first_error.get('msg', 'Invalid value'),
            field=field,
            value=data.get(field),
            operation=operation,
            cause=e
        )


def create_task(data: dict, *, now: datetime, task_id: Optional[str] = None) -> Task:
    """
    Validate raw task fields and build a new, incomplete Task

    Args:
        data: Raw fields (title, description, priority, category, points)
        now: Creation timestamp from the injected clock
        task_id: Explicit id; a random one is generated when omitted

    Returns:
        New Task

    Raises:
        ValidationError: If any field is invalid
    """
    task_input = validate_task_input(data, operation="create_task")

    task = Task(
        id=task_id or uuid4().hex,
        title=task_input.title,
        description=task_input.description,
        priority=task_input.priority,
        category=task_input.category,
        points=task_input.points,
        completed=False,
        created_at=now,
    )
    logger.debug(f"Created task {task.id} ({task.priority.value}, {task.points} pts)")
    return task


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def format_validation_error(e: Exception) -> str:
    """
    Format a validation error for user-friendly display

    Args:
        e: ValidationError from gamedo or Pydantic

    Returns:
        User-friendly error message with emoji
    """
    if isinstance(e, ValidationError):
        return f"❌ {e.user_message}"

    if not isinstance(e, PydanticValidationError):
        return f"❌ Error: {str(e)}"

    errors = e.errors()
    if not errors:
        return "❌ Validation failed"

    # Get first error for simplicity
    first_error = errors[0]
    field = first_error.get('loc', ['input'])[0]
    msg = first_error.get('msg', 'Invalid value')

    if isinstance(field, str):
        field_name = field.replace('_', ' ').title()
    else:
        field_name = 'Input'

    return f"❌ Invalid {field_name}: {msg}"
