"""Task domain model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Task(BaseModel):
    """Task data transfer object."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique task ID from database")
    user_id: str = Field(..., description="Owner user ID")
    goal_id: str | None = Field(default=None, description="Linked goal ID, cleared when the goal is deleted")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Optional task description")
    date: datetime = Field(..., description="Day the task is planned for (time of day is informational)")
    completed: bool = Field(default=False, description="Whether the task is done")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
