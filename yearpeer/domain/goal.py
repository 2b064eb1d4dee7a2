"""Goal domain model."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from yearpeer.domain.task import Task


class Goal(BaseModel):
    """Goal data transfer object."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique goal ID from database")
    user_id: str = Field(..., description="Owner user ID")
    title: str = Field(..., description="Goal title")
    description: str = Field(default="", description="Free-text goal description")
    start_date: date = Field(..., description="First day of the goal (inclusive)")
    end_date: date = Field(..., description="Last day of the goal (inclusive)")
    color: str = Field(..., description="Hex RGB color, e.g. #1A2B3C")
    impact: int = Field(..., description="Impact rating from 1 to 5")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    tasks: list[Task] = Field(default_factory=list, description="Tasks linked to this goal")
