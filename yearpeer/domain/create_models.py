"""Pydantic models for request payloads that create records."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from yearpeer.core.config import constants


def _validate_title(v: str) -> str:
    if not v.strip():
        raise ValueError("Title cannot be empty")
    return v


class GoalCreate(BaseModel):
    """Payload for creating a goal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., max_length=constants.MAX_TITLE_LENGTH, description="Goal title")
    description: str = Field(default="", description="Free-text description")
    start_date: date = Field(..., description="First day of the goal")
    end_date: date = Field(..., description="Last day of the goal")
    color: str = Field(..., pattern=constants.HEX_COLOR_PATTERN, description="Hex RGB color")
    impact: int = Field(..., ge=constants.MIN_IMPACT, le=constants.MAX_IMPACT, description="Impact rating")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject blank titles."""
        return _validate_title(v)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: str | None) -> str:
        """Treat a null description as empty text."""
        return "" if v is None else v

    @model_validator(mode="after")
    def validate_date_order(self) -> "GoalCreate":
        """Validate the goal does not end before it starts."""
        if self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TaskCreate(BaseModel):
    """Payload for creating a task."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., max_length=constants.MAX_TITLE_LENGTH, description="Task title")
    description: str | None = Field(default=None, description="Optional description")
    date: datetime = Field(..., description="Day the task is planned for")
    goal_id: str | None = Field(default=None, description="Optional goal to link the task to")
    completed: bool = Field(default=False, description="Whether the task is done")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject blank titles."""
        return _validate_title(v)

    @field_validator("goal_id", mode="before")
    @classmethod
    def empty_goal_id_to_none(cls, v: str | None) -> str | None:
        """Treat an empty goal reference as no goal."""
        return v or None


class ExternalIdentity(BaseModel):
    """Claims received from the identity provider after a successful sign-in."""

    subject: str | None = Field(default=None, description="Provider-assigned user identifier")
    email: str | None = Field(default=None, description="Verified email address")
    given_name: str | None = Field(default=None, max_length=constants.MAX_NAME_LENGTH)
    family_name: str | None = Field(default=None, max_length=constants.MAX_NAME_LENGTH)
    picture: str | None = Field(default=None, max_length=constants.MAX_PICTURE_URL_LENGTH)
