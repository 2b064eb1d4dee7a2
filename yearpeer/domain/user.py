"""User domain model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """User data transfer object."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique user ID from database")
    email: str = Field(..., description="Email address, unique per user")
    first_name: str = Field(default="", description="Given name from the identity provider")
    last_name: str = Field(default="", description="Family name from the identity provider")
    picture_url: str | None = Field(default=None, description="Profile picture URL")
    external_id: str | None = Field(default=None, exclude=True, description="Identity provider subject")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last profile refresh timestamp")
