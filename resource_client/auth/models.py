"""Pydantic models for end-user identity."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """The end user an application is acting for.
    
    Attributes:
        user_id: Unique identifier for the user.
        email: User's email address.
        name: Display name.
    """
    
    user_id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="User email address")
    name: str = Field(..., description="Display name")
    
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class CurrentUserResponse(BaseModel):
    """Body of the gateway's ``/me`` endpoint."""
    
    user: User
