"""
Pydantic models for members, their profiles and search results.

Registration fields are optional at the schema level; ``UserService``
checks for the required ones so that a missing and an empty value are
reported with the same message.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, validator

from .common import check_service_ids
from .service import ServiceRead


class UserRegister(BaseModel):
    """Schema for registering a member."""

    name: Optional[str] = Field(None, examples=["Jana Nováková"])
    email: Optional[str] = Field(None, examples=["jana@example.com"])
    password: Optional[str] = Field(None, examples=["tajneheslo"])
    city: Optional[str] = Field(None, examples=["Brno"])
    bio: Optional[str] = None
    avatar: Optional[str] = Field(None, examples=["avatar3"])
    services_offered: Optional[List[int]] = Field(None, alias="servicesOffered")
    services_needed: Optional[List[int]] = Field(None, alias="servicesNeeded")

    model_config = {"populate_by_name": True}

    @validator("services_offered", "services_needed")
    def validate_ids(cls, v):
        return check_service_ids(v)


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    """A member's own profile, including resolved service lists."""

    id: int
    name: str
    email: str
    city: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[str] = None
    services_offered: List[ServiceRead] = Field(default_factory=list, alias="servicesOffered")
    services_needed: List[ServiceRead] = Field(default_factory=list, alias="servicesNeeded")

    model_config = {"populate_by_name": True}


class AuthResponse(BaseModel):
    """Returned by registration and login."""

    user: UserRead
    token: str


class ServicesUpdate(BaseModel):
    """Full replacement of both service relations.

    An omitted list is treated like an empty one.
    """

    services_offered: Optional[List[int]] = Field(None, alias="servicesOffered")
    services_needed: Optional[List[int]] = Field(None, alias="servicesNeeded")

    model_config = {"populate_by_name": True}

    @validator("services_offered", "services_needed")
    def validate_ids(cls, v):
        return check_service_ids(v)


class CityUpdate(BaseModel):
    city: Optional[str] = None


class AvatarUpdate(BaseModel):
    avatar: Optional[str] = None


class MatchRead(BaseModel):
    """A same‑city member who offers something the requester needs.

    ``services_offered`` holds only the overlap with the requester's
    needed services, not everything the candidate offers.
    """

    id: int
    name: str
    email: str
    city: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    services_offered: List[ServiceRead] = Field(default_factory=list, alias="servicesOffered")

    model_config = {"populate_by_name": True}
