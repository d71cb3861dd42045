"""
Pydantic models for the service catalog.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ServiceRead(BaseModel):
    """A catalog entry as returned to clients."""

    id: int
    name: str = Field(..., examples=["Hlídání dětí"])


class ServiceCreate(BaseModel):
    name: Optional[str] = Field(None, examples=["Pečení"])
