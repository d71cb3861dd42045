"""
Small payloads and field checks shared by several routers.
"""

from typing import List, Optional

from pydantic import BaseModel

# Largest value an SQLite INTEGER column can hold.  Bigger ids cannot
# be bound as query parameters at all.
SQLITE_MAX_INTEGER = 2**63 - 1


def check_service_ids(service_ids: Optional[List[int]]) -> Optional[List[int]]:
    if service_ids is None:
        return service_ids
    if any(service_id <= 0 or service_id > SQLITE_MAX_INTEGER for service_id in service_ids):
        raise ValueError("Service ids must be positive integers")
    return service_ids


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. ``{"message": "City updated successfully"}``."""

    message: str
