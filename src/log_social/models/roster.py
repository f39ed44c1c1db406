"""
Roster models: client states and user profiles.

userId and clientId always coincide: the log carries one client per user.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class ClientStatus(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class ClientState(BaseModel):
    user_id: str
    client_id: str
    status: ClientStatus
    last_updated: datetime
    last_seen: datetime

    @classmethod
    def for_identity(
        cls, identity: str, status: ClientStatus, last_updated: datetime, last_seen: datetime,
    ) -> "ClientState":
        return cls(
            user_id=identity,
            client_id=identity,
            status=status,
            last_updated=last_updated,
            last_seen=last_seen,
        )


class UserProfile(BaseModel):
    user_id: str
    name: str
    last_updated: datetime
