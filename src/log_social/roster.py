"""
Roster store: presence snapshot of clients believed online.

OFFLINE clients are trimmed rather than kept: the roster is a snapshot of
who is online, not a directory. A user profile exists exactly as long as
its client entry does.
"""

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from log_social.dispatch import EventDispatcher
from log_social.models.events import SocialEvent
from log_social.models.roster import ClientState, ClientStatus, UserProfile


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RosterStore:
    def __init__(self, dispatcher: EventDispatcher, clock: Optional[Callable[[], datetime]] = None):
        self._dispatcher = dispatcher
        self._clock = clock or _utcnow
        self._clients: dict[str, ClientState] = {}
        self._users: dict[str, UserProfile] = {}

    @property
    def clients(self) -> Mapping[str, ClientState]:
        return MappingProxyType(self._clients)

    @property
    def users(self) -> Mapping[str, UserProfile]:
        return MappingProxyType(self._users)

    def knows(self, identity: str) -> bool:
        return identity in self._clients or identity in self._users

    def snapshot_clients(self) -> dict[str, ClientState]:
        return {k: v.model_copy() for k, v in self._clients.items()}

    def snapshot_users(self) -> dict[str, UserProfile]:
        return {k: v.model_copy() for k, v in self._users.items()}

    def apply_presence(self, identity: str, online: bool) -> ClientState:
        """Record a presence change for `identity` and return its resulting state.

        onClientState fires only when the identity is new to the roster or its
        stored status changes, so repeated beacons stay silent. Going online
        creates the user profile on first sight (firing onUserProfile); going
        offline drops both entries.
        """
        now = self._clock()
        new_status = ClientStatus.ONLINE if online else ClientStatus.OFFLINE
        previous = self._clients.get(identity)
        result = ClientState.for_identity(
            identity,
            status=new_status,
            last_updated=previous.last_updated if previous else now,
            last_seen=now,
        )

        if previous is None or previous.status != new_status:
            self._dispatcher.emit(SocialEvent.CLIENT_STATE, result)

        if online:
            self._clients[identity] = result
            if identity not in self._users:
                profile = UserProfile(user_id=identity, name=identity, last_updated=now)
                self._users[identity] = profile
                self._dispatcher.emit(SocialEvent.USER_PROFILE, profile)
        else:
            self._users.pop(identity, None)
            self._clients.pop(identity, None)
        return result
