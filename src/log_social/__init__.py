"""
log-social: presence and messaging over a shared append-only log.

Discover peers, exchange direct messages and track liveness using nothing
but a log that supports "append an entry" and "read all entries".
"""

from log_social.client import AsyncLogSocial
from log_social.errors import (
    LogSocialError,
    AlreadyOnlineError,
    FailedConnectionError,
    OfflineError,
    InvalidDestinationError,
    TransportError,
)
from log_social.models.events import SocialEvent
from log_social.models.log import LogRecord, IncomingMessage
from log_social.models.roster import ClientState, ClientStatus, UserProfile
from log_social.models.session import LoginConfig
from log_social.transport.http import HttpLogChannel

__version__ = "0.1.0"
__all__ = [
    "AsyncLogSocial",
    "HttpLogChannel",
    "LogSocialError",
    "AlreadyOnlineError",
    "FailedConnectionError",
    "OfflineError",
    "InvalidDestinationError",
    "TransportError",
    "SocialEvent",
    "LogRecord",
    "IncomingMessage",
    "ClientState",
    "ClientStatus",
    "UserProfile",
    "LoginConfig",
]
