"""
log-social error types. Codes match the social provider error codes.
"""

from typing import Any, Optional

ERRCODE = {
    "LOGIN_ALREADYONLINE": "Login failed: already online",
    "LOGIN_FAILEDCONNECTION": "Login failed: error connecting to the log",
    "OFFLINE": "User is currently offline",
    "SEND_INVALIDDESTINATION": "Message not sent: invalid destination",
    "TRANSPORT_ERROR": "Log request failed",
}


class LogSocialError(Exception):
    def __init__(self, code: str, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__(message or ERRCODE.get(code, code))
        self.code = code
        self.details = details


class AlreadyOnlineError(LogSocialError):
    def __init__(self, message: Optional[str] = None):
        super().__init__("LOGIN_ALREADYONLINE", message)


class FailedConnectionError(LogSocialError):
    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        super().__init__("LOGIN_FAILEDCONNECTION", message, details)


class OfflineError(LogSocialError):
    def __init__(self, message: Optional[str] = None):
        super().__init__("OFFLINE", message)


class InvalidDestinationError(LogSocialError):
    def __init__(self, destination: str):
        super().__init__("SEND_INVALIDDESTINATION", details={"to": destination})


class TransportError(LogSocialError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)
