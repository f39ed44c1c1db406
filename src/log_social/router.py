"""
Message router: picks out log records addressed to the local identity.
"""

import logging
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from log_social.models.log import DirectMessage, IncomingMessage, LogRecord
from log_social.models.roster import ClientState, ClientStatus

logger = logging.getLogger(__name__)


def parse_message(record: LogRecord) -> Optional[DirectMessage]:
    """Parse a record payload as a direct message. Returns None for beacons and junk."""
    try:
        return DirectMessage.model_validate_json(record.msg)
    except ValidationError:
        return None


class MessageRouter:
    def route(
        self, record: LogRecord, local_identity: str, watermark_before: datetime,
    ) -> Optional[IncomingMessage]:
        """Return the delivery for `record`, if any.

        `watermark_before` must be the watermark captured at the start of the
        poll cycle so every record of a batch is judged against the same
        baseline. The watermark itself is not touched here.
        """
        message = parse_message(record)
        if message is None:
            logger.debug("Record from %s is not a direct message", record.sender)
            return None
        if message.to != local_identity or record.time <= watermark_before:
            return None
        sender = ClientState.for_identity(
            record.sender,
            status=ClientStatus.ONLINE,
            last_updated=record.time,
            last_seen=record.time,
        )
        return IncomingMessage(sender=sender, message=message.msg)
