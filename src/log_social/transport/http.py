"""
HTTP log channel: reads and appends entries on a public get/append log.

Both operations are plain GET requests against the log URL:
  read:   ?dest=<agent>                       -> {"items": [{from, msg, time}, ...]}
  append: ?dest=<agent>&src=<sender>&msg=<m>  -> {"success": true}
The log has no cursor; every read returns the full visible set.
"""

import json
import logging
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from log_social.errors import TransportError
from log_social.models.log import LogRecord

logger = logging.getLogger(__name__)

_JSONP_RE = re.compile(r"^\s*[\w$.]+\s*\((.*)\)\s*;?\s*$", re.DOTALL)


def parse_record(raw: Any) -> Optional[LogRecord]:
    """Parse a single log item. Returns None if invalid."""
    try:
        return LogRecord.model_validate(raw)
    except ValidationError:
        return None


class HttpLogChannel:
    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = url
        self._client = httpx.AsyncClient(
            headers={"User-Agent": "log-social/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._url

    @staticmethod
    def _unwrap(text: str) -> Any:
        """Decode a JSON body, stripping a JSONP callback wrapper if the log adds one."""
        match = _JSONP_RE.match(text)
        body = match.group(1) if match else text
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            raise TransportError(f"Malformed log response: {text[:200]}")

    async def _get(self, params: dict[str, str]) -> Any:
        try:
            resp = await self._client.get(self._url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"Log request failed: {e}") from e
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", {"status": resp.status_code})
        return self._unwrap(resp.text)

    async def read_all(self, agent: str) -> list[LogRecord]:
        data = await self._get({"dest": agent})
        items = data.get("items") if isinstance(data, dict) else None
        records = []
        for item in items or []:
            record = parse_record(item)
            if record is None:
                logger.debug("Dropping malformed log item: %r", item)
                continue
            records.append(record)
        return records

    async def append(self, agent: str, sender: str, msg: str) -> dict[str, Any]:
        ack = await self._get({"dest": agent, "src": sender, "msg": msg})
        if not isinstance(ack, dict) or not ack.get("success"):
            raise TransportError("Log rejected append", {"response": ack})
        return ack

    async def close(self) -> None:
        await self._client.aclose()
