"""
Log browser queries.

log.timestamp is nanoseconds since the epoch; window bounds arrive as
naive UTC datetimes and are converted here.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from peewee import Database
from zoneinfo import ZoneInfo

from ...models import LOG_MODELS, LogEntry, to_epoch
from ...dashboard.config import get_level_class, get_level_name

logger = logging.getLogger("sensorboard.server")

NANOSECONDS = 1_000_000_000


def to_nanoseconds(value: datetime) -> int:
    return to_epoch(value) * NANOSECONDS


class LogStore:
    """Query surface of the log database."""

    def __init__(self, database: Database, tz: ZoneInfo) -> None:
        self.database = database
        self.tz = tz
        database.bind(LOG_MODELS, bind_refs=False, bind_backrefs=False)

    def recent(self, limit: int) -> List[Dict[str, Any]]:
        """Newest `limit` entries regardless of level."""
        query = LogEntry.select().order_by(LogEntry.timestamp.desc()).limit(limit)
        return [self._format(entry) for entry in query]

    def query(
        self,
        min_level: int,
        start: Optional[datetime],
        end: Optional[datetime],
        limit: int
    ) -> List[Dict[str, Any]]:
        """Entries with level >= min_level inside [start, end), newest first."""
        query = LogEntry.select().where(LogEntry.level >= min_level)
        if start is not None:
            query = query.where(LogEntry.timestamp >= to_nanoseconds(start))
        if end is not None:
            query = query.where(LogEntry.timestamp < to_nanoseconds(end))
        query = query.order_by(LogEntry.timestamp.desc()).limit(limit)
        return [self._format(entry) for entry in query]

    def _format(self, entry: LogEntry) -> Dict[str, Any]:
        moment = datetime.fromtimestamp(entry.timestamp / NANOSECONDS, tz=timezone.utc)
        return {
            "timestamp": entry.timestamp,
            "local_time": moment.astimezone(self.tz).strftime("%d.%m.%Y %H:%M:%S"),
            "level": entry.level,
            "level_name": get_level_name(entry.level),
            "level_class": get_level_class(entry.level),
            "logger": entry.logger,
            "message": entry.message,
        }
