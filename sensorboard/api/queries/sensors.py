"""
Sensor data queries.

Reads the current-value snapshot, resolves sensor and unit names, and
fetches raw reading history for the graph view.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from peewee import JOIN, Database
from zoneinfo import ZoneInfo

from ...models import SENSOR_MODELS, CurrentValue, RealValue, Sensor, Unit, ValueName, to_epoch
from ...dashboard.series import Reading
from ...dashboard.timewindow import format_local

logger = logging.getLogger("sensorboard.server")


class SensorStore:
    """Query surface of the sensor data database."""

    def __init__(self, database: Database, tz: ZoneInfo) -> None:
        self.database = database
        self.tz = tz
        database.bind(SENSOR_MODELS, bind_refs=False, bind_backrefs=False)

    def current_values(self) -> List[Dict[str, Any]]:
        """Latest reading per (sensor, value name), ordered by sensor."""
        query = (CurrentValue
                 .select(
                     CurrentValue.timestamp,
                     CurrentValue.value,
                     CurrentValue.sensor.alias("sensor_id"),
                     Sensor.name.alias("sensor_name"),
                     ValueName.name.alias("value_name"),
                     Unit.name.alias("units_name"))
                 .join(Sensor, on=(CurrentValue.sensor == Sensor.id))
                 .switch(CurrentValue)
                 .join(ValueName, on=(CurrentValue.valname == ValueName.id))
                 .join(Unit, JOIN.LEFT_OUTER, on=(ValueName.unit == Unit.id))
                 .order_by(CurrentValue.sensor, ValueName.name)
                 .dicts())

        rows = []
        for row in query:
            row["local_timestamp"] = self._local(row["timestamp"])
            rows.append(row)
        return rows

    def sensors_for_value(self, value_name: Optional[str]) -> Dict[int, str]:
        """Sensors that report `value_name`, as {sensor_id: sensor_name}."""
        if not value_name:
            return {}
        query = (CurrentValue
                 .select(CurrentValue.sensor.alias("sensor_id"), Sensor.name.alias("sensor_name"))
                 .join(Sensor, on=(CurrentValue.sensor == Sensor.id))
                 .switch(CurrentValue)
                 .join(ValueName, on=(CurrentValue.valname == ValueName.id))
                 .where(ValueName.name == value_name)
                 .order_by(CurrentValue.sensor)
                 .dicts())
        return {row["sensor_id"]: row["sensor_name"] for row in query}

    def value_names(self) -> List[str]:
        return [v.name for v in ValueName.select(ValueName.name).order_by(ValueName.name)]

    def resolve_sensors(self, sensor_ids: Sequence[int]) -> List[Tuple[int, str]]:
        """
        Existing sensors among `sensor_ids`, as (id, name) in the given order.
        Unknown ids are dropped; the caller deduplicates.
        """
        if not sensor_ids:
            return []
        found = {s.id: s.name for s in Sensor.select().where(Sensor.id.in_(list(sensor_ids)))}
        missing = [sid for sid in sensor_ids if sid not in found]
        if missing:
            logger.debug(f"ignoring unknown sensor ids: {missing}")
        return [(sid, found[sid]) for sid in sensor_ids if sid in found]

    def unit_for_value(self, value_name: str) -> Optional[str]:
        row = (Unit
               .select(Unit.name)
               .join(ValueName, on=(ValueName.unit == Unit.id))
               .where(ValueName.name == value_name)
               .first())
        return row.name if row else None

    def readings(
        self,
        sensor_ids: Sequence[int],
        value_name: str,
        start: datetime,
        end: datetime
    ) -> List[Reading]:
        """
        Raw readings of `value_name` for the sensors in [start, end),
        ordered by timestamp. Bounds are naive UTC.
        """
        if not sensor_ids:
            return []
        query = (RealValue
                 .select(RealValue.timestamp, RealValue.value, Sensor.name.alias("sensor_name"))
                 .join(Sensor, on=(RealValue.sensor == Sensor.id))
                 .switch(RealValue)
                 .join(ValueName, on=(RealValue.valname == ValueName.id))
                 .where(
                     (RealValue.sensor.in_(list(sensor_ids))) &
                     (ValueName.name == value_name) &
                     (RealValue.timestamp >= start) &
                     (RealValue.timestamp < end))
                 .order_by(RealValue.timestamp)
                 .dicts())

        return [
            Reading(sensor=row["sensor_name"], timestamp=to_epoch(row["timestamp"]), value=row["value"])
            for row in query
        ]

    def _local(self, value: Optional[datetime]) -> str:
        return format_local(value, self.tz, "%d.%m.%Y %H:%M:%S") if isinstance(value, datetime) else ""
