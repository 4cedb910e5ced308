#!/usr/bin/env python3
"""
sensorboard Database Models (peewee over three SQLite files)

Stores:
- sensor data (sensor, unit, valname, valreal, valsensor), written by the collector daemon
- logs (log), written by the daemons' shared log sink
- scripts (script), read by the execution daemon and edited from the dashboard

Notes:
- Table and column names follow the schema the daemons create, so the
  dashboard can open the same files they write.
- valreal/valsensor timestamps are naive UTC text ('YYYY-MM-DD HH:MM:SS').
- log.timestamp is integer nanoseconds since the epoch (UTC).
- valsensor is the current-value snapshot; a trigger on valreal keeps it filled.
"""

import calendar
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Union

from peewee import (
    Model, SqliteDatabase, BigIntegerField, CompositeKey, DateTimeField,
    FloatField, ForeignKeyField, IntegerField, TextField
)

logger = logging.getLogger("sensorboard.models")

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Global DB handles (initialized in DatabaseManager.connect).
# Connections are thread-local; each threadpool worker opens its own.
sensor_database = SqliteDatabase(None)
log_database = SqliteDatabase(None)
script_database = SqliteDatabase(None)

SQLITE_PRAGMAS = {
    "foreign_keys": 1,
    "busy_timeout": 5000,
    "cache_size": 10000,
    "temp_store": "memory",
}


def to_epoch(value: datetime) -> int:
    """Naive UTC datetime -> epoch seconds."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return calendar.timegm(value.timetuple())


def utcnow() -> datetime:
    """Current naive UTC time, whole seconds."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def from_epoch(ts: Union[int, float]) -> datetime:
    """Epoch seconds -> naive UTC datetime."""
    return datetime.fromtimestamp(ts, tz=timezone.utc).replace(tzinfo=None)


class UTCDateTimeField(DateTimeField):
    """DATETIME column holding naive UTC in the daemons' text format."""

    def db_value(self, value):
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            return value.strftime(DB_TIMESTAMP_FORMAT)
        return super().db_value(value)


class SensorDataModel(Model):
    class Meta:
        database = sensor_database


class LogModel(Model):
    class Meta:
        database = log_database


class ScriptModel(Model):
    class Meta:
        database = script_database


# ---- sensor data ----

class Sensor(SensorDataModel):
    name = TextField(unique=True)

    class Meta:
        table_name = "sensor"


class Unit(SensorDataModel):
    name = TextField(unique=True)

    class Meta:
        table_name = "unit"


class ValueName(SensorDataModel):
    """Kind of measurement (e.g. 'temperature') and the unit it is reported in."""
    name = TextField(unique=True)
    unit = ForeignKeyField(Unit, null=True, backref="value_names", column_name="unit_id")

    class Meta:
        table_name = "valname"


class RealValue(SensorDataModel):
    """Raw reading history (append-only)."""
    timestamp = UTCDateTimeField()
    sensor = ForeignKeyField(Sensor, backref="readings", column_name="sensor_id")
    valname = ForeignKeyField(ValueName, null=True, backref="readings", column_name="valname_id")
    value = FloatField(null=True)

    class Meta:
        table_name = "valreal"
        primary_key = CompositeKey("timestamp", "sensor", "valname")


class CurrentValue(SensorDataModel):
    """Most recent reading per (value name, sensor)."""
    valname = ForeignKeyField(ValueName, backref="current_values", column_name="valname_id")
    sensor = ForeignKeyField(Sensor, backref="current_values", column_name="sensor_id")
    timestamp = UTCDateTimeField(default=utcnow)
    value = FloatField(null=True)

    class Meta:
        table_name = "valsensor"
        primary_key = CompositeKey("valname", "sensor")


# ---- logs ----

class LogEntry(LogModel):
    timestamp = BigIntegerField(primary_key=True)   # nanoseconds since epoch
    level = IntegerField(null=True)
    thread = IntegerField(null=True)
    msgid = IntegerField(null=True)
    logger = TextField(null=True)
    message = TextField(null=True)

    class Meta:
        table_name = "log"


# ---- scripts ----

class Script(ScriptModel):
    name = TextField(primary_key=True)
    content = TextField(null=True, column_name="script")

    class Meta:
        table_name = "script"


SENSOR_MODELS = [Sensor, Unit, ValueName, RealValue, CurrentValue]
LOG_MODELS = [LogEntry]
SCRIPT_MODELS = [Script]

SNAPSHOT_TRIGGER = (
    "CREATE TRIGGER IF NOT EXISTS valsensor_valreal_trigger AFTER INSERT ON valreal "
    "BEGIN INSERT OR REPLACE INTO valsensor (valname_id, sensor_id, timestamp, value) "
    "VALUES (NEW.valname_id, NEW.sensor_id, NEW.timestamp, NEW.value); END;"
)


def create_schema(sensor_db: SqliteDatabase, log_db: SqliteDatabase, script_db: SqliteDatabase) -> None:
    """Create missing tables (and the snapshot trigger) on the given handles."""
    sensor_db.create_tables(SENSOR_MODELS, safe=True)
    sensor_db.execute_sql(SNAPSHOT_TRIGGER)
    log_db.create_tables(LOG_MODELS, safe=True)
    script_db.create_tables(SCRIPT_MODELS, safe=True)


class DatabaseManager:
    """DB lifecycle for the three stores."""

    def __init__(self, paths: Dict[str, Path]) -> None:
        self.paths = {name: Path(p) for name, p in paths.items()}
        self.connected = False

    def connect(self) -> None:
        handles = {
            "sensor": (sensor_database, SENSOR_MODELS),
            "log": (log_database, LOG_MODELS),
            "script": (script_database, SCRIPT_MODELS),
        }
        for name, (database, models) in handles.items():
            path = self.paths[name]
            path.parent.mkdir(parents=True, exist_ok=True)
            database.init(str(path), pragmas=SQLITE_PRAGMAS)
            database.connect(reuse_if_open=True)
            database.bind(models, bind_refs=False, bind_backrefs=False)
            logger.info(f"{name} database initialized: {path}")

        create_schema(sensor_database, log_database, script_database)
        self.connected = True

    def close(self) -> None:
        if self.connected:
            for database in (sensor_database, log_database, script_database):
                database.close()
            self.connected = False
            logger.info("database connections closed")
