"""Pytest configuration and shared fixtures"""
import pytest
from datetime import datetime
from peewee import SqliteDatabase

from sensorboard.models import (
    SENSOR_MODELS, LOG_MODELS, SCRIPT_MODELS, create_schema,
    Sensor, Unit, ValueName, RealValue, LogEntry, Script, from_epoch, to_epoch
)
from sensorboard.api.queries.logs import NANOSECONDS

# 2024-01-01 12:00:00 UTC
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)
BASE_EPOCH = 1704110400


@pytest.fixture
def test_dbs():
    """Create in-memory sensor, log and script databases"""
    sensor_db = SqliteDatabase(':memory:')
    log_db = SqliteDatabase(':memory:')
    script_db = SqliteDatabase(':memory:')

    # Bind all models to the test databases
    sensor_db.bind(SENSOR_MODELS, bind_refs=False, bind_backrefs=False)
    log_db.bind(LOG_MODELS, bind_refs=False, bind_backrefs=False)
    script_db.bind(SCRIPT_MODELS, bind_refs=False, bind_backrefs=False)
    for db in (sensor_db, log_db, script_db):
        db.connect()
    create_schema(sensor_db, log_db, script_db)

    yield {'sensor': sensor_db, 'log': log_db, 'script': script_db}

    # Cleanup
    for db in (sensor_db, log_db, script_db):
        db.close()


def add_reading(sensor_id, valname_id, timestamp, value):
    """Insert one raw reading (the trigger refreshes the snapshot)"""
    RealValue.insert(sensor=sensor_id, valname=valname_id, timestamp=timestamp, value=value).execute()


def populate_sensor_data():
    """Two sensors reporting temperature, one of them also humidity"""
    celsius = Unit.create(name="°C")
    percent = Unit.create(name="%")
    temperature = ValueName.create(name="temperature", unit=celsius)
    humidity = ValueName.create(name="humidity", unit=percent)
    kitchen = Sensor.create(name="kitchen")
    cellar = Sensor.create(name="cellar")

    minute = 60
    add_reading(kitchen.id, temperature.id, _at(0), 20.0)
    add_reading(kitchen.id, temperature.id, _at(10 * minute), 22.0)
    add_reading(kitchen.id, temperature.id, _at(20 * minute), 21.0)
    add_reading(cellar.id, temperature.id, _at(0), 10.0)
    add_reading(cellar.id, temperature.id, _at(20 * minute), 12.0)
    add_reading(kitchen.id, humidity.id, _at(5 * minute), 45.0)

    return {
        'units': {'celsius': celsius, 'percent': percent},
        'value_names': {'temperature': temperature, 'humidity': humidity},
        'sensors': {'kitchen': kitchen, 'cellar': cellar},
    }


def _at(seconds):
    return from_epoch(BASE_EPOCH + seconds)


@pytest.fixture
def sample_sensor_data(test_dbs):
    """Sensors, units, value names and a short reading history"""
    return populate_sensor_data()


@pytest.fixture
def sample_logs(test_dbs):
    """One entry per level, a minute apart, oldest first"""
    entries = []
    for level in range(6):
        entry = LogEntry.create(
            timestamp=(BASE_EPOCH + level * 60) * NANOSECONDS,
            level=level,
            thread=1,
            msgid=level,
            logger="collector",
            message=f"message at level {level}"
        )
        entries.append(entry)
    return entries


@pytest.fixture
def sample_scripts(test_dbs):
    """Two stored scripts"""
    Script.create(name="heating", content="if temp < 19 then on")
    Script.create(name="venting", content="if humidity > 60 then on")
    return ["heating", "venting"]


@pytest.fixture
def base_epoch():
    assert to_epoch(BASE_TIME) == BASE_EPOCH
    return BASE_EPOCH
