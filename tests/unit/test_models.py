"""Unit tests for the database handles and schema"""
import threading

from sensorboard.models import DatabaseManager, script_database, sensor_database


def test_each_thread_gets_its_own_connection(tmp_path):
    """Request threads never share a connection or its transaction state"""
    manager = DatabaseManager({
        "sensor": tmp_path / "data.db",
        "log": tmp_path / "log.db",
        "script": tmp_path / "script.db",
    })
    manager.connect()
    try:
        main_connection = script_database.connection()
        seen = []

        def worker():
            seen.append(script_database.connection())
            script_database.close()

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert len(seen) == 1
        assert seen[0] is not main_connection
        assert not script_database.is_closed()
    finally:
        manager.close()


def test_schema_has_snapshot_trigger(tmp_path):
    manager = DatabaseManager({
        "sensor": tmp_path / "data.db",
        "log": tmp_path / "log.db",
        "script": tmp_path / "script.db",
    })
    manager.connect()
    try:
        triggers = sensor_database.execute_sql(
            "SELECT name FROM sqlite_master WHERE type = 'trigger'"
        ).fetchall()
        assert ("valsensor_valreal_trigger",) in triggers
    finally:
        manager.close()
