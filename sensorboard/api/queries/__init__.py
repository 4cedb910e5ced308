"""
Store Query Modules

One store per SQLite file, each constructed with its database handle:
- sensors.py: current snapshot, sensor/unit lookups, raw reading history
- logs.py: log browser queries
- scripts.py: script CRUD
"""

from .sensors import SensorStore
from .logs import LogStore, to_nanoseconds
from .scripts import ScriptStore

__all__ = [
    'SensorStore',
    'LogStore',
    'ScriptStore',
    'to_nanoseconds',
]
