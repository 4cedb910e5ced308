"""
Series aggregation for the graph view.

Turns time-sorted (sensor, timestamp, value) readings into:
- an aligned table: one row per distinct timestamp, one column per sensor,
  None where a sensor did not report at that exact instant
- per-sensor statistics: time-weighted average, min, max and their difference

Everything here is a pure function of its inputs; the controller does the
fetching and hands the rows in.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, NamedTuple, Optional, Sequence

import pandas as pd

logger = logging.getLogger("sensorboard.dashboard")


class Reading(NamedTuple):
    """One observation of a sensor. timestamp is epoch seconds."""
    sensor: str
    timestamp: int
    value: Optional[float]


class TimeWindow(NamedTuple):
    """Half-open window [start, end) in epoch seconds."""
    start: int
    end: int

    def contains(self, ts: int) -> bool:
        return self.start <= ts < self.end


@dataclass
class AlignedSeries:
    """Multi-sensor series reshaped to rows of (timestamp, v1, ..., vn)."""
    columns: List[str]
    rows: List[tuple] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def as_payload_rows(self) -> List[list]:
        return [list(row) for row in self.rows]


@dataclass
class SeriesStat:
    """Summary of one sensor over the window. None means "no data"."""
    sensor: str
    count: int = 0
    average: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    diff: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.average is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sensor": self.sensor,
            "count": self.count,
            "average": self.average,
            "min": self.minimum,
            "max": self.maximum,
            "diff": self.diff,
        }


def dedupe_sensor_ids(sensor_ids: Iterable[Hashable]) -> List[Hashable]:
    """Drop empty entries and repeats, keeping the order of first occurrence."""
    return list(dict.fromkeys(s for s in sensor_ids if s is not None and s != ""))


def _readings_frame(readings: Iterable[Reading]) -> pd.DataFrame:
    return pd.DataFrame.from_records(list(readings), columns=list(Reading._fields))


def _native(value: Any) -> Any:
    # numpy scalars -> python scalars for JSON/template consumption
    return value.item() if hasattr(value, "item") else value


def _cell(value: Any) -> Optional[float]:
    return None if pd.isna(value) else float(value)


def align(sensor_names: Sequence[str], readings: Iterable[Reading]) -> AlignedSeries:
    """
    Pivot readings into one row per distinct timestamp.

    Args:
        sensor_names: Column order; one slot per entry
        readings: Readings for those sensors, any order within a timestamp

    Returns:
        AlignedSeries with rows in ascending timestamp order. Timestamps are
        compared exactly; missing slots are None (no interpolation, no fill).
    """
    columns = list(sensor_names)
    df = _readings_frame(readings)
    if df.empty:
        return AlignedSeries(columns=columns)

    # A sensor reporting twice at the same instant keeps its last value
    df = df.drop_duplicates(subset=["timestamp", "sensor"], keep="last")
    table = (df.pivot(index="timestamp", columns="sensor", values="value")
             .sort_index()
             .reindex(columns=columns))

    rows = [
        (_native(ts), *(_cell(v) for v in values))
        for ts, values in zip(table.index, table.itertuples(index=False, name=None))
    ]
    return AlignedSeries(columns=columns, rows=rows)


def stats(sensor: str, readings: Iterable[Reading], window: Optional[TimeWindow] = None) -> SeriesStat:
    """
    Time-weighted statistics for one sensor.

    The readings are treated as a step function: each value holds until the
    next reading. The average integrates that function from the first to the
    last timestamp and divides by the span, so the last reading contributes
    no interval of its own. min/max are plain extremes over every value.

    Fewer than two readings, or all readings at one instant, yield "no data"
    (every field None) rather than NaN or infinity.
    """
    df = _readings_frame(readings)
    if not df.empty:
        df = df[df["sensor"] == sensor]
        if window is not None:
            df = df[(df["timestamp"] >= window.start) & (df["timestamp"] < window.end)]
        df = df.dropna(subset=["value"]).sort_values("timestamp", kind="stable")

    stat = SeriesStat(sensor=sensor, count=len(df))
    if len(df) < 2:
        return stat

    timestamps = df["timestamp"].astype(float).reset_index(drop=True)
    values = df["value"].astype(float).reset_index(drop=True)

    span = timestamps.iloc[-1] - timestamps.iloc[0]
    if span == 0:
        logger.debug(f"zero time span for sensor {sensor}, reporting no data")
        return stat

    # Duration each value was held, as a fraction of the span
    weights = timestamps.diff().shift(-1).iloc[:-1] / span
    stat.average = float((values.iloc[:-1] * weights).sum())
    stat.minimum = float(values.min())
    stat.maximum = float(values.max())
    stat.diff = stat.maximum - stat.minimum
    return stat


def stats_for_sensors(
    sensor_names: Sequence[str],
    readings: Iterable[Reading],
    window: Optional[TimeWindow] = None
) -> Dict[str, SeriesStat]:
    """stats() for every sensor, keyed by name in column order."""
    by_sensor: Dict[str, List[Reading]] = {name: [] for name in sensor_names}
    for reading in readings:
        if reading.sensor in by_sensor:
            by_sensor[reading.sensor].append(reading)
    return {name: stats(name, rows, window) for name, rows in by_sensor.items()}
