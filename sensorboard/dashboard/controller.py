"""
Dashboard Controller

Prepares the data for every view: current values, log browser, graph and
script editor. All methods return plain Python structures, so the views
stay thin and the controller can be tested without a web server.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from zoneinfo import ZoneInfo

from ..api.queries import LogStore, ScriptStore, SensorStore
from ..api.schemas import GraphRequest
from .config import DEFAULT_LOG_LEVEL, LOG_LEVELS, MAIN_LOG_PAGE_SIZE, SCRIPT_LOG_PAGE_SIZE
from .series import AlignedSeries, SeriesStat, TimeWindow, align, dedupe_sensor_ids, stats_for_sensors
from .timewindow import InvalidPeriod, default_period, default_window, parse_period
from ..models import to_epoch

logger = logging.getLogger("sensorboard.dashboard")


@dataclass
class GraphData:
    """Everything the graph view and the graph payload need."""
    period: Tuple[str, str]
    value_type: str
    unit: Optional[str]
    sensors: List[Tuple[int, str]]
    series: AlignedSeries
    stats: Dict[str, SeriesStat] = field(default_factory=dict)

    @property
    def sensor_names(self) -> List[str]:
        return [name for _, name in self.sensors]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "unit": self.unit,
            "value_type": self.value_type,
            "firstrow": self.sensor_names,
            "values": self.series.as_payload_rows(),
            "period": list(self.period),
            "stats": {name: stat.to_dict() for name, stat in self.stats.items()},
        }


class DashboardController:
    """
    Dashboard data preparation over the three stores.

    Stores and settings are passed in explicitly; nothing is looked up globally.
    """

    def __init__(
        self,
        sensors: SensorStore,
        logs: LogStore,
        scripts: ScriptStore,
        tz: ZoneInfo,
        *,
        log_page_size: int = MAIN_LOG_PAGE_SIZE,
        script_log_page_size: int = SCRIPT_LOG_PAGE_SIZE,
        default_log_level: int = DEFAULT_LOG_LEVEL,
        graph_default_days: int = 1,
    ):
        self.sensors = sensors
        self.logs = logs
        self.scripts = scripts
        self.tz = tz
        self.log_page_size = log_page_size
        self.script_log_page_size = script_log_page_size
        self.default_log_level = default_log_level
        self.graph_default_days = graph_default_days

    # ---- current values ----

    def get_main_dashboard_data(self) -> Dict[str, Any]:
        """Current values page: snapshot, newest logs, scripts and form defaults."""
        logger.debug("Generating main dashboard data")
        date_from, date_to = default_period(self.tz, self.graph_default_days)
        current_values = self.sensors.current_values()
        return {
            "page_title": "Current values",
            "timestamp": int(time.time()),
            "current_values": current_values,
            "value_names": sorted({row["value_name"] for row in current_values}),
            "logs": self.logs.recent(self.log_page_size),
            "log_levels": LOG_LEVELS,
            "log_filter": self.default_log_filter(),
            "scripts": self.scripts.list_scripts(),
            "date_from": date_from,
            "date_to": date_to,
        }

    # ---- logs ----

    def default_log_filter(self) -> Dict[str, Any]:
        log_from, log_to = default_period(self.tz, 1)
        return {"level": self.default_log_level, "log_from": log_from, "log_to": log_to}

    def get_logs_data(
        self,
        level: Optional[int] = None,
        log_from: Optional[str] = None,
        log_to: Optional[str] = None,
        limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Filtered log browser data.

        Missing or unparseable bounds fall back to the last 24 hours ending now
        (up to the current second); a single missing bound is filled from the
        default window. A missing level falls back to the configured threshold.
        """
        defaults = self.default_log_filter()
        level = self.default_log_level if level is None else int(level)

        window = None
        if log_from or log_to:
            log_from = log_from or defaults["log_from"]
            log_to = log_to or defaults["log_to"]
            try:
                window = parse_period(log_from, log_to, self.tz)
            except InvalidPeriod as e:
                logger.info(f"invalid log window ({e}), using default window")
        if window is None:
            window = default_window(1)
            log_from, log_to = defaults["log_from"], defaults["log_to"]

        start, end = window
        entries = self.logs.query(level, start, end, limit or self.log_page_size)
        return {
            "logs": entries,
            "log_levels": LOG_LEVELS,
            "log_filter": {"level": level, "log_from": log_from, "log_to": log_to},
        }

    # ---- scripts ----

    def get_script_view_data(self) -> Dict[str, Any]:
        return {
            "page_title": "Scripts",
            "timestamp": int(time.time()),
            "scripts": self.scripts.list_scripts(),
            "logs": self.logs.recent(self.script_log_page_size),
        }

    def save_script(self, name: str, content: str) -> List[Dict[str, Optional[str]]]:
        """Create or replace a script; returns the refreshed list."""
        if not name or not content:
            raise ValueError("script name and content are required")
        self.scripts.upsert(name, content)
        return self.scripts.list_scripts()

    def delete_script(self, name: Optional[str]) -> List[Dict[str, Optional[str]]]:
        """Delete by name if present (missing names are ignored); returns the refreshed list."""
        if name:
            self.scripts.delete(name)
        return self.scripts.list_scripts()

    # ---- graph ----

    def build_graph(self, request: GraphRequest) -> Optional[GraphData]:
        """
        Fetch readings and aggregate them for the graph.

        Returns None without touching the stores when an input is missing,
        and None when the period cannot be parsed.
        """
        if not request.is_complete():
            logger.debug("graph request incomplete, skipping")
            return None

        try:
            start, end = parse_period(request.date_from, request.date_to, self.tz)
        except InvalidPeriod as e:
            logger.info(f"invalid graph period: {e}")
            return None

        sensors = self.sensors.resolve_sensors(dedupe_sensor_ids(request.sensors))
        sensor_ids = [sid for sid, _ in sensors]
        names = [name for _, name in sensors]

        readings = self.sensors.readings(sensor_ids, request.value, start, end)
        window = TimeWindow(to_epoch(start), to_epoch(end))
        logger.debug(f"graph: {len(readings)} readings for {len(sensors)} sensors ({request.value})")

        return GraphData(
            period=(request.date_from, request.date_to),
            value_type=request.value,
            unit=self.sensors.unit_for_value(request.value),
            sensors=sensors,
            series=align(names, readings),
            stats=stats_for_sensors(names, readings, window),
        )

    def get_graph_page_data(self, request: GraphRequest) -> Dict[str, Any]:
        """Graph page: form state, sensor options for the value and the computed graph (if any)."""
        default_from, default_to = default_period(self.tz, self.graph_default_days)
        return {
            "page_title": "Graph",
            "timestamp": int(time.time()),
            "period": [request.date_from, request.date_to],
            "date_from": request.date_from or default_from,
            "date_to": request.date_to or default_to,
            "value_type": request.value,
            "selected_sensors": dedupe_sensor_ids(request.sensors),
            "sensor_options": self.sensors.sensors_for_value(request.value),
            "graph": self.build_graph(request),
        }

