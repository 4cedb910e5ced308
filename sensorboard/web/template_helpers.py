#!/usr/bin/env python3
"""
Template Helpers for the sensorboard Dashboard
"""

from datetime import datetime, timezone
from functools import partial

from zoneinfo import ZoneInfo

from ..dashboard.config import format_reading, get_level_class, get_level_name
from .translator import Translator


def format_epoch(timestamp, tz: ZoneInfo):
    """Format epoch seconds as local datetime string."""
    if timestamp is None or timestamp == "":
        return ""
    try:
        return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).astimezone(tz).strftime("%d.%m.%Y %H:%M:%S")
    except (TypeError, ValueError, OverflowError):
        return str(timestamp)


def format_stat(value, unit="", no_data="—"):
    """Statistic value with unit, or the "no data" marker for None."""
    if value is None:
        return no_data
    return format_reading(value, unit)


def setup_template_filters(templates, translator: Translator, tz: ZoneInfo):
    """Setup all template filters and globals in the Jinja2 environment."""
    templates.env.filters['format_epoch'] = partial(format_epoch, tz=tz)
    templates.env.filters['format_reading'] = format_reading
    templates.env.filters['format_stat'] = format_stat
    templates.env.filters['level_name'] = get_level_name
    templates.env.filters['level_class'] = get_level_class
    templates.env.filters['translate'] = translator.translate
    templates.env.globals['_'] = translator.translate
