"""Unit tests for translation and template helpers"""
from unittest.mock import Mock
from zoneinfo import ZoneInfo

from jinja2 import Environment

from sensorboard.dashboard.config import format_reading, get_level_class, get_level_name
from sensorboard.web.template_helpers import format_epoch, format_stat, setup_template_filters
from sensorboard.web.translator import Translator


class TestTranslator:

    def test_czech_lookup(self):
        translator = Translator.for_language("cs")
        assert translator("Graph") == "Graf"
        assert translator.translate("Remove") == "Smazat"

    def test_unknown_key_passes_through(self):
        assert Translator.for_language("cs")("Something new") == "Something new"

    def test_english_is_identity(self):
        assert Translator.for_language("en")("Graph") == "Graph"

    def test_unknown_language_is_identity(self):
        assert Translator.for_language("xx")("Graph") == "Graph"


class TestFormatting:

    def test_format_reading(self):
        assert format_reading(3.14159, "°C") == "3.14 °C"
        assert format_reading(21.456, "°C") == "21.5 °C"
        assert format_reading(-12.34) == "-12.3"
        assert format_reading(None) == "—"
        assert format_reading("n/a") == "—"

    def test_format_stat_no_data(self):
        assert format_stat(None, "°C", no_data="Žádná data") == "Žádná data"
        assert format_stat(2.0, "%") == "2.00 %"

    def test_format_epoch(self):
        assert format_epoch(1704110400, ZoneInfo("Europe/Prague")) == "01.01.2024 13:00:00"
        assert format_epoch(None, ZoneInfo("UTC")) == ""

    def test_level_helpers(self):
        assert get_level_name(4) == "Error"
        assert get_level_name(42) == "42"
        assert get_level_name(None) == "—"
        assert get_level_class(0) == "severity-debug"
        assert get_level_class(None) == "severity-info"


def test_setup_template_filters():
    templates = Mock()
    templates.env = Environment()
    setup_template_filters(templates, Translator.for_language("cs"), ZoneInfo("UTC"))

    template = templates.env.from_string("{{ _('Graph') }} {{ 21.44|format_reading('°C') }} {{ 4|level_name }}")
    assert template.render() == "Graf 21.4 °C Error"
