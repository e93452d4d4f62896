"""Tests for colored logging."""
import logging

from weather_app.utils.colored_logger import (
    COMPONENT_COLORS,
    ColoredFormatter,
    Colors,
    get_component_logger,
)


def make_record(level: int, **extra) -> logging.LogRecord:
    record = logging.LogRecord("weather_app.test", level, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_component_color_applied_to_info() -> None:
    """Test component records get their component color."""
    formatted = ColoredFormatter().format(make_record(logging.INFO, component="apiservice"))
    assert formatted.startswith(COMPONENT_COLORS["apiservice"])
    assert formatted.endswith(Colors.RESET)
    assert "hello world" in formatted


def test_level_color_wins_for_errors() -> None:
    """Test errors stay red even for components."""
    formatted = ColoredFormatter().format(make_record(logging.ERROR, component="apiservice"))
    assert formatted.startswith(Colors.RED)


def test_component_logger_tags_records() -> None:
    """Test the adapter adds the component to every record."""
    records = []

    class ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    base = logging.getLogger("weather_app.tests.component")
    base.addHandler(ListHandler())
    base.setLevel(logging.INFO)
    base.propagate = False

    get_component_logger("weather_app.tests.component", "health").info("probe")

    assert records[0].component == "health"
    assert records[0].getMessage() == "probe"
