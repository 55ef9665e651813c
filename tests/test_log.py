import logging

from rich.console import Console
from rich.logging import RichHandler

from mac_grabber.config import Settings
from mac_grabber.log import configure_logging


def test_configure_installs_a_single_rich_handler():
    console = Console(record=True, width=120)
    configure_logging(Settings(), console=console)
    logger = configure_logging(Settings(), verbose=True, console=console)

    rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert logger.level == logging.DEBUG

    logging.getLogger("mac_grabber.capture").info("captured region")
    assert "captured region" in console.export_text()


def test_records_carry_subsystem_and_category():
    console = Console(record=True, width=120)
    logger = configure_logging(Settings(log_subsystem="com.example.viz", log_category="Tests"), console=console)
    handler = next(h for h in logger.handlers if isinstance(h, RichHandler))

    record = logging.LogRecord("mac_grabber", logging.INFO, __file__, 1, "hello", None, None)
    handler.filter(record)

    assert record.subsystem == "com.example.viz"
    assert record.category == "Tests"
