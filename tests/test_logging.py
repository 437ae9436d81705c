import logging
from pathlib import Path

from cartlab.logging_config import setup_logging
from cartlab.tools import debug


def test_setup_logging_replaces_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "cartlab.log"
    logger = setup_logging(logging.DEBUG, str(log_file))
    logger = setup_logging(logging.DEBUG, str(log_file))

    assert logger.name == "cartlab"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logging.getLogger("cartlab.core.session").debug("hello from session")
    for handler in logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG   cartlab.core.session: hello from session" in text

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_time_block_reports_when_enabled(monkeypatch) -> None:
    monkeypatch.setattr(debug, "DEBUG_CARTLAB", True)
    messages = []
    with debug.time_block("work", emitter=messages.append):
        pass
    assert len(messages) == 1
    assert messages[0].startswith("[DEBUG] work took")


def test_time_block_is_silent_when_disabled(monkeypatch) -> None:
    monkeypatch.setattr(debug, "DEBUG_CARTLAB", False)
    messages = []
    with debug.time_block("work", emitter=messages.append):
        pass
    assert messages == []
    assert debug.debug_enabled() is False


def test_timings_accumulate_per_label(monkeypatch) -> None:
    monkeypatch.setattr(debug, "DEBUG_CARTLAB", True)
    debug.reset_timings()
    for _ in range(3):
        with debug.time_block("synth", emitter=lambda _msg: None):
            pass

    summary = debug.timing_summary()
    assert summary["synth"].count == 3
    assert summary["synth"].max_ms >= summary["synth"].mean_ms >= 0.0
    debug.reset_timings()
    assert debug.timing_summary() == {}
