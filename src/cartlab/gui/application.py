"""Qt application entry point for the CartLab desktop GUI.

This module wires up argument parsing and logging, loads the runtime
configuration, builds the :class:`~cartlab.gui.main_window.MainWindow`, and
starts the Qt event loop. All GUI launches, whether through ``python main.py``
or ``python -m cartlab.gui.application``, flow through ``main()`` here.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Tuple

import pyqtgraph as pg
from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication, QMainWindow

from ..config.runtime import LabConfig, default_config_path, load_config
from ..logging_config import setup_logging
from .main_window import MainWindow

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CartLab: Newton's 2nd law cart simulator")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config file (default: $CARTLAB_CONFIG, else built-in defaults)",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="INFO",
        help="Console/file log level (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Optional file to mirror log output to",
    )
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def create_app(
    argv: list[str] | None = None,
    *,
    config: LabConfig | None = None,
) -> Tuple[QApplication, QMainWindow]:
    """
    Create the QApplication and main CartLab window.

    Parameters
    ----------
    argv:
        Optional argument list to pass to :class:`QApplication`.
    config:
        Runtime configuration; defaults are used when omitted.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window, not yet shown.
    """
    qt_args = argv if argv is not None else sys.argv
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")
    pg.setConfigOptions(antialias=True, background="w", foreground="k")

    window = MainWindow(config=config)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    config_path = args.config or default_config_path()
    config = load_config(config_path).sanitized()
    logger.info("Loaded config from %s", config_path or "built-in defaults")

    app, win = create_app(qt_argv, config=config)
    win.resize(1400, 860)
    win.show()
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()
