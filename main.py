from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

# Put 'src' on sys.path so 'cartlab' imports from a plain checkout
REPO_ROOT = Path(__file__).resolve().parent
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cartlab.gui.application import main as run_gui_main


def main(argv: Sequence[str] | None = None) -> None:
    """
    Launch the CartLab desktop GUI.

    Parameters
    ----------
    argv:
        Command-line arguments (``--config``, ``--log-level``, ``--log-file``
        plus any Qt options). If None, uses sys.argv.
    """
    run_gui_main(list(sys.argv if argv is None else argv))


if __name__ == "__main__":
    main(sys.argv)
