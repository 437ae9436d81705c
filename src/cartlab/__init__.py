"""CartLab: a cart-and-hanging-mass lab simulator.

The package is split into Qt-free layers (:mod:`analysis`, :mod:`core`,
:mod:`physics`, :mod:`dataio`, :mod:`config`) that can be exercised from tests
and scripts, and the PySide6 desktop shell in :mod:`gui`.
"""

__version__ = "0.3.0"
