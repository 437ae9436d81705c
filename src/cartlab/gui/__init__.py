"""PySide6 + pyqtgraph desktop shell for the cart lab."""
