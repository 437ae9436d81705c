"""Signal synthesis and statistics.

Modules here operate on NumPy arrays and plain dataclasses only. They stay
free of Qt and file I/O so they can be reused from scripts, tests, or the
GUI alike:
- :mod:`noise` seeds reproducible Gaussian noise.
- :mod:`signals` synthesizes force/velocity traces for a trial.
- :mod:`regression` slices windows and fits lines.
- :mod:`measurement` applies the width/sample gates and the cross-trial fit.
"""
