"""Configuration objects and helpers for CartLab.

:mod:`runtime` loads an optional YAML file (``--config`` or the
``CARTLAB_CONFIG`` environment variable) into a typed :class:`LabConfig`
that sets trace length, sampling rate, measurement gates, and interaction
steps for the rest of the application.
"""

from .runtime import LabConfig, config_from_mapping, load_config

__all__ = ["LabConfig", "config_from_mapping", "load_config"]
