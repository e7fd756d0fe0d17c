"""Settings for the Firebolt driver, built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Environment Variables (highest priority)
    2. ``.env`` file
    3. Default Values in code (lowest priority)

Environment Variable Naming:
    - Default data source: ``FIREBOLT_<SETTING>`` (e.g. ``FIREBOLT_DB_USER``)
    - Named data source: ``FIREBOLT_DS_<NAME>_<SETTING>``

Quick Start:
    >>> from firebolt_driver.settings import get_settings
    >>> settings = get_settings("reporting")
    >>> config = settings.to_driver_config({"read_only": False})
"""

from .base import DriverBaseSettings
from .datasource import FireboltSettings, _reload_settings, env_prefix_for, get_settings

__all__ = [
    "DriverBaseSettings",
    "FireboltSettings",
    "env_prefix_for",
    "get_settings",
]
