"""Connection settings keyed by logical data source.

The default data source reads ``FIREBOLT_*`` variables; any other data
source ``name`` reads ``FIREBOLT_DS_<NAME>_*``, so several Firebolt
databases can be configured side by side:

    FIREBOLT_DB_USER=service-account-id
    FIREBOLT_DS_REPORTING_DB_USER=analyst@example.com
"""

import re
from importlib import metadata
from typing import Any, Dict, Mapping, Optional

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from firebolt_driver.__version__ import __version__
from firebolt_driver.common.exceptions import configuration_error
from firebolt_driver.constants import (
    DEFAULT_API_ENDPOINT,
    DEFAULT_DATA_SOURCE,
    DEFAULT_TEST_CONNECTION_TIMEOUT,
    USER_CLIENT_NAME,
)
from firebolt_driver.logging import get_logger
from firebolt_driver.types.models import (
    Auth,
    ClientCredentialsAuth,
    ConnectionConfig,
    DriverConfig,
    UsernamePasswordAuth,
)

from .base import DriverBaseSettings

logger = get_logger(__name__)

_DATA_SOURCE_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


def engine_client_version() -> str:
    """Version of the installed firebolt-sdk, sent to Firebolt with the client name.

    Falls back to the driver's own version when a custom engine client is
    used without the SDK.
    """
    try:
        return metadata.version("firebolt-sdk")
    except metadata.PackageNotFoundError:
        return __version__


def env_prefix_for(data_source: str = DEFAULT_DATA_SOURCE) -> str:
    """Return the environment variable prefix for a data source.

    Raises:
        DriverError: If the data source name cannot form an environment variable.
    """
    if not _DATA_SOURCE_NAME.match(data_source):
        raise configuration_error(
            f"Invalid data source name '{data_source}'. "
            f"Data source names must be alphanumeric with optional underscores or hyphens.",
            config_key="data_source",
        )
    if data_source == DEFAULT_DATA_SOURCE:
        return FireboltSettings.get_env_prefix()
    return f"{FireboltSettings.get_env_prefix()}DS_{data_source.upper().replace('-', '_')}_"


class FireboltSettings(DriverBaseSettings):
    """Configuration values for one Firebolt data source."""

    model_config = SettingsConfigDict(
        env_prefix="FIREBOLT_",
        case_sensitive=False
    )

    db_user: Optional[str] = Field(
        None,
        description="User e-mail (legacy auth) or service account client ID"
    )
    db_pass: Optional[SecretStr] = Field(
        None,
        description="Password or service account client secret"
    )
    db_name: Optional[str] = Field(None, description="Database to connect to")
    account: Optional[str] = Field(None, description="Firebolt account name")
    engine_name: Optional[str] = Field(
        None,
        description="Engine to run queries on; started on demand"
    )
    api_endpoint: str = Field(default=DEFAULT_API_ENDPOINT)
    engine_endpoint: Optional[str] = Field(
        None,
        description="Deprecated direct engine URL, used when no engine name is set"
    )
    max_pool_size: Optional[int] = Field(default=None, ge=1)
    test_connection_timeout: float = Field(
        default=DEFAULT_TEST_CONNECTION_TIMEOUT,
        gt=0,
        description="Seconds to wait for connection validation"
    )
    read_only: bool = Field(default=True)

    @classmethod
    def get_env_prefix(cls) -> str:
        return "FIREBOLT_"

    @classmethod
    def for_data_source(cls, data_source: str = DEFAULT_DATA_SOURCE) -> "FireboltSettings":
        """Load the settings of ``data_source`` from the environment."""
        return cls(_env_prefix=env_prefix_for(data_source))

    def build_auth(self) -> Auth:
        """Choose the credential kind from the shape of the user name.

        Raises:
            DriverError: If no user is configured.
        """
        if not self.db_user:
            raise configuration_error(
                "Firebolt user is not configured",
                config_key=f"{self.get_env_prefix()}DB_USER",
            )
        secret = self.db_pass or SecretStr("")
        if "@" in self.db_user:
            return UsernamePasswordAuth(username=self.db_user, password=secret)
        return ClientCredentialsAuth(client_id=self.db_user, client_secret=secret)

    def to_driver_config(self, overrides: Optional[Mapping[str, Any]] = None) -> DriverConfig:
        """Merge these settings with caller overrides into a DriverConfig.

        Top-level keys of ``overrides`` (``read_only``, ``api_endpoint``)
        replace the settings values; ``overrides["connection"]`` is merged
        key by key over the connection built from settings.
        """
        overrides = dict(overrides or {})
        connection_overrides: Dict[str, Any] = dict(overrides.pop("connection", None) or {})

        connection: Dict[str, Any] = {
            "database": self.db_name,
            "account": self.account,
            "engine_name": self.engine_name,
            "engine_endpoint": self.engine_endpoint,
            "additional_parameters": {
                "user_clients": [{"name": USER_CLIENT_NAME, "version": engine_client_version()}],
            },
        }
        if "auth" not in connection_overrides:
            connection["auth"] = self.build_auth()
        connection.update(connection_overrides)

        config: Dict[str, Any] = {
            "read_only": self.read_only,
            "api_endpoint": self.api_endpoint,
            **overrides,
            "connection": ConnectionConfig(**connection),
        }
        driver_config = DriverConfig(**config)
        logger.debug(
            "Driver configuration built",
            extra={
                "account": driver_config.connection.account,
                "database": driver_config.connection.database,
                "engine_name": driver_config.connection.engine_name,
                "auth_kind": type(driver_config.connection.auth).__name__,
            },
        )
        return driver_config


_settings: Dict[str, FireboltSettings] = {}


def get_settings(data_source: str = DEFAULT_DATA_SOURCE, force_reload: bool = False) -> FireboltSettings:
    """Get the cached settings instance for a data source.

    Args:
        data_source: Logical data source name.
        force_reload: If True, re-read the environment even if cached.

    Returns:
        FireboltSettings: The cached settings for ``data_source``
    """
    if data_source not in _settings or force_reload:
        _settings[data_source] = FireboltSettings.for_data_source(data_source)
    return _settings[data_source]


def _reload_settings() -> None:
    """Drop every cached settings instance (for tests)."""
    _settings.clear()
