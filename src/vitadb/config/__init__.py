"""Application configuration helpers."""

from __future__ import annotations

from .catalog import (
    DEFAULT_CSV_MAPPING,
    CatalogConfig,
    build_csv_mapping,
    get_catalog_config,
    load_catalog_config,
    parse_catalog_config,
)
from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http import HttpConfig, RetryPolicy, get_http_config
from .logging import configure_logging, verbosity_to_level
from .storage import DatabaseConfig, default_data_dir, get_database_config

__all__ = [
    "DEFAULT_CSV_MAPPING",
    "CatalogConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "HttpConfig",
    "MissingConfigurationError",
    "RetryPolicy",
    "build_csv_mapping",
    "configure_logging",
    "default_data_dir",
    "get_catalog_config",
    "get_database_config",
    "get_http_config",
    "load_catalog_config",
    "optional_env_var",
    "parse_catalog_config",
    "verbosity_to_level",
]
