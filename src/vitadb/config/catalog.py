"""Catalog import configuration, loaded once at startup from an optional TOML file.

Example ``vitadb.toml``::

    [csv]
    separator = "\\t"

    [csv.mapping]
    short_id = "Title ID"
    package_url = "PKG direct link"
    license_token = "zRIF"

    [sources]
    apps = "https://example.org/PSV_GAMES.tsv"
    dlc = "https://example.org/PSV_DLCS.tsv"

    [license]
    token_prefix = "KO5i"
    dictionary_path = "zrif.dict"
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final, cast

from vitadb.domain.model import ImportKind
from vitadb.domain.reconciliation.contracts import MAPPABLE_ROW_FIELDS
from vitadb.domain.reconciliation.sanitize import ZRIF_PREFIX

from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError

DEFAULT_CONFIG_FILENAME: Final[str] = "vitadb.toml"
DEFAULT_CSV_SEPARATOR: Final[str] = "\t"
DEFAULT_CSV_MAPPING: Final[Mapping[str, str]] = MappingProxyType(
    {
        "short_id": "TITLE_ID",
        "canonical_id": "CONTENT_ID",
        "name": "NAME",
        "alt_name": "ALT_NAME",
        "package_url": "PKG_URL",
        "license_token": "ZRIF",
    }
)


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    csv_separator: str = DEFAULT_CSV_SEPARATOR
    csv_mapping: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CSV_MAPPING)
    sources: Mapping[ImportKind, str] = field(default_factory=lambda: MappingProxyType({}))
    token_prefix: str = ZRIF_PREFIX
    license_dictionary_path: Path | None = None


def build_csv_mapping(overrides: Mapping[str, object]) -> Mapping[str, str]:
    """Overlay ``overrides`` on the default mapping; unknown field names are rejected."""

    unknown = sorted(set(overrides) - set(MAPPABLE_ROW_FIELDS))
    if unknown:
        raise ConfigurationError(
            f"Unknown csv mapping field(s): {', '.join(unknown)} "
            f"(expected one of: {', '.join(MAPPABLE_ROW_FIELDS)})"
        )
    mapping = dict(DEFAULT_CSV_MAPPING)
    for row_field, column in overrides.items():
        if not isinstance(column, str):
            raise ConfigurationError(f"csv mapping for {row_field} must be a string")
        if column.strip():
            mapping[row_field] = column.strip()
    return MappingProxyType(mapping)


def _build_sources(section: Mapping[str, object]) -> Mapping[ImportKind, str]:
    sources: dict[ImportKind, str] = {}
    for key, value in section.items():
        try:
            kind = ImportKind(key)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown import source: {key}") from exc
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"Import source {key} must be a non-empty string")
        sources[kind] = value.strip()
    return MappingProxyType(sources)


def _section(document: Mapping[str, object], name: str) -> Mapping[str, object]:
    section = document.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[{name}] must be a table")
    return cast(Mapping[str, object], section)


def parse_catalog_config(
    document: Mapping[str, object],
    *,
    base_dir: Path | None = None,
) -> CatalogConfig:
    csv_section = _section(document, "csv")
    license_section = _section(document, "license")

    separator = csv_section.get("separator", DEFAULT_CSV_SEPARATOR)
    if not isinstance(separator, str) or len(separator) != 1:
        raise ConfigurationError("csv separator must be a single character")

    token_prefix = license_section.get("token_prefix", ZRIF_PREFIX)
    if not isinstance(token_prefix, str) or not token_prefix:
        raise ConfigurationError("license token_prefix must be a non-empty string")

    dictionary_path: Path | None = None
    raw_dictionary = license_section.get("dictionary_path")
    if raw_dictionary is not None:
        if not isinstance(raw_dictionary, str):
            raise ConfigurationError("license dictionary_path must be a string")
        dictionary_path = Path(raw_dictionary).expanduser()
        if not dictionary_path.is_absolute() and base_dir is not None:
            dictionary_path = base_dir / dictionary_path

    return CatalogConfig(
        csv_separator=separator,
        csv_mapping=build_csv_mapping(_section(csv_section, "mapping")),
        sources=_build_sources(_section(document, "sources")),
        token_prefix=token_prefix,
        license_dictionary_path=dictionary_path,
    )


def load_catalog_config(path: Path) -> CatalogConfig:
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc
    return parse_catalog_config(document, base_dir=path.resolve().parent)


def get_catalog_config(*, path: Path | None = None) -> CatalogConfig:
    """Load ``path``, ``$VITADB_CONFIG`` or ``./vitadb.toml``; defaults when none exists."""

    if path is not None:
        if not path.is_file():
            raise MissingConfigurationError(f"Configuration file {path} was not found")
        return load_catalog_config(path)
    env_path = optional_env_var("VITADB_CONFIG")
    if env_path is not None:
        return get_catalog_config(path=Path(env_path))
    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_path.is_file():
        return load_catalog_config(default_path)
    return CatalogConfig()
