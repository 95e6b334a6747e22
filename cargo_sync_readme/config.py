"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from .constants import DEFAULT_MAX_FILE_SIZE
from .manifest import Manifest, PreferDocFrom

METADATA_TABLE = ("package", "metadata", "sync-readme")


@dataclass
class SyncConfig:
    """Settings for synchronizing a README.

    Attributes:
        show_hidden_doc: Keep hidden lines of code examples.
        crlf: Generate ``\\r\\n`` line breaks in the synchronized region.
        prefer_doc_from: ``"bin"`` or ``"lib"`` to pick the documented target.
        max_file_size: Maximum size in bytes of the files that are read.

    Examples:
        SyncConfig(show_hidden_doc=True, prefer_doc_from="lib")
    """

    show_hidden_doc: bool = False
    crlf: bool = False
    prefer_doc_from: str | None = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    @property
    def preferred_target(self) -> PreferDocFrom | None:
        if self.prefer_doc_from is None:
            return None
        return PreferDocFrom(self.prefer_doc_from)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`prefer_doc_from` must be one of: bin, lib")
    """


_MISSING = object()


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def load_config(manifest: Manifest) -> SyncConfig:
    """Load configuration from the ``[package.metadata.sync-readme]`` table.

    Keys may be written in kebab-case (``show-hidden-doc``) or snake_case.
    Returns default values when the table is absent or empty.

    Args:
        manifest: Manifest of the crate being synchronized.

    Returns:
        SyncConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is not a mapping or contains unsupported keys.

    Examples:
        load_config(Manifest.find(Path.cwd()))
    """
    table_display = ".".join(METADATA_TABLE)
    raw_config = _extract_table(manifest.data, METADATA_TABLE)

    if raw_config is _MISSING or raw_config is None:
        return SyncConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {manifest.path}")

    known = {field.name for field in fields(SyncConfig)}
    values = {}
    for key, value in raw_config.items():
        name = key.replace("-", "_")
        if name not in known:
            raise ConfigError(
                f"Unsupported key `{key}` in `[{table_display}]` settings in {manifest.path}"
            )
        values[name] = value

    return SyncConfig(**values)


def validate_config(config: SyncConfig) -> None:
    """Validate a `SyncConfig` instance.

    Raises:
        ConfigError: If a flag is not a boolean, the preferred target is
            unknown, or the size limit is not a positive integer.
    """
    for name in ("show_hidden_doc", "crlf"):
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"`{name}` must be a boolean")

    if config.prefer_doc_from is not None and config.prefer_doc_from not in (
        PreferDocFrom.BINARY.value,
        PreferDocFrom.LIBRARY.value,
    ):
        raise ConfigError("`prefer_doc_from` must be one of: bin, lib")

    max_file_size = config.max_file_size
    if isinstance(max_file_size, bool) or not isinstance(max_file_size, int):
        raise ConfigError("`max_file_size` must be an integer")
    if max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: SyncConfig, **overrides: object) -> SyncConfig:
    """Apply override values to a `SyncConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        SyncConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `SyncConfig`.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(manifest: Manifest, **overrides: object) -> SyncConfig:
    """Load, override, and validate configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(manifest, crlf=True)
    """
    config = load_config(manifest)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
