"""Runtime configuration model for installer updates.

This module owns all environment variable and config file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping, cast

from core.constants import (
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    DEFAULT_DOWNLOAD_DIR,
    DEFAULT_INSTSYS_PARTS_PATH,
    DEFAULT_UPDATES_DIR,
)
from core.errors import UpdatesConfigError, UpdatesDependencyError

_CONFIG_FILE_KEYS = frozenset(
    {"download_dir", "updates_dir", "instsys_parts_path", "tmp_dir", "command_timeout"}
)


@dataclass(frozen=True)
class UpdatesConfig:
    """Validated runtime configuration.

    Attributes:
        download_dir: Directory receiving squashed update images.
        updates_dir: Root directory holding update mount points.
        instsys_parts_path: Manifest splicing mount points into the root.
        tmp_dir: Optional parent directory for scoped temporary resources.
        command_timeout: Seconds before external tools are abandoned.
    """

    download_dir: Path
    updates_dir: Path
    instsys_parts_path: Path
    tmp_dir: Path | None
    command_timeout: float

    @classmethod
    def from_env(cls) -> "UpdatesConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            UpdatesConfigError: If environment values are invalid.
        """
        tmp_dir_value = os.getenv("INSTSYS_UPDATES_TMP_DIR")
        return cls(
            download_dir=_parse_path(
                os.getenv("INSTSYS_UPDATES_DOWNLOAD_DIR", str(DEFAULT_DOWNLOAD_DIR))
            ),
            updates_dir=_parse_path(os.getenv("INSTSYS_UPDATES_DIR", str(DEFAULT_UPDATES_DIR))),
            instsys_parts_path=_parse_path(
                os.getenv("INSTSYS_PARTS_PATH", str(DEFAULT_INSTSYS_PARTS_PATH))
            ),
            tmp_dir=_parse_path(tmp_dir_value) if tmp_dir_value else None,
            command_timeout=_parse_timeout(
                os.getenv("INSTSYS_UPDATES_COMMAND_TIMEOUT", str(DEFAULT_COMMAND_TIMEOUT_SECONDS)),
                "INSTSYS_UPDATES_COMMAND_TIMEOUT",
            ),
        )

    @classmethod
    def from_file(cls, config_path: str | Path) -> "UpdatesConfig":
        """Build config from a YAML file, using environment values for omitted keys.

        Args:
            config_path: Path to a YAML mapping with config keys.

        Returns:
            A validated config object.

        Raises:
            UpdatesConfigError: If the file is missing, malformed, or has unknown keys.
            UpdatesDependencyError: If PyYAML is unavailable.
        """
        payload = _load_yaml_mapping(Path(config_path))
        unknown_keys = sorted(set(payload) - _CONFIG_FILE_KEYS)
        if unknown_keys:
            raise UpdatesConfigError(
                f"Unknown config keys in {config_path}: {', '.join(unknown_keys)}. "
                f"Supported keys: {', '.join(sorted(_CONFIG_FILE_KEYS))}."
            )
        base = cls.from_env()
        tmp_dir = payload.get("tmp_dir", base.tmp_dir)
        return cls(
            download_dir=_parse_path(payload.get("download_dir", base.download_dir)),
            updates_dir=_parse_path(payload.get("updates_dir", base.updates_dir)),
            instsys_parts_path=_parse_path(
                payload.get("instsys_parts_path", base.instsys_parts_path)
            ),
            tmp_dir=_parse_path(tmp_dir) if tmp_dir else None,
            command_timeout=_parse_timeout(
                payload.get("command_timeout", base.command_timeout), "command_timeout"
            ),
        )


def _parse_path(raw_value: object) -> Path:
    return Path(str(raw_value)).expanduser()


def _parse_timeout(raw_value: object, source_name: str) -> float:
    """Parse a positive command timeout.

    Args:
        raw_value: Raw value from environment or config file.
        source_name: Variable or key name used in error messages.

    Returns:
        Parsed timeout in seconds.

    Raises:
        UpdatesConfigError: If value is not a positive number.
    """
    try:
        timeout = float(cast(str, raw_value))
    except (TypeError, ValueError) as error:
        raise UpdatesConfigError(
            f"Invalid {source_name} value: expected number of seconds, got '{raw_value}'. "
            f"Set {source_name} to a numeric value."
        ) from error
    if timeout <= 0:
        raise UpdatesConfigError(
            f"Invalid {source_name} value: expected a positive timeout, got {timeout}."
        )
    return timeout


def _load_yaml_mapping(config_file: Path) -> Mapping[str, object]:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise UpdatesDependencyError(
            "YAML config support requires PyYAML. Install with 'pip install pyyaml'."
        ) from error
    config_file = config_file.expanduser().resolve()
    if not config_file.exists():
        raise UpdatesConfigError(
            f"Config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise UpdatesConfigError(
            f"Failed to read config at {config_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise UpdatesConfigError(
            f"Failed to parse YAML config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise UpdatesConfigError(
            f"Invalid config at {config_file}: expected a mapping at top level."
        )
    return {str(key): value for key, value in payload.items()}
