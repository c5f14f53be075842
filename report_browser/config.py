"""
Configuration model and YAML I/O for report-browser.

This module defines the Pydantic model that maps 1:1 to a storage config
YAML file, plus helpers for loading and saving it.

Key model:
- StorageConfig: base storage directory + allowed report file extensions.

Key functions:
- load_config(path) -> StorageConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

The model is frozen. A config value is built once and passed explicitly
into every component.

Example YAML::

    base_dir: /mnt/nas/reports
    allowed_extensions: xlsx,xls,csv,txt
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from report_browser.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = ("xlsx", "xls", "csv", "txt")


class StorageConfig(BaseModel):
    """Storage settings consumed by the sandbox, browser and parsers."""

    model_config = ConfigDict(frozen=True)

    base_dir: str = Field(..., description="Absolute path of the storage root")
    allowed_extensions: tuple[str, ...] = Field(
        DEFAULT_ALLOWED_EXTENSIONS,
        description="Report file extensions (lowercase, without dot)",
    )

    @field_validator("base_dir")
    @classmethod
    def _normalize_base_dir(cls, value: str) -> str:
        if not str(value).strip():
            raise ValueError("base_dir must not be empty")
        return os.path.normpath(str(value))

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: object) -> object:
        """Accept the comma-separated form used in property files."""
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            exts = [str(v).strip().lstrip(".").lower() for v in value]
            return tuple(e for e in exts if e)
        return value

    @property
    def base_path(self) -> Path:
        return Path(self.base_dir)


def load_config(path: str | Path) -> StorageConfig:
    """Load and validate a storage config YAML file.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    config = StorageConfig.model_validate(raw)
    logger.info("Loaded config from %s (base_dir=%s)", path, config.base_dir)
    return config


def save_config(config: StorageConfig, path: str | Path) -> None:
    """Serialize a StorageConfig to YAML.

    Extensions are written in the comma-separated form.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "base_dir": config.base_dir,
        "allowed_extensions": ",".join(config.allowed_extensions),
    }
    with open(path, "w", encoding="utf-8") as f:
        f.write("# report-browser storage configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
