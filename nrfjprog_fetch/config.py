"""
Settings for nrfjprog-fetch.

Settings come from an optional YAML file and are overridden by command line
flags. Example ``nrfjprog-fetch.yaml``::

    download_dir: build/nrfjprog
    install_root: .
    binding:
      module: nrfjprog_fetch.binding.native
      library_dirs:
        - /opt/nrfjprog
    platforms:
      linux:
        url: https://mirror.example.com/nrfjprog-linux64.tar
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from nrfjprog_fetch.binding.prober import DEFAULT_BINDING_MODULE
from nrfjprog_fetch.core.exceptions import ConfigurationError
from nrfjprog_fetch.core.platform import (
    SUPPORTED_PLATFORMS,
    PlatformConfig,
    build_platform_configs,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "nrfjprog-fetch.yaml"
DEFAULT_DOWNLOAD_DIR_NAME = "nrfjprog"

KNOWN_KEYS = {"download_dir", "install_root", "binding", "platforms"}


@dataclass
class FetchSettings:
    """Resolved settings for one run."""

    install_root: Path = field(default_factory=Path.cwd)
    download_dir: Optional[Path] = None
    binding_module: str = DEFAULT_BINDING_MODULE
    library_dirs: List[Path] = field(default_factory=list)
    url_overrides: Dict[str, str] = field(default_factory=dict)

    @property
    def resolved_download_dir(self) -> Path:
        if self.download_dir is None:
            return self.install_root / DEFAULT_DOWNLOAD_DIR_NAME
        if not self.download_dir.is_absolute():
            return self.install_root / self.download_dir
        return self.download_dir

    def platform_configs(
        self, environ: Optional[Mapping[str, str]] = None
    ) -> Dict[str, PlatformConfig]:
        """
        Build the platform table with this run's directories and overrides applied.

        Args:
            environ: Environment for vendor path lookups (default: os.environ)

        Returns:
            Mapping of platform identifier to PlatformConfig
        """
        configs = build_platform_configs(
            self.resolved_download_dir, self.install_root, environ
        )
        for platform_id, config in configs.items():
            if platform_id in self.url_overrides:
                config = config.with_url(self.url_overrides[platform_id])
            if self.library_dirs:
                config = config.with_library_dirs(*self.library_dirs)
            configs[platform_id] = config
        return configs


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, or invalid YAML
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Top level of {config_file} must be a mapping")
    return config


def _expect(value: Any, kind: type, key: str) -> Any:
    if not isinstance(value, kind):
        raise ConfigurationError(
            f"'{key}' must be a {kind.__name__}, got {type(value).__name__}"
        )
    return value


def settings_from_dict(
    data: Mapping[str, Any], base_dir: Optional[Path] = None
) -> FetchSettings:
    """
    Build FetchSettings from parsed configuration.

    Relative paths are resolved against base_dir (the config file's directory).

    Raises:
        ConfigurationError: If a value has the wrong type or an unknown platform
    """
    base_dir = base_dir or Path.cwd()
    settings = FetchSettings(install_root=base_dir)

    for key in set(data) - KNOWN_KEYS:
        logger.debug(f"Ignoring unknown configuration key: {key}")

    if "install_root" in data:
        install_root = _expect(data["install_root"], str, "install_root")
        settings.install_root = base_dir / install_root

    if "download_dir" in data:
        download_dir = _expect(data["download_dir"], str, "download_dir")
        settings.download_dir = Path(download_dir)

    binding = _expect(data.get("binding", {}), dict, "binding")
    if "module" in binding:
        settings.binding_module = _expect(binding["module"], str, "binding.module")
    library_dirs = _expect(
        binding.get("library_dirs", []), list, "binding.library_dirs"
    )
    for entry in library_dirs:
        settings.library_dirs.append(
            base_dir / _expect(entry, str, "binding.library_dirs[]")
        )

    platforms = _expect(data.get("platforms", {}), dict, "platforms")
    for platform_id, overrides in platforms.items():
        if platform_id not in SUPPORTED_PLATFORMS:
            raise ConfigurationError(
                f"Unknown platform '{platform_id}' in configuration. "
                f"Supported: {', '.join(SUPPORTED_PLATFORMS)}"
            )
        overrides = _expect(overrides, dict, f"platforms.{platform_id}")
        if "url" in overrides:
            url = _expect(overrides["url"], str, f"platforms.{platform_id}.url")
            if not url.strip():
                raise ConfigurationError(
                    f"'platforms.{platform_id}.url' must not be empty"
                )
            settings.url_overrides[platform_id] = url

    return settings


def load_settings(config_file: Optional[Path] = None) -> FetchSettings:
    """
    Load settings from a configuration file.

    Args:
        config_file: Explicit file (must exist). When None, ./nrfjprog-fetch.yaml
            is used if present.

    Returns:
        FetchSettings with file values applied
    """
    required = config_file is not None
    if config_file is None:
        config_file = Path.cwd() / DEFAULT_CONFIG_FILE

    data = load_yaml_config(config_file, required=required)
    return settings_from_dict(data, base_dir=config_file.resolve().parent)
