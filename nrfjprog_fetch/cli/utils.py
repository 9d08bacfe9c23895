"""
Shared utilities for CLI commands.

Turns parsed arguments into the settings and platform configuration every
command runs with.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from nrfjprog_fetch.config import FetchSettings, load_settings
from nrfjprog_fetch.core.platform import (
    PlatformConfig,
    detect_platform,
    resolve_platform_config,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ENVIRONMENT = 2


@dataclass
class RunContext:
    """Settings and platform configuration for one command run."""

    settings: FetchSettings
    platform_id: str
    config: PlatformConfig


def load_run_context(args) -> RunContext:
    """
    Resolve settings and the platform configuration from CLI arguments.

    Command line flags override configuration file values.

    Args:
        args: Parsed arguments

    Returns:
        RunContext for the selected platform

    Raises:
        ConfigurationError: If the configuration file is invalid
        UnsupportedPlatformError: If the platform has no configuration
    """
    settings = load_settings(getattr(args, "config", None))

    install_root = getattr(args, "install_root", None)
    if install_root is not None:
        settings.install_root = Path(install_root).resolve()

    download_dir = getattr(args, "download_dir", None)
    if download_dir is not None:
        settings.download_dir = Path(download_dir).resolve()

    binding_module = getattr(args, "binding_module", None)
    if binding_module:
        settings.binding_module = binding_module

    platform_id = getattr(args, "platform", None) or detect_platform()
    logger.debug(f"Platform: {platform_id}")

    config = resolve_platform_config(platform_id, settings.platform_configs())
    return RunContext(settings=settings, platform_id=platform_id, config=config)
