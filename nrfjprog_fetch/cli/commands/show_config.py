"""
Show-config command implementation.

Prints the platform configuration the fetch command would use.
"""

import logging

from nrfjprog_fetch.cli.utils import EXIT_ENVIRONMENT, EXIT_SUCCESS, load_run_context
from nrfjprog_fetch.core.exceptions import (
    ConfigurationError,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the show-config command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    try:
        context = load_run_context(args)
    except (ConfigurationError, UnsupportedPlatformError) as e:
        logger.error(str(e))
        return EXIT_ENVIRONMENT

    config = context.config
    print(f"Platform:       {config.platform_id}")
    print(f"URL:            {config.url}")
    print(f"Download to:    {config.destination_file}")
    print(f"Binding module: {context.settings.binding_module}")
    print(f"Library:        {config.library_name}")
    if config.extract_to:
        print(f"Extract to:     {config.extract_to}")
    if config.copy_files:
        rule = config.copy_files
        print(f"Copy from:      {rule.source}")
        print(f"  libraries:    {rule.destination} (pattern {rule.pattern.pattern})")
        print(f"  headers:      {rule.header_destination}")
    if config.spawn_child:
        print(f"Run installer:  {config.spawn_child}")
    if config.header_override:
        print(f"Header check:   {config.header_override}")
    for directory in config.library_dirs:
        print(f"Search path:    {directory}")

    return EXIT_SUCCESS
