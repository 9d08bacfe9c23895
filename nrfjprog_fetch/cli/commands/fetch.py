"""
Fetch command implementation.

Probes the nrfjprog library and downloads it when it is missing.
"""

import logging

from nrfjprog_fetch.binding.prober import CapabilityProber
from nrfjprog_fetch.cli.utils import (
    EXIT_ENVIRONMENT,
    EXIT_FAILURE,
    EXIT_SUCCESS,
    load_run_context,
)
from nrfjprog_fetch.core.exceptions import (
    ConfigurationError,
    UnsupportedPlatformError,
)
from nrfjprog_fetch.fetcher import ensure_library

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the fetch command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when the library is usable or being installed)
    """
    try:
        context = load_run_context(args)
    except (ConfigurationError, UnsupportedPlatformError) as e:
        logger.error(str(e))
        return EXIT_ENVIRONMENT

    prober = CapabilityProber(context.config, context.settings.binding_module)
    report = ensure_library(context.config, prober)

    logger.debug(f"Fetch outcome: {report.outcome.value}")
    return EXIT_SUCCESS if report.outcome.succeeded else EXIT_FAILURE
